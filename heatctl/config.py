"""
Controller configuration.

The configuration is loaded once at startup and it is read-only
thereafter. Durations are stored in seconds, temperatures in °C.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses as dc
import json
import logging
import math
import os
from typing import Any, Union

from .exceptions import HeatctlConfigError
from .utils import time_period
from .utils.corrections import did_you_mean


__all__ = ['ControlConfig', 'load_config']

_logger = logging.getLogger(__package__)

DEFAULT_TOPIC = "shelly-anvil-chamber-heater/set_temperature_threshold"
DEFAULT_SENSORS = ('temperature:100', 'temperature:101')


def _duration(name: str, value: Any) -> float:
    try:
        seconds = time_period(value)
    except (TypeError, ValueError) as err:
        raise HeatctlConfigError(f"{name}: {err}") from None
    if seconds is None:
        raise HeatctlConfigError(f"{name} is required")
    return seconds


def _temperature(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise HeatctlConfigError(f"{name} must be a number, but got {value!r}")
    if not math.isfinite(value):
        raise HeatctlConfigError(f"{name} must be a finite number, but got {value!r}")
    return float(value)


@dc.dataclass(frozen=True)
class ControlConfig:
    """
    Static controller parameters.

    topic -- message topic carrying the temperature threshold
    sensor_ids -- temperature sensors, their order is the fusion order
    timer_interval -- control loop period
    fail_safe_timeout -- the heater is forced off when no threshold
        update was accepted for this long
    hysteresis -- half width of the dead band around the threshold
    max_temp_delta -- readings differing by this much or more are
        considered a disagreement
    max_target_temp -- upper clamp for the threshold

    Durations may be given as seconds or as strings like "10m".
    """

    topic: str = DEFAULT_TOPIC
    sensor_ids: tuple[str, ...] = DEFAULT_SENSORS
    timer_interval: Union[float, str] = 5.0
    fail_safe_timeout: Union[float, str] = 600.0
    hysteresis: float = 1.0
    max_temp_delta: float = 20.0
    max_target_temp: float = 60.0

    def __post_init__(self) -> None:
        # frozen dataclass: normalized values must be set with object.__setattr__
        setattr_ = object.__setattr__
        if not isinstance(self.topic, str) or not self.topic:
            raise HeatctlConfigError(f"topic must be a non-empty string, but got {self.topic!r}")
        sensor_ids = self.sensor_ids
        if isinstance(sensor_ids, str):
            sensor_ids = (sensor_ids,)
        sensor_ids = tuple(sensor_ids)
        if not sensor_ids:
            raise HeatctlConfigError("at least one temperature sensor is required")
        for sid in sensor_ids:
            if not isinstance(sid, str) or not sid:
                raise HeatctlConfigError(
                    f"sensor id must be a non-empty string, but got {sid!r}")
        if len(set(sensor_ids)) != len(sensor_ids):
            raise HeatctlConfigError(f"duplicate sensor ids in {sensor_ids!r}")
        setattr_(self, 'sensor_ids', sensor_ids)

        for name in ('timer_interval', 'fail_safe_timeout'):
            seconds = _duration(name, getattr(self, name))
            if seconds <= 0.0:
                raise HeatctlConfigError(f"{name} must be positive")
            setattr_(self, name, seconds)
        for name in ('hysteresis', 'max_temp_delta', 'max_target_temp'):
            setattr_(self, name, _temperature(name, getattr(self, name)))
        if self.hysteresis < 0.0:
            raise HeatctlConfigError("hysteresis must not be negative")
        if self.max_temp_delta <= 0.0:
            raise HeatctlConfigError("max_temp_delta must be positive")
        if self.max_target_temp <= 0.0:
            raise HeatctlConfigError("max_target_temp must be positive")

        if len(sensor_ids) > 2:
            _logger.warning(
                "%d sensors configured; readings will be averaged unless their spread "
                "reaches max_temp_delta, then the highest one is used", len(sensor_ids))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ControlConfig:
        """Create a configuration from a mapping, e.g. parsed JSON."""
        names = [field.name for field in dc.fields(cls)]
        for key in data:
            if key not in names:
                raise HeatctlConfigError(
                    f"Unknown configuration item {key!r}{did_you_mean(key, names)}")
        return cls(**data)

    def as_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain dict."""
        return {
            **dc.asdict(self),
            'sensor_ids': list(self.sensor_ids),
            }


def load_config(path: Union[str, os.PathLike]) -> ControlConfig:
    """Load the configuration from a JSON file."""
    with open(path, encoding='utf-8') as cfg_file:
        try:
            data = json.load(cfg_file)
        except json.JSONDecodeError as err:
            raise HeatctlConfigError(f"{os.fspath(path)}: invalid JSON: {err}") from None
    if not isinstance(data, dict):
        raise HeatctlConfigError(f"{os.fspath(path)}: a JSON object was expected")
    return ControlConfig.from_mapping(data)
