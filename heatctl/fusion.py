"""
Sensor fusion.

Combine readings from the configured temperature sensors into
one representative temperature.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging
import math
from typing import Any, Optional

from .component import Component

__all__ = ['SensorFusion', 'fuse', 'is_valid_reading']

_logger = logging.getLogger(__package__)

Reading = tuple[str, Any]
SensorReader = Callable[[str], Optional[float]]


def is_valid_reading(value: Any) -> bool:
    """Return True if value is a usable (finite) temperature."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def fuse(readings: Iterable[Reading], max_temp_delta: float) -> Optional[float]:
    """
    Return the fused temperature or None if no valid reading exists.

    Invalid readings are logged and skipped. When the valid
    readings disagree, i.e. their spread is max_temp_delta or more,
    the highest one is returned. Otherwise the result is their mean.
    """
    valid = []
    for sensor_id, value in readings:
        if is_valid_reading(value):
            valid.append(value)
        else:
            _logger.warning("sensor %r: invalid reading %r, excluded", sensor_id, value)
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]
    highest = max(valid)
    if highest - min(valid) >= max_temp_delta:
        return highest
    return sum(valid) / len(valid)


class SensorFusion(Component):
    """
    Read all configured sensors and fuse the readings.

    Readings are never cached, every fuse() call reads
    all sensors again.
    """

    def __init__(
            self,
            sensor_ids: Sequence[str],
            read_sensor: SensorReader,
            max_temp_delta: float,
            **kwargs) -> None:
        super().__init__(**kwargs)
        self._sensor_ids = tuple(sensor_ids)
        self._read_sensor = read_sensor
        self._max_temp_delta = max_temp_delta

    @property
    def sensor_ids(self) -> tuple[str, ...]:
        return self._sensor_ids

    def read(self) -> list[Reading]:
        """
        Read all sensors in configuration order.

        A failing sensor yields a None reading.
        """
        readings = []
        for sensor_id in self._sensor_ids:
            try:
                value = self._read_sensor(sensor_id)
            except Exception as err:
                self.log_warning("error reading sensor %r: %r", sensor_id, err)
                value = None
            else:
                self.log_debug("sensor %r: %r", sensor_id, value)
            readings.append((sensor_id, value))
        return readings

    def fuse(self) -> Optional[float]:
        """Read the sensors and return the fused temperature or None."""
        temp = fuse(self.read(), self._max_temp_delta)
        if temp is None:
            self.log_warning("no valid temperature readings")
        else:
            self.log_debug("fused temperature: %s °C", temp)
        return temp
