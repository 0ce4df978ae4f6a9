"""
Temperature threshold received from the remote controller.

The regulator validates and clamps threshold updates and
remembers when the last one was accepted. The control loop
uses that timestamp for the communication fail-safe.
"""

from __future__ import annotations

import dataclasses as dc
import math
import re
import threading
from typing import Any

from .component import Component
from .exceptions import InvalidThreshold

__all__ = ['ControllerState', 'ThresholdRegulator', 'parse_threshold']

TARGET_OFF = 0.0


# the longest leading decimal number, trailing text is ignored
_RE_LEADING_NUMBER = re.compile(
    r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)', flags=re.ASCII)


def parse_threshold(raw: Any) -> float:
    """
    Convert a threshold payload to a float.

    Accepted are numbers and text (str or UTF-8 bytes). Text
    must start with a decimal number, anything after it is
    ignored, e.g. "22 C" is 22.0.
    Raise InvalidThreshold if the result is not a finite number.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError:
            raise InvalidThreshold(f"Payload {raw!r} is not valid UTF-8 text") from None
    if isinstance(raw, bool):
        raise InvalidThreshold(f"Threshold must be a number, but got {raw!r}")
    if isinstance(raw, str):
        match = _RE_LEADING_NUMBER.match(raw)
        if match is None:
            raise InvalidThreshold(f"Threshold {raw!r} is not a number")
        value = float(match.group(1))
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        raise InvalidThreshold(f"Threshold must be a number or text, but got {raw!r}")
    if not math.isfinite(value):
        raise InvalidThreshold(f"Threshold {raw!r} is not a finite number")
    return value


@dc.dataclass(frozen=True)
class ControllerState:
    """A consistent copy of the regulator state."""
    target: float
    last_update: float

    @property
    def heater_enabled(self) -> bool:
        return self.target != TARGET_OFF


class ThresholdRegulator(Component):
    """
    Owner of the target temperature.

    The target starts at 0 (heater disabled) and the fail-safe
    clock starts at the creation time. Nothing is persisted.

    update() is called from the message handler, the other methods
    from the control loop. A lock protects the state, because the
    message handler may run in another thread.
    """

    def __init__(self, max_target_temp: float, now: float, **kwargs) -> None:
        super().__init__(**kwargs)
        self._max_target_temp = max_target_temp
        self._lock = threading.Lock()
        self._target = TARGET_OFF
        self._last_update = now

    @property
    def max_target_temp(self) -> float:
        return self._max_target_temp

    @property
    def target(self) -> float:
        with self._lock:
            return self._target

    @property
    def last_update(self) -> float:
        with self._lock:
            return self._last_update

    def snapshot(self) -> ControllerState:
        """Return both state values read together."""
        with self._lock:
            return ControllerState(target=self._target, last_update=self._last_update)

    def update(self, raw: Any, now: float) -> bool:
        """
        Process a threshold update. Return True if accepted.

        A rejected update leaves the state unchanged. An accepted
        value is clamped to max_target_temp and restarts the
        fail-safe clock. There is no lower bound.
        """
        try:
            value = parse_threshold(raw)
        except InvalidThreshold as err:
            self.log_warning("update rejected: %s", err)
            return False
        target = min(value, self._max_target_temp)
        with self._lock:
            self._target = target
            self._last_update = now
        if target < value:
            self.log_info(
                "threshold %s °C exceeds the limit, clamped to %s °C", value, target)
        else:
            self.log_info("threshold updated to %s °C", target)
        return True

    def reset_timer(self, now: float) -> None:
        """Restart the fail-safe clock without changing the target."""
        with self._lock:
            self._last_update = now
        self.log_debug("timer reset at %s", now)

    def elapsed_since(self, now: float) -> float:
        """
        Return seconds since the last accepted update.

        The result is never negative, a clock going backwards
        yields zero.
        """
        with self._lock:
            last_update = self._last_update
        return max(0.0, now - last_update)
