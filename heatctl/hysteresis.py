"""
Two-state thermostat with hysteresis.
"""

from __future__ import annotations

import enum
from typing import Optional

__all__ = ['HeaterState', 'decide']


class HeaterState(enum.Enum):
    OFF = False
    ON = True

    @classmethod
    def of(cls, relay_on: bool) -> HeaterState:
        return cls.ON if relay_on else cls.OFF

    def __str__(self) -> str:
        return self.name


def decide(
        fused: Optional[float], target: float, hysteresis: float, relay_on: bool) -> bool:
    """
    Return the next relay state.

    The heater turns on below target - hysteresis and off at
    target + hysteresis or above. Between these limits the state
    does not change. No temperature (None) means off.

    The relay itself is the only state, it is passed in as
    relay_on and nothing is remembered here.
    """
    if fused is None:
        return False
    if relay_on:
        return fused < target + hysteresis
    return fused < target - hysteresis
