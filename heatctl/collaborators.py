"""
Interfaces to the hardware and simple in-process implementations.

The controller needs:
  - a relay (Relay subclass),
  - a sensor reader: a callable read_sensor(sensor_id) returning
    the temperature in °C or None,
  - a monotonic clock: a callable returning seconds.

MemoryRelay and SimulatedSensors serve the demo and the tests.
"""

from __future__ import annotations

import abc
from collections.abc import Iterator, Mapping, MutableMapping
import time
from typing import Optional

__all__ = ['Relay', 'MemoryRelay', 'SimulatedSensors']


class Relay(metaclass=abc.ABCMeta):
    """
    The heater relay.

    set_relay_state() is fire-and-forget. The controller reads
    the state back with get_relay_state() at the start of every
    control loop period.
    """

    @abc.abstractmethod
    def get_relay_state(self) -> bool:
        """Return True if the relay is on."""

    @abc.abstractmethod
    def set_relay_state(self, on: bool) -> None:
        """Switch the relay on or off."""


class MemoryRelay(Relay):
    """
    A relay existing only in memory.

    All commands are recorded in the history list as
    (timestamp, state) tuples.
    """

    def __init__(self, initial: bool = False, clock=time.monotonic) -> None:
        self._on = bool(initial)
        self._clock = clock
        self.history: list[tuple[float, bool]] = []

    def get_relay_state(self) -> bool:
        return self._on

    def set_relay_state(self, on: bool) -> None:
        self._on = bool(on)
        self.history.append((self._clock(), self._on))

    @property
    def commands(self) -> list[bool]:
        """Commanded states without timestamps."""
        return [state for _, state in self.history]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {'ON' if self._on else 'OFF'}>"


class SimulatedSensors(MutableMapping[str, Optional[float]]):
    """
    Simulated thermometers, a mapping sensor_id -> temperature.

    An instance is a sensor reader, call it with a sensor_id.
    Sensors not present in the mapping raise LookupError.
    """

    def __init__(self, values: Optional[Mapping[str, Optional[float]]] = None) -> None:
        self._values: dict[str, Optional[float]] = dict(values or {})

    def __call__(self, sensor_id: str) -> Optional[float]:
        try:
            return self._values[sensor_id]
        except KeyError:
            raise LookupError(f"sensor {sensor_id!r} is not connected") from None

    def __getitem__(self, sensor_id: str) -> Optional[float]:
        return self._values[sensor_id]

    def __setitem__(self, sensor_id: str, value: Optional[float]) -> None:
        self._values[sensor_id] = value

    def __delitem__(self, sensor_id: str) -> None:
        del self._values[sensor_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
