"""
The heater control loop.

Every control period the loop evaluates, in this order:
  1. the communication fail-safe and the disabled (zero) threshold,
  2. the fused sensor temperature,
  3. the hysteresis decision,
and commands the relay accordingly. Each safety condition forces
the relay off and ends the period early.
"""

from __future__ import annotations

from collections.abc import Callable
import dataclasses as dc
import enum
import time
from typing import Any, Optional

from . import hysteresis
from .collaborators import Relay
from .component import Component
from .config import ControlConfig
from .fusion import SensorFusion, SensorReader
from .regulator import ControllerState, ThresholdRegulator
from .utils import timestr

__all__ = ['ControlLoop', 'TickOutcome', 'TickResult']


class TickOutcome(enum.Enum):
    RELAY_FAULT = 'relay not responding'
    FAILSAFE = 'no threshold update, fail-safe active'
    DISABLED = 'threshold is zero, heater disabled'
    NO_DATA = 'no valid temperature'
    SWITCHED_ON = 'heater switched on'
    SWITCHED_OFF = 'heater switched off'
    UNCHANGED = 'no change'


@dc.dataclass(frozen=True)
class TickResult:
    """Summary of one control period."""
    outcome: TickOutcome
    relay_on: Optional[bool]    # commanded or retained relay state, None = unknown
    temperature: Optional[float] = None
    target: Optional[float] = None


class ControlLoop(Component):
    """
    Thermostat controller for one heater relay.

    tick() is to be called periodically, see heatctl.run().
    on_message() is the handler for threshold messages.
    Both must not run at the same time unless they run in
    different threads; the shared state is protected by a lock.
    """

    def __init__(
            self,
            config: ControlConfig,
            relay: Relay,
            read_sensor: SensorReader,
            clock: Callable[[], float] = time.monotonic,
            **kwargs) -> None:
        super().__init__(**kwargs)
        self.config = config
        self._relay = relay
        self._clock = clock
        self.regulator = ThresholdRegulator(
            config.max_target_temp, clock(), debug=self.debug)
        self.fusion = SensorFusion(
            config.sensor_ids, read_sensor, config.max_temp_delta, debug=self.debug)
        self._failsafe_active = False
        self.last_result: Optional[TickResult] = None

    @property
    def relay(self) -> Relay:
        return self._relay

    def now(self) -> float:
        """Return the current time of the controller's clock."""
        return self._clock()

    def _command(self, on: bool) -> bool:
        """Send a command to the relay, return False on failure."""
        try:
            self._relay.set_relay_state(on)
        except Exception as err:
            # not retried, the next period will issue the command again
            self.log_error("relay command %s failed: %r", 'ON' if on else 'OFF', err)
            return False
        return True

    def _check_failsafe(self, now: float, state: ControllerState) -> bool:
        """Return True if the fail-safe is tripped, log transitions."""
        elapsed = max(0.0, now - state.last_update)
        tripped = elapsed > self.config.fail_safe_timeout
        if tripped and not self._failsafe_active:
            self.log_warning(
                "no threshold update for %s, heater forced off", timestr(elapsed))
        elif not tripped and self._failsafe_active:
            self.log_info("threshold updates resumed, fail-safe cleared")
        self._failsafe_active = tripped
        return tripped

    @property
    def failsafe_active(self) -> bool:
        return self._failsafe_active

    def tick(self, now: Optional[float] = None) -> TickResult:
        """
        Run one control period.

        Errors of the sensors and of the relay are logged and never
        propagated, the next period re-evaluates everything.
        """
        if now is None:
            now = self._clock()
        result = self._tick(now)
        self.last_result = result
        self.log_debug(
            "%s; relay %s, temperature %s, target %s",
            result.outcome.value,
            'unknown' if result.relay_on is None else hysteresis.HeaterState.of(result.relay_on),
            result.temperature, result.target)
        return result

    def _tick(self, now: float) -> TickResult:
        try:
            relay_on = bool(self._relay.get_relay_state())
        except Exception as err:
            self.log_error("cannot read the relay state: %r", err)
            # None = unknown, the off command failed too
            commanded_off = self._command(False)
            return TickResult(TickOutcome.RELAY_FAULT, relay_on=False if commanded_off else None)

        # target and last_update must come from the same snapshot
        state = self.regulator.snapshot()
        failsafe = self._check_failsafe(now, state)
        if failsafe or not state.heater_enabled:
            if relay_on and self._command(False):
                self.log_info("heater turned OFF")
                relay_on = False
            return TickResult(
                TickOutcome.FAILSAFE if failsafe else TickOutcome.DISABLED,
                relay_on=relay_on, target=state.target)

        temp = self.fusion.fuse()
        if temp is None:
            # unconditional, the relay state may be stale
            if self._command(False):
                relay_on = False
            return TickResult(TickOutcome.NO_DATA, relay_on=relay_on, target=state.target)

        new_state = hysteresis.decide(temp, state.target, self.config.hysteresis, relay_on)
        if new_state == relay_on:
            outcome = TickOutcome.UNCHANGED
        elif self._command(new_state):
            self.log_info(
                "temperature %s °C, threshold %s °C: heater turned %s",
                temp, state.target, hysteresis.HeaterState.of(new_state))
            outcome = TickOutcome.SWITCHED_ON if new_state else TickOutcome.SWITCHED_OFF
            relay_on = new_state
        else:
            outcome = TickOutcome.RELAY_FAULT
        return TickResult(outcome, relay_on=relay_on, temperature=temp, target=state.target)

    def on_message(self, topic: str, payload: Any) -> bool:
        """Handle a threshold message. Return True if accepted."""
        self.log_debug("message on %r: %r", topic, payload)
        return self.regulator.update(payload, self._clock())

    def shutdown(self) -> None:
        """Switch the heater off before exit."""
        if self._command(False):
            self.log_info("heater turned OFF on shutdown")
