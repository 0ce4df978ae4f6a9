"""
Helpers for unit tests.
"""

# pylint: disable=missing-docstring, protected-access
# pylint: disable=invalid-name, redefined-outer-name, unused-argument, unused-variable

import itertools

import heatctl


__all__ = [
    'FakeClock', 'FlakyRelay', 'compare_logs',
    'SENSOR_1', 'SENSOR_2', 'make_control']

SENSOR_1 = 'temperature:100'
SENSOR_2 = 'temperature:101'


class FakeClock:
    """A manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.time = start

    def __call__(self):
        return self.time

    def advance(self, seconds):
        self.time += seconds
        return self.time


class FlakyRelay(heatctl.MemoryRelay):
    """A MemoryRelay with switchable read and write failures."""

    def __init__(self, *args, **kwargs):
        self.fail_get = False
        self.fail_set = False
        super().__init__(*args, **kwargs)

    def get_relay_state(self):
        if self.fail_get:
            raise OSError("relay read error")
        return super().get_relay_state()

    def set_relay_state(self, on):
        if self.fail_set:
            raise OSError("relay write error")
        super().set_relay_state(on)


def make_control(config=None, temps=(20.0, 20.0), relay_on=False, **kwargs):
    """
    Create a controller with a fake clock, simulated sensors and relay.

    Return (control, clock, sensors, relay).
    """
    if config is None:
        config = heatctl.ControlConfig(**kwargs)
    clock = FakeClock()
    sensors = heatctl.SimulatedSensors(dict(zip(config.sensor_ids, temps)))
    relay = FlakyRelay(relay_on, clock=clock)
    control = heatctl.ControlLoop(config, relay, sensors, clock=clock)
    return control, clock, sensors, relay


_FILL = object()

def compare_logs(tlog, slog, delta_abs=10, delta_rel=0.1):
    """
    Compare the tlog with an expected standard slog.

    The allowed negative difference is only 1/5 of the allowed positive
    difference, because due to CPU load and overhead the tlog is
    expected to lag behind the slog, and not to outrun it.

    delta_abs is in milliseconds (10 = +10/-2 ms difference allowed),
    delta_rel is a ratio (0.1 = +10/-2 % difference allowed),
    the timestamp values must pass the combined delta.

    Timestamp 0 (expected value) is not checked at all,
    because most false negatives were caused by startup
    delays.
    """
    for (tts, tmsg), (sts, smsg) in itertools.zip_longest(tlog, slog, fillvalue=(_FILL, None)):
        assert tts is not _FILL, f"Missing: {(sts, smsg)}"
        assert sts is not _FILL, f"Extra: {(tts, tmsg)}"
        assert tmsg == smsg, f"data: {(tts, tmsg)} does not match {(sts, smsg)}"
        if sts is None or sts == 0:
            continue
        if (tts - delta_abs)/sts > 1.0 + delta_rel:
            assert False, f"timestamps: {tts} is way above expected {sts} " \
            "(please repeat; timing tests may produce a false negative under high load!)"
        if (tts + delta_abs/5)/sts < 1.0 - delta_rel/5:
            assert False, f"timestamps: {tts} is way below expected {sts} " \
            "(please repeat; timing tests may produce a false negative under high load!)"

