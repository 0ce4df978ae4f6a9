import logging

import pytest

from .utils import make_control


@pytest.fixture
def ctl():
    """Return (control, clock, sensors, relay) with the default configuration."""
    return make_control()


@pytest.fixture
def warnings_log(caplog):
    """Capture heatctl messages with WARNING level and above."""
    caplog.set_level(logging.WARNING, logger='heatctl')
    return caplog
