"""
Test modules from heatctl.utils and the test helpers.
"""
# pylint: disable=missing-docstring, protected-access
# pylint: disable=invalid-name, redefined-outer-name, unused-argument, unused-variable

import pytest

from heatctl import utils
from heatctl import envvars
from heatctl.utils.corrections import did_you_mean, suggest_corrections

from .utils import compare_logs


def test_compare_logs():
    """Check if we can rely on compare_logs()."""
    log = [(x, f'value_{x}') for x in range(0, 1000, 17)]
    compare_logs(log, log)
    with pytest.raises(AssertionError):
        compare_logs(log, log[:-1])                         # diff length
    with pytest.raises(AssertionError):
        compare_logs(
            [(0, 'start'), (22, 'string')],
            [(0, 'start'), (22, 'String')]) # s vs S in string
    compare_logs(
        [(0, 'start'), (15, 'x')],          # tlog (test)
        [(0, 'start'), (10, 'x')],          # slog (standard)
        delta_abs=5, delta_rel=0)
    with pytest.raises(AssertionError, match="15 is way above expected 10"):
        compare_logs(
            [(0, 'start'), (15, 'x')],
            [(0, 'start'), (10, 'x')],
            delta_abs=4, delta_rel=0)


def test_tconst():
    assert utils.SEC_PER_MIN == 60
    assert utils.SEC_PER_HOUR == 60*60
    assert utils.SEC_PER_DAY == 24*60*60


def test_convert():
    convert = utils.convert
    assert isinstance(convert('1m'), float)
    assert convert('10.5') == convert('10.5s') == convert('0m10.5') == 10.5
    assert convert('0,5s') == 0.5
    for arg in ('20h15m10', ' 20 h 15 m 10 ', '19H75M10.000', '20h910'):
        assert convert(arg) == 72910.0
    assert convert('1d') == convert('24h') == utils.SEC_PER_DAY
    assert convert('PT10M') == convert('10m') == 600.0
    assert convert('P1DT1S') == 86401.0
    for arg in ('', 'P', '1 0 0s', 'hello', '15m1h', '1.5d10m', '.', '0..1s', '5e-2', 'P1Y'):
        with pytest.raises(ValueError):
            convert(arg)


def test_time_period():
    time_period = utils.time_period
    assert time_period(None) is None
    for v in (-128, -2.8, 0, 5, 33.33):
        c = time_period(v)
        assert isinstance(c, float)
        assert c == (v if v > 0 else 0.0)
    assert time_period("1h1") == 3601.0
    with pytest.raises(ValueError, match='Invalid'):
        time_period('short')
    for arg in ([1, 2, 3], True):
        with pytest.raises(TypeError):
            time_period(arg)


def test_timestr():
    timestr = utils.timestr
    assert timestr(0) == '0s'
    assert timestr(5) == '5s'
    assert timestr(2.25) == '2.2s'      # round half to even
    assert timestr(59.96) == '1m0s'
    assert timestr(601.0) == '10m1s'
    assert timestr(3600) == '1h0m0s'
    assert timestr(86400 + 61.5) == '1d0h1m1.5s'
    with pytest.raises(ValueError):
        timestr(-1)


def test_corrections():
    names = ['hysteresis', 'max_temp_delta', 'max_target_temp']
    assert suggest_corrections('hysterezis', names) == ['hysteresis']
    assert suggest_corrections('max_temp', names)[:2] == ['max_temp_delta', 'max_target_temp']
    assert suggest_corrections('zzz', names) == []
    assert did_you_mean('zzz', names) == ""
    assert did_you_mean('hysterezis', names) == "; did you mean 'hysteresis'?"


def test_env(caplog, monkeypatch):
    monkeypatch.setattr(envvars, 'debug', False)
    envvars.process_env({'HEATCTL_DEBUG': 'no', 'HEATCTL_COLOUR': 'red', 'PATH': '/bin'})
    assert not envvars.debug
    assert any("HEATCTL_COLOUR" in r.getMessage() for r in caplog.records)
    envvars.process_env({'HEATCTL_DEBUG': 'maybe'})
    assert not envvars.debug
    assert envvars.str_to_bool(' Yes ', default=False)
