"""
Test the demo commands.
"""

# pylint: disable=missing-docstring, protected-access
# pylint: disable=invalid-name, redefined-outer-name, unused-argument, unused-variable

import pytest

from heatctl import demo, TickOutcome


@pytest.fixture
def commands():
    return demo.create_demo()


@pytest.mark.parametrize('line, parsed', [
    ('p 22', ('publish', ['22'])),
    ('publish hello world', ('publish', ['hello world'])),
    ('t 1 21.5', ('temp', ['1', '21.5'])),
    ('ti', ('tick', [])),
    ('s', ('show', [])),
    ('?', ('help', [])),
    ('d 1', ('debug', ['1'])),
    ])
def test_parse(line, parsed):
    assert demo.parse_command(line) == parsed


@pytest.mark.parametrize('line, exc', [
    ('fly', ValueError),
    ('show now', TypeError),
    ('temp 1', TypeError),
    ('publish', TypeError),
    ])
def test_parse_errors(line, exc):
    with pytest.raises(exc):
        demo.parse_command(line)


def test_session(commands, capsys):
    control = commands.control
    commands.publish("22")
    assert "accepted" in capsys.readouterr().out
    commands.tick()
    assert control.last_result.outcome is TickOutcome.SWITCHED_ON
    commands.temp('1', '30')
    commands.temp('temperature:101', '30')
    commands.tick()
    assert control.last_result.outcome is TickOutcome.SWITCHED_OFF
    commands.temp('2', 'fail')
    commands.temp('1', 'none')
    commands.tick()
    assert control.last_result.outcome is TickOutcome.NO_DATA
    capsys.readouterr()
    commands.show()
    out = capsys.readouterr().out
    assert "target: 22.0 °C" in out
    assert "not responding" in out
    assert "invalid reading" in out
    assert "relay: OFF" in out
    assert "no valid temperature" in out


def test_rejected(commands, capsys):
    commands.publish("hot")
    assert "rejected" in capsys.readouterr().out


def test_bad_sensor(commands):
    for name in ('0', '3', 'x'):
        with pytest.raises(LookupError):
            commands.temp(name, '20')


def test_debug(commands):
    commands.debug('1')
    assert commands.control.debug and commands.control.fusion.debug
    commands.debug('0')
    assert not commands.control.regulator.debug
    with pytest.raises(ValueError):
        commands.debug('yes')
