"""
Test the configuration.
"""

# pylint: disable=missing-docstring, protected-access
# pylint: disable=invalid-name, redefined-outer-name, unused-argument, unused-variable

import dataclasses
import json

import pytest

import heatctl
from heatctl import ControlConfig, HeatctlConfigError


def test_defaults():
    cfg = ControlConfig()
    assert cfg.topic == "shelly-anvil-chamber-heater/set_temperature_threshold"
    assert cfg.sensor_ids == ('temperature:100', 'temperature:101')
    assert cfg.timer_interval == 5.0
    assert cfg.fail_safe_timeout == 600.0
    assert cfg.hysteresis == 1.0
    assert cfg.max_temp_delta == 20.0
    assert cfg.max_target_temp == 60.0


def test_frozen():
    cfg = ControlConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.hysteresis = 2.0


def test_durations():
    cfg = ControlConfig(timer_interval='0.5s', fail_safe_timeout='10m')
    assert cfg.timer_interval == 0.5
    assert cfg.fail_safe_timeout == 600.0
    assert ControlConfig(fail_safe_timeout='PT1H').fail_safe_timeout == 3600.0
    assert ControlConfig(timer_interval=2).timer_interval == 2.0


def test_normalization():
    cfg = ControlConfig(sensor_ids=['a', 'b'], hysteresis=2)
    assert cfg.sensor_ids == ('a', 'b')
    assert isinstance(cfg.hysteresis, float)
    assert ControlConfig(sensor_ids='single').sensor_ids == ('single',)


@pytest.mark.parametrize('kwargs, match', [
    ({'topic': ''}, "topic"),
    ({'sensor_ids': []}, "at least one"),
    ({'sensor_ids': ['a', '']}, "sensor id"),
    ({'sensor_ids': ['a', 'a']}, "duplicate"),
    ({'timer_interval': 0}, "timer_interval must be positive"),
    ({'timer_interval': 'often'}, "timer_interval"),
    ({'fail_safe_timeout': -5}, "fail_safe_timeout must be positive"),
    ({'fail_safe_timeout': None}, "required"),
    ({'hysteresis': -1}, "hysteresis"),
    ({'hysteresis': '1'}, "must be a number"),
    ({'max_temp_delta': 0}, "max_temp_delta"),
    ({'max_target_temp': float('inf')}, "finite"),
    ({'max_target_temp': True}, "must be a number"),
    ])
def test_invalid(kwargs, match):
    with pytest.raises(HeatctlConfigError, match=match):
        ControlConfig(**kwargs)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        ControlConfig(hysteresis=-1)


def test_many_sensors_warning(warnings_log):
    cfg = ControlConfig(sensor_ids=['a', 'b', 'c'])
    assert len(cfg.sensor_ids) == 3
    assert "3 sensors" in warnings_log.records[0].getMessage()


def test_from_mapping():
    cfg = ControlConfig.from_mapping({'hysteresis': 0.5, 'sensor_ids': ['x']})
    assert cfg.hysteresis == 0.5
    assert cfg.sensor_ids == ('x',)
    assert ControlConfig.from_mapping({}) == ControlConfig()


def test_from_mapping_unknown_key():
    with pytest.raises(HeatctlConfigError, match="did you mean 'hysteresis'"):
        ControlConfig.from_mapping({'hysteresys': 0.5})
    with pytest.raises(HeatctlConfigError, match="Unknown configuration item 'color'$"):
        ControlConfig.from_mapping({'color': 'red'})


def test_as_dict():
    data = ControlConfig(sensor_ids=['x']).as_dict()
    assert data['sensor_ids'] == ['x']
    assert ControlConfig.from_mapping(data) == ControlConfig(sensor_ids=['x'])
    json.dumps(data)


def test_load_config(tmp_path):
    path = tmp_path / 'heater.json'
    path.write_text(json.dumps({'fail_safe_timeout': '5m', 'max_target_temp': 45}))
    cfg = heatctl.load_config(path)
    assert cfg.fail_safe_timeout == 300.0
    assert cfg.max_target_temp == 45.0


@pytest.mark.parametrize('text, match', [
    ('{"hysteresis": ', "invalid JSON"),
    ('[1, 2]', "JSON object"),
    ('{"hysteresis": -3}', "hysteresis"),
    ])
def test_load_config_invalid(tmp_path, text, match):
    path = tmp_path / 'bad.json'
    path.write_text(text)
    with pytest.raises(HeatctlConfigError, match=match):
        heatctl.load_config(path)
