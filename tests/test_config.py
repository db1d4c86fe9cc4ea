"""Tests for client settings."""

import pytest

from ownet_mcp.config import ClientSettings, ConfigValidationError
from ownet_mcp.protocol.flags import (
    DeviceFormat,
    Flag,
    FlagMask,
    PressureScale,
    TemperatureScale,
)


def test_defaults():
    settings = ClientSettings()
    settings.validate()
    assert settings.host == "localhost"
    assert settings.port == 4304
    assert settings.persistent is True


def test_from_env_overrides():
    settings = ClientSettings.from_env({
        "OWNET_HOST": "owserver.local",
        "OWNET_PORT": "4305",
        "OWNET_TIMEOUT": "2.5",
        "OWNET_KEEPALIVE_TIMEOUT": "10",
        "OWNET_PERSISTENT": "no",
        "OWNET_TEMPERATURE_SCALE": "f",
        "OWNET_LOG_LEVEL": "debug",
    })
    assert settings.host == "owserver.local"
    assert settings.port == 4305
    assert settings.timeout == 2.5
    assert settings.keepalive_timeout == 10.0
    assert settings.persistent is False
    assert settings.temperature_scale is TemperatureScale.FAHRENHEIT
    assert settings.log_level == "DEBUG"


def test_from_env_empty_uses_defaults():
    assert ClientSettings.from_env({}) == ClientSettings()


@pytest.mark.parametrize(
    "env",
    [
        {"OWNET_PORT": "http"},
        {"OWNET_PORT": "70000"},
        {"OWNET_TIMEOUT": "0"},
        {"OWNET_KEEPALIVE_TIMEOUT": "-1"},
        {"OWNET_PERSISTENT": "maybe"},
        {"OWNET_TEMPERATURE_SCALE": "X"},
        {"OWNET_LOG_LEVEL": "chatty"},
        {"OWNET_HOST": ""},
    ],
)
def test_from_env_invalid(env):
    with pytest.raises(ConfigValidationError):
        ClientSettings.from_env(env)


def test_request_flags_persistent():
    mask = FlagMask(ClientSettings(persistent=True).request_flags())
    assert mask.has_persistence()
    assert Flag.OWNET in mask.flags()


def test_request_flags_not_persistent():
    mask = FlagMask(ClientSettings(persistent=False).request_flags())
    assert not mask.has_persistence()


def test_request_flags_temperature():
    settings = ClientSettings(temperature_scale=TemperatureScale.KELVIN)
    assert FlagMask(settings.request_flags()).temperature_scale is TemperatureScale.KELVIN


def test_to_dict():
    d = ClientSettings().to_dict()
    assert d["port"] == 4304
    assert d["temperature_scale"] == "CELSIUS"


def test_keepalive_timeout_none_disables_bound():
    settings = ClientSettings.from_env({"OWNET_KEEPALIVE_TIMEOUT": "None"})
    assert settings.keepalive_timeout is None
    ClientSettings(keepalive_timeout=None).validate()


def test_from_env_pressure_and_format():
    settings = ClientSettings.from_env({
        "OWNET_PRESSURE_SCALE": "psi",
        "OWNET_DEVICE_FORMAT": "FIC",
    })
    assert settings.pressure_scale is PressureScale.PSI
    assert settings.device_format is DeviceFormat.FIC
    mask = FlagMask(settings.request_flags())
    assert mask.pressure_scale is PressureScale.PSI
    assert mask.device_format is DeviceFormat.FIC


@pytest.mark.parametrize(
    "env",
    [
        {"OWNET_PRESSURE_SCALE": "bar"},
        {"OWNET_DEVICE_FORMAT": "XYZ"},
    ],
)
def test_from_env_invalid_pressure_and_format(env):
    with pytest.raises(ConfigValidationError):
        ClientSettings.from_env(env)
