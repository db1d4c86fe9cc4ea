"""Client settings, with defaults and environment overrides.

Recognized environment variables::

    OWNET_HOST                 owserver host name
    OWNET_PORT                 owserver TCP port (1-65535)
    OWNET_TIMEOUT              socket timeout in seconds
    OWNET_KEEPALIVE_TIMEOUT    max seconds of keep-alives per reply, or "none"
    OWNET_PERSISTENT           request persistent connections (1/0)
    OWNET_TEMPERATURE_SCALE    C, F, K or R
    OWNET_PRESSURE_SCALE       MBAR, ATM, MMHG, INHG, PSI or PA
    OWNET_DEVICE_FORMAT        FDI, FI, FDIDC, FDIC, FIDC or FIC
    OWNET_LOG_LEVEL            DEBUG, INFO, WARNING, ERROR
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .protocol.flags import (
    DeviceFormat,
    Flag,
    PressureScale,
    TemperatureScale,
    encode_flags,
)
from .protocol.reader import DEFAULT_KEEPALIVE_TIMEOUT
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT

MIN_PORT = 1
MAX_PORT = 65535
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TEMPERATURE_NAMES = {
    "C": TemperatureScale.CELSIUS,
    "F": TemperatureScale.FAHRENHEIT,
    "K": TemperatureScale.KELVIN,
    "R": TemperatureScale.RANKINE,
}
PRESSURE_NAMES = {scale.name: scale for scale in PressureScale}
FORMAT_NAMES = {fmt.name: fmt for fmt in DeviceFormat}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigValidationError(ValueError):
    """Invalid configuration value."""


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigValidationError(f"{name} must be a boolean, got {raw!r}")


def _parse_number(name: str, raw: str, kind):
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigValidationError(
            f"{name} must be {kind.__name__}, got {raw!r}"
        ) from e


def _parse_choice(name: str, raw: str, choices: Mapping[str, Any]):
    key = raw.strip().upper()
    if key not in choices:
        raise ConfigValidationError(
            f"{name} must be one of {sorted(choices)}, got {raw!r}"
        )
    return choices[key]


def _parse_timeout(name: str, raw: str) -> float | None:
    if raw.strip().lower() == "none":
        return None
    return _parse_number(name, raw, float)


@dataclass
class ClientSettings:
    """Connection and request options for the owserver client."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    keepalive_timeout: float | None = DEFAULT_KEEPALIVE_TIMEOUT
    persistent: bool = True
    temperature_scale: TemperatureScale = TemperatureScale.CELSIUS
    pressure_scale: PressureScale = PressureScale.MBAR
    device_format: DeviceFormat = DeviceFormat.FDI
    log_level: str = "INFO"

    def validate(self) -> None:
        """Check every field.

        Raises:
            ConfigValidationError: If a field is out of range.
        """
        if not self.host:
            raise ConfigValidationError("host must not be empty")
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ConfigValidationError(
                f"port must be {MIN_PORT}-{MAX_PORT}, got {self.port}"
            )
        if self.timeout <= 0:
            raise ConfigValidationError(f"timeout must be > 0, got {self.timeout}")
        if self.keepalive_timeout is not None and self.keepalive_timeout < 0:
            raise ConfigValidationError(
                f"keepalive_timeout must be >= 0, got {self.keepalive_timeout}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientSettings:
        """Build settings from ``OWNET_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}

        if "OWNET_HOST" in env:
            kwargs["host"] = env["OWNET_HOST"]
        if "OWNET_PORT" in env:
            kwargs["port"] = _parse_number("OWNET_PORT", env["OWNET_PORT"], int)
        if "OWNET_TIMEOUT" in env:
            kwargs["timeout"] = _parse_number(
                "OWNET_TIMEOUT", env["OWNET_TIMEOUT"], float
            )
        if "OWNET_KEEPALIVE_TIMEOUT" in env:
            kwargs["keepalive_timeout"] = _parse_timeout(
                "OWNET_KEEPALIVE_TIMEOUT", env["OWNET_KEEPALIVE_TIMEOUT"]
            )
        if "OWNET_PERSISTENT" in env:
            kwargs["persistent"] = _parse_bool(
                "OWNET_PERSISTENT", env["OWNET_PERSISTENT"]
            )
        if "OWNET_TEMPERATURE_SCALE" in env:
            kwargs["temperature_scale"] = _parse_choice(
                "OWNET_TEMPERATURE_SCALE", env["OWNET_TEMPERATURE_SCALE"], TEMPERATURE_NAMES
            )
        if "OWNET_PRESSURE_SCALE" in env:
            kwargs["pressure_scale"] = _parse_choice(
                "OWNET_PRESSURE_SCALE", env["OWNET_PRESSURE_SCALE"], PRESSURE_NAMES
            )
        if "OWNET_DEVICE_FORMAT" in env:
            kwargs["device_format"] = _parse_choice(
                "OWNET_DEVICE_FORMAT", env["OWNET_DEVICE_FORMAT"], FORMAT_NAMES
            )
        if "OWNET_LOG_LEVEL" in env:
            kwargs["log_level"] = env["OWNET_LOG_LEVEL"].strip().upper()

        settings = cls(**kwargs)
        settings.validate()
        return settings

    def request_flags(self) -> int:
        """The flag word sent with every request."""
        flags = [Flag.OWNET]
        if self.persistent:
            flags.append(Flag.PERSISTENCE)
        return encode_flags(
            flags,
            temperature=self.temperature_scale,
            pressure=self.pressure_scale,
            device_format=self.device_format,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "timeout": self.timeout,
            "keepalive_timeout": self.keepalive_timeout,
            "persistent": self.persistent,
            "temperature_scale": self.temperature_scale.name,
            "pressure_scale": self.pressure_scale.name,
            "device_format": self.device_format.name,
            "log_level": self.log_level,
        }
