"""Flag word carried in every owserver header.

The 32-bit ``flags`` field mixes single-bit options with a few
multi-bit fields::

    bit  1       BUS_RET       include bus list in directory replies
    bit  2       PERSISTENCE   keep the connection open after the reply
    bit  3       ALIAS         use alias names
    bit  4       SAFEMODE      server-side safe mode
    bit  5       UNCACHED      bypass the server cache
    bit  8       OWNET         request comes from an ownet client
    bits 16-17   temperature scale (C, F, K, R)
    bits 18-20   pressure scale (mbar, atm, mmHg, inHg, psi, Pa)
    bits 24-26   device name format (fdi, fi, fdidc, fdic, fidc, fic)

Unknown bits are ignored on decode so newer servers stay compatible.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Iterable

UINT32_MASK = 0xFFFFFFFF

TEMPERATURE_MASK = 0x00030000
PRESSURE_MASK = 0x001C0000
FORMAT_MASK = 0x07000000


class Flag(IntFlag):
    """Single-bit options."""

    BUS_RET = 0x00000002
    PERSISTENCE = 0x00000004
    ALIAS = 0x00000008
    SAFEMODE = 0x00000010
    UNCACHED = 0x00000020
    OWNET = 0x00000100


class TemperatureScale(IntEnum):
    CELSIUS = 0x00000000
    FAHRENHEIT = 0x00010000
    KELVIN = 0x00020000
    RANKINE = 0x00030000


class PressureScale(IntEnum):
    MBAR = 0x00000000
    ATM = 0x00040000
    MMHG = 0x00080000
    INHG = 0x000C0000
    PSI = 0x00100000
    PA = 0x00140000


class DeviceFormat(IntEnum):
    """How the server spells device ids (f=family, i=id, c=crc)."""

    FDI = 0x00000000
    FI = 0x01000000
    FDIDC = 0x02000000
    FDIC = 0x03000000
    FIDC = 0x04000000
    FIC = 0x05000000


def encode_flags(
    flags: Iterable[Flag] = (),
    *,
    temperature: TemperatureScale = TemperatureScale.CELSIUS,
    pressure: PressureScale = PressureScale.MBAR,
    device_format: DeviceFormat = DeviceFormat.FDI,
) -> int:
    """OR the given options and scale fields into one uint32 mask."""
    mask = 0
    for flag in flags:
        mask |= int(flag)
    mask |= int(temperature) | int(pressure) | int(device_format)
    return mask & UINT32_MASK


def decode_flags(mask: int) -> frozenset[Flag]:
    """Return the named single-bit flags set in ``mask``."""
    return frozenset(flag for flag in Flag if mask & flag)


def _field(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class FlagMask:
    """Read-only view over a received flag word."""

    value: int = 0

    @classmethod
    def from_flags(cls, flags: Iterable[Flag] = (), **fields) -> FlagMask:
        return cls(encode_flags(flags, **fields))

    def has_persistence(self) -> bool:
        return bool(self.value & Flag.PERSISTENCE)

    def flags(self) -> frozenset[Flag]:
        return decode_flags(self.value)

    @property
    def temperature_scale(self) -> TemperatureScale | None:
        return _field(TemperatureScale, self.value & TEMPERATURE_MASK)

    @property
    def pressure_scale(self) -> PressureScale | None:
        return _field(PressureScale, self.value & PRESSURE_MASK)

    @property
    def device_format(self) -> DeviceFormat | None:
        return _field(DeviceFormat, self.value & FORMAT_MASK)

    def __int__(self) -> int:
        return self.value & UINT32_MASK
