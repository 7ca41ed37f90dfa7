"""Integer based angles.

Catalogue coordinates are kept as a count of micro arc seconds so that unit
conversions are exact integer scalings. Floating point only appears when a
radian value is needed for geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from fractions import Fraction
import math
from typing import Union

ARC_SECOND_TO_MICRO_ARC_SEC = 1_000_000
ARC_MINUTE_TO_MICRO_ARC_SEC = ARC_SECOND_TO_MICRO_ARC_SEC * 60
ARC_DEGREE_TO_MICRO_ARC_SEC = ARC_MINUTE_TO_MICRO_ARC_SEC * 60
MILLI_ARC_SECOND_TO_MICRO_ARC_SEC = 1_000
MICRO_ARC_SEC_TO_RADIAN = math.pi / (180.0 * ARC_DEGREE_TO_MICRO_ARC_SEC)

Number = Union[int, float, str, Decimal]


def _scale(value: Number, factor: int) -> int:
    # text and Decimal truncate toward zero; floats round to the nearest unit
    if isinstance(value, bool):
        raise TypeError("bool is not an angle value")
    if isinstance(value, int):
        return value * factor
    if isinstance(value, float):
        return int((Decimal(value) * factor).to_integral_value(rounding=ROUND_HALF_EVEN))
    if isinstance(value, str):
        value = Decimal(value.strip())
    return int(value * factor)


@dataclass(frozen=True, order=True, slots=True)
class Angle:
    """Angular quantity stored as an integer number of micro arc seconds."""

    micro_arcsec: int

    @classmethod
    def from_degrees(cls, value: Number) -> "Angle":
        return cls(_scale(value, ARC_DEGREE_TO_MICRO_ARC_SEC))

    @classmethod
    def from_arcminutes(cls, value: Number) -> "Angle":
        return cls(_scale(value, ARC_MINUTE_TO_MICRO_ARC_SEC))

    @classmethod
    def from_arcseconds(cls, value: Number) -> "Angle":
        return cls(_scale(value, ARC_SECOND_TO_MICRO_ARC_SEC))

    @classmethod
    def from_milliarcseconds(cls, value: Number) -> "Angle":
        return cls(_scale(value, MILLI_ARC_SECOND_TO_MICRO_ARC_SEC))

    def to_radians(self) -> float:
        return self.micro_arcsec * MICRO_ARC_SEC_TO_RADIAN

    def to_degrees(self) -> Fraction:
        return Fraction(self.micro_arcsec, ARC_DEGREE_TO_MICRO_ARC_SEC)

    def to_arcminutes(self) -> Fraction:
        return Fraction(self.micro_arcsec, ARC_MINUTE_TO_MICRO_ARC_SEC)

    def to_arcseconds(self) -> Fraction:
        return Fraction(self.micro_arcsec, ARC_SECOND_TO_MICRO_ARC_SEC)

    def __add__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.micro_arcsec + other.micro_arcsec)

    def __sub__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.micro_arcsec - other.micro_arcsec)

    def __neg__(self) -> "Angle":
        return Angle(-self.micro_arcsec)

    def __abs__(self) -> "Angle":
        return Angle(abs(self.micro_arcsec))

    def __repr__(self) -> str:
        return f"Angle({self.micro_arcsec})"


__all__ = [
    "ARC_DEGREE_TO_MICRO_ARC_SEC",
    "ARC_MINUTE_TO_MICRO_ARC_SEC",
    "ARC_SECOND_TO_MICRO_ARC_SEC",
    "Angle",
]
