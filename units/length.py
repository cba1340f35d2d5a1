"""
Dyno Units - Length
===================

Base unit: metre.

    MilliMetres  1e-3 m
    CentiMetres  1e-2 m
    Metres       1 m
    KiloMetres   1e3 m
"""

from scipy import constants

from .quantity import Quantity


class Length(Quantity):
    """Length domain."""

    domain = "length"

    def to_millimetres(self) -> "MilliMetres":
        return self.to(MilliMetres)

    def to_centimetres(self) -> "CentiMetres":
        return self.to(CentiMetres)

    def to_metres(self) -> "Metres":
        return self.to(Metres)

    def to_kilometres(self) -> "KiloMetres":
        return self.to(KiloMetres)


class MilliMetres(Length):
    symbol = "mm"
    scale = constants.milli


class CentiMetres(Length):
    symbol = "cm"
    scale = constants.centi


class Metres(Length):
    symbol = "m"
    scale = 1.0


class KiloMetres(Length):
    symbol = "km"
    scale = constants.kilo


def roller_distance(rotations: float, diameter: Metres) -> Metres:
    """
    Distance travelled by a roller surface.

    Args:
        rotations: Number of (possibly fractional) roller revolutions
        diameter: Roller diameter

    Returns:
        rotations * pi * diameter
    """
    return diameter.to_metres() * constants.pi * rotations
