"""
Dyno Units - Mass
=================

Base unit: kilogram.
"""

from scipy import constants

from .quantity import Quantity


class Mass(Quantity):
    """Mass (load weight) domain."""

    domain = "mass"

    def to_grams(self) -> "Grams":
        return self.to(Grams)

    def to_kilograms(self) -> "KiloGrams":
        return self.to(KiloGrams)

    def to_pounds(self) -> "Pounds":
        return self.to(Pounds)


class Grams(Mass):
    symbol = "g"
    scale = constants.gram


class KiloGrams(Mass):
    symbol = "kg"
    scale = 1.0


class Pounds(Mass):
    symbol = "lb"
    scale = constants.pound
