"""
Dyno Units - Temperature
========================

Base unit: kelvin. Celsius and Fahrenheit are affine units, so they
carry an ``offset`` (the kelvin value of their zero) besides ``scale``.
"""

from scipy import constants

from .quantity import Quantity


class Temperature(Quantity):
    """Temperature domain."""

    domain = "temperature"

    def to_celsius(self) -> "Celsius":
        return self.to(Celsius)

    def to_fahrenheit(self) -> "Fahrenheit":
        return self.to(Fahrenheit)

    def to_kelvin(self) -> "Kelvin":
        return self.to(Kelvin)


class Kelvin(Temperature):
    symbol = "K"
    scale = 1.0


class Celsius(Temperature):
    symbol = "°C"
    scale = 1.0
    offset = constants.zero_Celsius


class Fahrenheit(Temperature):
    symbol = "°F"
    scale = constants.degree_Fahrenheit
    offset = constants.zero_Celsius - 32.0 * constants.degree_Fahrenheit
