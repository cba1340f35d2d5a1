"""
Dyno Units - Torque
===================

Base unit: newton metre.
"""

from scipy import constants

from .quantity import Quantity


class Torque(Quantity):
    """Torque domain."""

    domain = "torque"

    def to_newton_metres(self) -> "NewtonMetres":
        return self.to(NewtonMetres)

    def to_pound_feet(self) -> "PoundFeet":
        return self.to(PoundFeet)


class NewtonMetres(Torque):
    symbol = "Nm"
    scale = 1.0


class PoundFeet(Torque):
    symbol = "lbf ft"
    scale = constants.pound_force * constants.foot
