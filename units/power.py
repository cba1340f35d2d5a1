"""
Dyno Units - Power
==================

Base unit: watt. ``HorsePower`` is mechanical (imperial) horsepower.

Dyno horsepower:
----------------
The rig reports power from torque and wheel speed with the usual
workshop constant:

    HP = torque [Nm] * rpm / 9549
"""

from scipy import constants

from .angular import Angular
from .quantity import Quantity
from .torque import Torque

DYNO_POWER_CONSTANT = 9549.0


class Power(Quantity):
    """Power domain."""

    domain = "power"

    def to_watts(self) -> "Watts":
        return self.to(Watts)

    def to_kilowatts(self) -> "KiloWatts":
        return self.to(KiloWatts)

    def to_horsepower(self) -> "HorsePower":
        return self.to(HorsePower)


class Watts(Power):
    symbol = "W"
    scale = 1.0


class KiloWatts(Power):
    symbol = "kW"
    scale = constants.kilo


class HorsePower(Power):
    symbol = "HP"
    scale = constants.hp

    @classmethod
    def from_torque(cls, torque: Torque, rpm: Angular) -> "HorsePower":
        """Dyno horsepower from torque and rotational speed."""
        return cls(
            torque.to_newton_metres().value
            * rpm.to_rotations_per_minute().value
            / DYNO_POWER_CONSTANT
        )
