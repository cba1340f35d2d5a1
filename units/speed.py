"""
Dyno Units - Linear Speed
=========================

Base unit: metre per second.
"""

from scipy import constants

from .angular import per_second
from .length import Length
from .quantity import Quantity


class Speed(Quantity):
    """Linear speed domain."""

    domain = "speed"

    def to_metres_per_second(self) -> "MetresPerSecond":
        return self.to(MetresPerSecond)

    def to_kilometres_per_hour(self) -> "KilometresPerHour":
        return self.to(KilometresPerHour)

    def to_knots(self) -> "Knots":
        return self.to(Knots)


class MetresPerSecond(Speed):
    symbol = "m/s"
    scale = 1.0

    @classmethod
    def from_distance(cls, distance: Length, period_ms: float) -> "MetresPerSecond":
        """Average speed over ``distance`` covered in ``period_ms`` milliseconds."""
        return cls(per_second(distance.to_metres().value, period_ms))


class KilometresPerHour(Speed):
    symbol = "km/h"
    scale = constants.kmh


class Knots(Speed):
    symbol = "kn"
    scale = constants.knot
