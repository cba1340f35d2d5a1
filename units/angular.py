"""
Dyno Units - Angular Rate
=========================

Base unit: radian per second.

    RadiansPerSecond    1 rad/s
    RotationsPerMinute  2*pi/60 rad/s
    DegreesPerSecond    pi/180 rad/s

Rates from encoder ticks:
-------------------------
A tick count accumulated over ``period_ms`` milliseconds becomes a
per-minute rate with ``per_minute(count, period_ms)``:

    count / (period_ms / 60000)
"""

from scipy import constants

from .quantity import Quantity, ieee_div

MILLIS_PER_SECOND = 1000.0
MILLIS_PER_MINUTE = constants.minute * MILLIS_PER_SECOND
MILLIS_PER_HOUR = constants.hour * MILLIS_PER_SECOND


def per_second(count: float, period_ms: float) -> float:
    """Rate per second of ``count`` accumulated over ``period_ms``."""
    return ieee_div(count, period_ms / MILLIS_PER_SECOND)


def per_minute(count: float, period_ms: float) -> float:
    """Rate per minute of ``count`` accumulated over ``period_ms``."""
    return ieee_div(count, period_ms / MILLIS_PER_MINUTE)


def per_hour(count: float, period_ms: float) -> float:
    """Rate per hour of ``count`` accumulated over ``period_ms``."""
    return ieee_div(count, period_ms / MILLIS_PER_HOUR)


class Angular(Quantity):
    """Angular rate domain."""

    domain = "angular"

    def to_radians_per_second(self) -> "RadiansPerSecond":
        return self.to(RadiansPerSecond)

    def to_rotations_per_minute(self) -> "RotationsPerMinute":
        return self.to(RotationsPerMinute)


class RadiansPerSecond(Angular):
    symbol = "rad/s"
    scale = 1.0


class RotationsPerMinute(Angular):
    symbol = "rpm"
    scale = 2.0 * constants.pi / constants.minute

    @classmethod
    def from_rotations(cls, rotations: float, period_ms: float) -> "RotationsPerMinute":
        """
        Rotational speed from revolutions counted during one period.

        Args:
            rotations: Revolutions (or ignition pulses) in the period
            period_ms: Period length [ms]

        Returns:
            Revolutions per minute; inf/nan when ``period_ms`` is zero
        """
        return cls(per_minute(rotations, period_ms))


class DegreesPerSecond(Angular):
    symbol = "deg/s"
    scale = constants.degree
