"""
Dyno Core - Telemetry Sample
============================

One fully derived reading. Samples are immutable values: the buffer's
cached ``last()`` can be held across later appends.
"""

from dataclasses import dataclass, field
from datetime import datetime

from units import (
    Celsius,
    HorsePower,
    KiloMetres,
    KilometresPerHour,
    MetresPerSecond,
    NewtonMetres,
    RadiansPerSecond,
    RotationsPerMinute,
)


def _epoch() -> datetime:
    return datetime.fromtimestamp(0)


@dataclass(frozen=True)
class TelemetrySample:
    """Calibrated dynamometer reading."""
    speed: KilometresPerHour = field(default_factory=KilometresPerHour)
    torque: NewtonMetres = field(default_factory=NewtonMetres)
    horsepower: HorsePower = field(default_factory=HorsePower)
    temperature: Celsius = field(default_factory=Celsius)
    timestamp: datetime = field(default_factory=_epoch)
    rpm_wheel: RotationsPerMinute = field(default_factory=RotationsPerMinute)
    rpm_engine: RotationsPerMinute = field(default_factory=RotationsPerMinute)
    odometer: KiloMetres = field(default_factory=KiloMetres)
    angular_rate: RadiansPerSecond = field(default_factory=RadiansPerSecond)
    roller_rate: MetresPerSecond = field(default_factory=MetresPerSecond)

    @classmethod
    def zero(cls) -> "TelemetrySample":
        """Seed sample for the first frame of a session (all zero)."""
        return cls()

    @property
    def timestamp_ms(self) -> int:
        """Timestamp as integer epoch milliseconds."""
        return int(round(self.timestamp.timestamp() * 1000))

    def summary(self) -> str:
        return (
            f"speed={self.speed.label()} "
            f"rpm_wheel={self.rpm_wheel.label(0)} "
            f"rpm_engine={self.rpm_engine.label(0)} "
            f"torque={self.torque.label()} "
            f"hp={self.horsepower.label()} "
            f"temp={self.temperature.label(1)} "
            f"odo={self.odometer.label(4)}"
        )
