"""
Dyno Units Module - Initialization
==================================

Typed physical values for dynamometer telemetry.

Domains:
--------
1. length.py      - MilliMetres, CentiMetres, Metres, KiloMetres
2. mass.py        - Grams, KiloGrams, Pounds
3. angular.py     - RadiansPerSecond, RotationsPerMinute, DegreesPerSecond
4. speed.py       - MetresPerSecond, KilometresPerHour, Knots
5. torque.py      - NewtonMetres, PoundFeet
6. power.py       - Watts, KiloWatts, HorsePower
7. temperature.py - Kelvin, Celsius, Fahrenheit

All units derive from ``quantity.Quantity``; conversion factors come
from ``scipy.constants``.

Usage:
------
from units import Metres, KilometresPerHour, MetresPerSecond

speed = MetresPerSecond(26.06).to(KilometresPerHour)
speed = speed.if_not_normal(KilometresPerHour(0.0))
"""

from .quantity import (
    Quantity,
    UnitMismatchError,
    fuzzy_eq,
    ieee_div,
    round_decimal,
    safe_div,
)

from .length import (
    Length,
    MilliMetres,
    CentiMetres,
    Metres,
    KiloMetres,
    roller_distance,
)

from .mass import (
    Mass,
    Grams,
    KiloGrams,
    Pounds,
)

from .angular import (
    Angular,
    RadiansPerSecond,
    RotationsPerMinute,
    DegreesPerSecond,
    per_second,
    per_minute,
    per_hour,
)

from .speed import (
    Speed,
    MetresPerSecond,
    KilometresPerHour,
    Knots,
)

from .torque import (
    Torque,
    NewtonMetres,
    PoundFeet,
)

from .power import (
    Power,
    Watts,
    KiloWatts,
    HorsePower,
    DYNO_POWER_CONSTANT,
)

from .temperature import (
    Temperature,
    Kelvin,
    Celsius,
    Fahrenheit,
)

__all__ = [
    # Base
    "Quantity",
    "UnitMismatchError",
    "fuzzy_eq",
    "ieee_div",
    "round_decimal",
    "safe_div",
    # Length
    "Length",
    "MilliMetres",
    "CentiMetres",
    "Metres",
    "KiloMetres",
    "roller_distance",
    # Mass
    "Mass",
    "Grams",
    "KiloGrams",
    "Pounds",
    # Angular
    "Angular",
    "RadiansPerSecond",
    "RotationsPerMinute",
    "DegreesPerSecond",
    "per_second",
    "per_minute",
    "per_hour",
    # Speed
    "Speed",
    "MetresPerSecond",
    "KilometresPerHour",
    "Knots",
    # Torque
    "Torque",
    "NewtonMetres",
    "PoundFeet",
    # Power
    "Power",
    "Watts",
    "KiloWatts",
    "HorsePower",
    "DYNO_POWER_CONSTANT",
    # Temperature
    "Temperature",
    "Kelvin",
    "Celsius",
    "Fahrenheit",
]

__version__ = "1.0.0"
