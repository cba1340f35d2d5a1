"""
Dyno Core - Calibration Configuration
=====================================

Rig constants for one test session and the quantities derived from
them.

Rig Geometry:
-------------
    roller_diameter        drum the wheel drives (encoder side)
    load_roller_diameter   load roller carrying the load mass
    encoder_gear_diameter  gear on the encoder shaft
    load_gear_diameter     gear on the load roller shaft
    gear_spacing           distance between gear centres
    load_mass              mass mounted on the load roller

Derived Values:
---------------
    roller_circumference = pi * roller_diameter
    gear_ratio           = load_gear_diameter / roller_diameter
    inertia_term         = 1/2 * load_mass * load_roller_radius^2
    load_force           = load_mass * g

Powertrain:
-----------
Exactly one of

    Electric(name)
    Engine(stroke, cylinder, name, cc)

The engine's stroke and cylinder count decide how ignition pulses map
to crankshaft revolutions (see ``core.derivation``).

Defaults:
---------
    roller_diameter        0.1422 m
    load_roller_diameter   0.1933 m
    encoder_gear_diameter  0.1    m
    load_gear_diameter     0.054  m
    gear_spacing           0.144  m
    load_mass              18.5   kg
    powertrain             four-stroke, single cylinder engine
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from scipy import constants

from units import KiloGrams, Metres

from .filters import FilterBank

logger = logging.getLogger(__name__)


DEFAULT_ROLLER_DIAMETER = 0.1422
DEFAULT_LOAD_ROLLER_DIAMETER = 0.1933
DEFAULT_ENCODER_GEAR_DIAMETER = 0.1
DEFAULT_LOAD_GEAR_DIAMETER = 0.054
DEFAULT_GEAR_SPACING = 0.144
DEFAULT_LOAD_MASS = 18.5


class CalibrationError(ValueError):
    """Calibration constant that would corrupt derived telemetry."""
    pass


class Stroke(Enum):
    """Engine stroke count."""
    UNKNOWN = 0
    TWO = 2
    FOUR = 4

    @classmethod
    def from_code(cls, code: int) -> "Stroke":
        try:
            return cls(int(code))
        except ValueError:
            return cls.UNKNOWN

    def __str__(self) -> str:
        return f"{self.name.title()} Stroke"


class Cylinder(Enum):
    """Engine cylinder count. UNKNOWN carries no usable count."""
    UNKNOWN = 0
    SINGLE = 1
    TWO = 2
    TRIPLE = 3
    FOUR = 4
    SIX = 6
    EIGHT = 8

    @classmethod
    def from_code(cls, code: int) -> "Cylinder":
        try:
            return cls(int(code))
        except ValueError:
            return cls.UNKNOWN

    @property
    def count(self) -> Optional[int]:
        return self.value or None

    def __str__(self) -> str:
        return f"{self.name.title()} Cylinder"


@dataclass(frozen=True)
class Electric:
    """Electric motor powertrain: RPM pulses are shaft revolutions."""
    name: str = "Electric"


@dataclass(frozen=True)
class Engine:
    """Combustion engine powertrain."""
    stroke: Stroke = Stroke.FOUR
    cylinder: Cylinder = Cylinder.SINGLE
    name: str = "Engine"
    cc: int = 0


Powertrain = Union[Electric, Engine]


def powertrain_from_dict(data: Optional[Dict[str, Any]]) -> Powertrain:
    """
    Build a powertrain from a config mapping.

    Args:
        data: ``{"type": "engine"|"electric", "stroke": 4, "cylinder": 1,
              "name": ..., "cc": ...}``; None gives the default engine

    Returns:
        Electric or Engine
    """
    data = data or {}
    kind = str(data.get("type", "engine")).lower()

    if kind == "electric":
        return Electric(name=data.get("name", "Electric"))
    if kind == "engine":
        return Engine(
            stroke=Stroke.from_code(data.get("stroke", Stroke.FOUR.value)),
            cylinder=Cylinder.from_code(data.get("cylinder", Cylinder.SINGLE.value)),
            name=data.get("name", "Engine"),
            cc=int(data.get("cc", 0)),
        )
    raise CalibrationError(f"Unknown powertrain type: {kind}")


def powertrain_to_dict(powertrain: Powertrain) -> Dict[str, Any]:
    if isinstance(powertrain, Electric):
        return {"type": "electric", "name": powertrain.name}
    return {
        "type": "engine",
        "stroke": powertrain.stroke.value,
        "cylinder": powertrain.cylinder.value,
        "name": powertrain.name,
        "cc": powertrain.cc,
    }


class CalibrationConfig:
    """
    Session-scoped rig calibration.

    Geometry is fixed once constructed; only ``init()`` (new constants)
    and ``reset()`` (filter state) change it, between sessions.

    Example:
    --------
    >>> config = CalibrationConfig(roller_diameter=Metres(0.1422))
    >>> config.gear_ratio
    0.379746...
    """

    def __init__(self,
                 roller_diameter: Metres = Metres(DEFAULT_ROLLER_DIAMETER),
                 load_roller_diameter: Metres = Metres(DEFAULT_LOAD_ROLLER_DIAMETER),
                 encoder_gear_diameter: Metres = Metres(DEFAULT_ENCODER_GEAR_DIAMETER),
                 load_gear_diameter: Metres = Metres(DEFAULT_LOAD_GEAR_DIAMETER),
                 gear_spacing: Metres = Metres(DEFAULT_GEAR_SPACING),
                 load_mass: KiloGrams = KiloGrams(DEFAULT_LOAD_MASS),
                 powertrain: Optional[Powertrain] = None,
                 filters: Optional[FilterBank] = None):
        self.filters = filters if filters is not None else FilterBank()
        self.init(
            roller_diameter=roller_diameter,
            load_roller_diameter=load_roller_diameter,
            encoder_gear_diameter=encoder_gear_diameter,
            load_gear_diameter=load_gear_diameter,
            gear_spacing=gear_spacing,
            load_mass=load_mass,
            powertrain=powertrain if powertrain is not None else Engine(),
        )

    def init(self,
             roller_diameter: Metres,
             load_roller_diameter: Metres,
             encoder_gear_diameter: Metres,
             load_gear_diameter: Metres,
             gear_spacing: Metres,
             load_mass: KiloGrams,
             powertrain: Powertrain):
        """
        (Re)initialize the rig constants for a new session.

        Also resets the filter bank, so no smoothing state leaks from the
        previous session.

        Raises:
            CalibrationError: On zero/negative/non-finite constants
                (optimized runs clamp to the default instead)
        """
        self._roller_diameter = _checked(
            "roller_diameter", Metres(roller_diameter), DEFAULT_ROLLER_DIAMETER)
        self._load_roller_diameter = _checked(
            "load_roller_diameter", Metres(load_roller_diameter),
            DEFAULT_LOAD_ROLLER_DIAMETER)
        self._encoder_gear_diameter = _checked(
            "encoder_gear_diameter", Metres(encoder_gear_diameter),
            DEFAULT_ENCODER_GEAR_DIAMETER)
        self._load_gear_diameter = _checked(
            "load_gear_diameter", Metres(load_gear_diameter),
            DEFAULT_LOAD_GEAR_DIAMETER)
        self._gear_spacing = _checked(
            "gear_spacing", Metres(gear_spacing), DEFAULT_GEAR_SPACING)
        self._load_mass = _checked(
            "load_mass", KiloGrams(load_mass), DEFAULT_LOAD_MASS)

        if not isinstance(powertrain, (Electric, Engine)):
            raise CalibrationError(f"Unsupported powertrain: {powertrain!r}")
        self._powertrain = powertrain

        # Derived constants
        self._roller_circumference = self._roller_diameter * constants.pi
        self._gear_ratio = self._load_gear_diameter.value / self._roller_diameter.value
        load_roller_radius = self._load_roller_diameter.value / 2.0
        self._inertia_term = 0.5 * self._load_mass.value * load_roller_radius ** 2

        self.filters.reset()
        logger.debug(f"Calibration initialized: {self}")

    def reset(self):
        """Clear per-session state (filter bank) between sessions."""
        self.filters.reset()

    # ------------------------------------------------------------------
    # Read-only constants
    # ------------------------------------------------------------------

    @property
    def roller_diameter(self) -> Metres:
        return self._roller_diameter

    @property
    def load_roller_diameter(self) -> Metres:
        return self._load_roller_diameter

    @property
    def encoder_gear_diameter(self) -> Metres:
        return self._encoder_gear_diameter

    @property
    def load_gear_diameter(self) -> Metres:
        return self._load_gear_diameter

    @property
    def gear_spacing(self) -> Metres:
        return self._gear_spacing

    @property
    def load_mass(self) -> KiloGrams:
        return self._load_mass

    @property
    def powertrain(self) -> Powertrain:
        return self._powertrain

    @property
    def roller_circumference(self) -> Metres:
        return self._roller_circumference

    @property
    def gear_ratio(self) -> float:
        return self._gear_ratio

    @property
    def inertia_term(self) -> float:
        """Load roller moment of inertia, 1/2 * m * r^2 [kg m^2]."""
        return self._inertia_term

    @property
    def load_force(self) -> float:
        """Weight of the load mass [N]."""
        return self._load_mass.value * constants.g

    # ------------------------------------------------------------------
    # Dict round trip
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]] = None) -> "CalibrationConfig":
        """
        Build a calibration from a loaded configuration dictionary.

        Reads the ``calibration``, ``powertrain`` and ``filters`` sections;
        absent keys take the documented defaults.
        """
        config = config or {}
        rig = config.get("calibration") or {}

        return cls(
            roller_diameter=Metres(rig.get("roller_diameter", DEFAULT_ROLLER_DIAMETER)),
            load_roller_diameter=Metres(
                rig.get("load_roller_diameter", DEFAULT_LOAD_ROLLER_DIAMETER)),
            encoder_gear_diameter=Metres(
                rig.get("encoder_gear_diameter", DEFAULT_ENCODER_GEAR_DIAMETER)),
            load_gear_diameter=Metres(
                rig.get("load_gear_diameter", DEFAULT_LOAD_GEAR_DIAMETER)),
            gear_spacing=Metres(rig.get("gear_spacing", DEFAULT_GEAR_SPACING)),
            load_mass=KiloGrams(rig.get("load_mass", DEFAULT_LOAD_MASS)),
            powertrain=powertrain_from_dict(config.get("powertrain")),
            filters=FilterBank.from_periods(config.get("filters")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calibration": {
                "roller_diameter": self._roller_diameter.value,
                "load_roller_diameter": self._load_roller_diameter.value,
                "encoder_gear_diameter": self._encoder_gear_diameter.value,
                "load_gear_diameter": self._load_gear_diameter.value,
                "gear_spacing": self._gear_spacing.value,
                "load_mass": self._load_mass.value,
            },
            "powertrain": powertrain_to_dict(self._powertrain),
            "filters": self.filters.periods(),
        }

    def __repr__(self) -> str:
        return (
            f"CalibrationConfig(roller={self._roller_diameter.label(4)}, "
            f"load_roller={self._load_roller_diameter.label(4)}, "
            f"load_mass={self._load_mass.label(2)}, "
            f"gear_ratio={self._gear_ratio:.4f}, "
            f"powertrain={self._powertrain})"
        )


def _checked(name: str, value, default: float):
    """Reject (or, when optimized, clamp) zero/negative/non-finite constants."""
    if value.is_normal() and value.value > 0:
        return value
    if __debug__:
        raise CalibrationError(f"{name} must be a positive finite value, got {value!r}")
    logger.warning(f"{name}={value!r} is invalid, using default {default}")
    return type(value)(default)
