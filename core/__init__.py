"""
Dyno Core Module - Initialization
=================================

Core module turns raw dynamometer pulses into calibrated telemetry.

Components:
-----------
1. filters.py     - ExponentialFilter, FilterBank (noise rejection)
2. calibration.py - CalibrationConfig, powertrain types (Electric, Engine)
3. sample.py      - TelemetrySample (one derived reading)
4. derivation.py  - derive() physics chain with last-known-good fallback

Usage:
------
from core import CalibrationConfig, TelemetrySample, derive

config = CalibrationConfig()
sample = TelemetrySample.zero()
for frame in frames:
    sample = derive(sample, config, frame)
"""

from .filters import (
    ExponentialFilter,
    FilterBank,
)

from .calibration import (
    CalibrationConfig,
    CalibrationError,
    Cylinder,
    Electric,
    Engine,
    Powertrain,
    Stroke,
    powertrain_from_dict,
)

from .sample import TelemetrySample

from .derivation import (
    derive,
    engine_rpm,
)

__all__ = [
    # Filters
    "ExponentialFilter",
    "FilterBank",
    # Calibration
    "CalibrationConfig",
    "CalibrationError",
    "Cylinder",
    "Electric",
    "Engine",
    "Powertrain",
    "Stroke",
    "powertrain_from_dict",
    # Derivation
    "TelemetrySample",
    "derive",
    "engine_rpm",
]

__version__ = "1.0.0"
