"""
Dyno Utils Module - Initialization
==================================

Utility functions and helpers for the dyno telemetry system.

Submodules:
-----------
1. config.py   - Configuration loading and validation
2. logging.py  - Logging setup and diagnostics

Functions:
----------
1. Configuration Management
   - load_config()        - Load YAML/JSON config
   - validate_config()    - Validate config structure
   - merge_configs()      - Override defaults
   - save_config()        - Write config back out

2. Logging & Diagnostics
   - setup_logging()      - Configure and return the "dyno" logger
   - get_logger()         - Get module logger
   - log_sample()         - Log one derived sample
   - log_statistics()     - Log buffer statistics

Usage:
------
from utils import load_config, setup_logging
from core import CalibrationConfig
from telemetry import DynoSession

config = load_config("config/dyno.yaml")
logger = setup_logging("logs/", level="INFO")
session = DynoSession(CalibrationConfig.from_dict(config), logger=logger)
"""

from .config import (
    ConfigError,
    get_config_value,
    load_config,
    merge_configs,
    save_config,
    set_config_value,
    validate_config,
)

from .logging import (
    StructuredFormatter,
    get_logger,
    log_sample,
    log_statistics,
    set_log_level,
    setup_logging,
)

__all__ = [
    # Config functions
    "ConfigError",
    "get_config_value",
    "load_config",
    "merge_configs",
    "save_config",
    "set_config_value",
    "validate_config",
    # Logging functions
    "StructuredFormatter",
    "get_logger",
    "log_sample",
    "log_statistics",
    "set_log_level",
    "setup_logging",
]

__version__ = "1.0.0"
