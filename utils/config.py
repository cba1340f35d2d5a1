"""
Dyno Utils - Configuration Management
=====================================

Configuration loading, validation, and merging utilities.

Features:
---------
1. Loading
   - YAML (.yaml/.yml) or JSON (.json) files
   - Environment variable substitution: ${VAR} or ${VAR:default}

2. Validation
   - Section types
   - Positive rig constants and filter periods
   - Powertrain codes

3. Merging
   - Override defaults with custom configs
   - Deep merge, dotted get/set

Configuration Structure:
-----------------------
calibration:
  roller_diameter: 0.1422        # [m]
  load_roller_diameter: 0.1933   # [m]
  encoder_gear_diameter: 0.1     # [m]
  load_gear_diameter: 0.054      # [m]
  gear_spacing: 0.144            # [m]
  load_mass: 18.5                # [kg]

powertrain:
  type: "engine"                 # engine | electric
  stroke: 4                      # 0 (unknown), 2, 4
  cylinder: 1                    # 0 (unknown), 1, 2, 3, 4, 6, 8
  name: "${DYNO_ENGINE:}"
  cc: 150

filters:
  torque: 2
  horsepower: 2
  rpm_wheel: 100
  rpm_engine: 100

session:
  buffer_capacity: 30000
  apply_filters: true

Example:
--------
>>> from utils import load_config, validate_config
>>> from core import CalibrationConfig
>>>
>>> config = load_config("config/dyno.yaml")
>>> validate_config(config)
>>> calibration = CalibrationConfig.from_dict(config)
"""

import json
import os
import re
from pathlib import Path
from typing import Dict, Any
import logging

import yaml

logger = logging.getLogger(__name__)

ENV_PATTERN = re.compile(r'\$\{(\w+)(?::([^}]*))?\}')

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)

SECTIONS = ("calibration", "powertrain", "filters", "session")

CALIBRATION_KEYS = (
    "roller_diameter",
    "load_roller_diameter",
    "encoder_gear_diameter",
    "load_gear_diameter",
    "gear_spacing",
    "load_mass",
)

FILTER_KEYS = ("torque", "horsepower", "rpm_wheel", "rpm_engine")

POWERTRAIN_TYPES = ("engine", "electric")
STROKE_CODES = (0, 2, 4)
CYLINDER_CODES = (0, 1, 2, 3, 4, 6, 8)


class ConfigError(Exception):
    """Configuration error."""
    pass


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file not found, unsupported or unparsable

    Example:
        >>> config = load_config("config/dyno.yaml")
        >>> config["calibration"]["load_mass"]
        18.5
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise ConfigError(f"Unsupported config format: {config_path.suffix}")

    try:
        with open(config_path, 'r') as f:
            if suffix in JSON_SUFFIXES:
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error loading config: {e}")

    if config is None:
        raise ConfigError(f"Empty config file: {config_path}")
    if not isinstance(config, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    # Perform environment variable substitution
    config = _substitute_env_vars(config)

    logger.info(f"Loaded config from {config_path}")

    return config


def _substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in config.

    Supports format: ${VAR_NAME:default_value}. A string that is exactly
    one placeholder is re-read as a YAML scalar, so numbers stay numbers.

    Args:
        obj: Config object (dict, list, str, etc.)

    Returns:
        Config with substituted variables
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_var(match):
            var_name = match.group(1)
            default = match.group(2) or ""
            return os.environ.get(var_name, default)

        substituted = ENV_PATTERN.sub(replace_var, obj)
        if substituted and ENV_PATTERN.fullmatch(obj):
            try:
                return yaml.safe_load(substituted)
            except yaml.YAMLError:
                return substituted
        return substituted
    else:
        return obj


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    All sections are optional; whatever is present must be well formed.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ConfigError: If validation fails
    """
    if not isinstance(config, dict):
        raise ConfigError("Config must be a dictionary")

    for section in SECTIONS:
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(f"{section} config must be a dictionary")

    _validate_calibration(config.get("calibration") or {})
    _validate_powertrain(config.get("powertrain") or {})
    _validate_filters(config.get("filters") or {})
    _validate_session(config.get("session") or {})

    logger.info("Configuration validation passed")
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _validate_calibration(calibration: Dict[str, Any]) -> None:
    """Validate rig constants."""
    unknown = set(calibration) - set(CALIBRATION_KEYS)
    if unknown:
        raise ConfigError(f"Unknown calibration keys: {sorted(unknown)}")

    for key, value in calibration.items():
        if not _is_number(value):
            raise ConfigError(f"Calibration {key} must be numeric, got {value!r}")
        if not value > 0 or value == float("inf"):
            raise ConfigError(f"Calibration {key} must be positive, got {value}")


def _validate_powertrain(powertrain: Dict[str, Any]) -> None:
    """Validate powertrain type and engine codes."""
    kind = str(powertrain.get("type", "engine")).lower()
    if kind not in POWERTRAIN_TYPES:
        raise ConfigError(
            f"Invalid powertrain type: {kind}. "
            f"Must be one of {list(POWERTRAIN_TYPES)}"
        )

    if kind == "engine":
        if powertrain.get("stroke", 4) not in STROKE_CODES:
            raise ConfigError(f"Invalid stroke: {powertrain['stroke']}")
        if powertrain.get("cylinder", 1) not in CYLINDER_CODES:
            raise ConfigError(f"Invalid cylinder count: {powertrain['cylinder']}")
        cc = powertrain.get("cc")
        if cc is not None and (not _is_number(cc) or cc < 0):
            raise ConfigError(f"Engine cc must be a non-negative number, got {cc!r}")


def _validate_filters(filters: Dict[str, Any]) -> None:
    """Validate filter periods."""
    for key, value in filters.items():
        if key not in FILTER_KEYS:
            raise ConfigError(
                f"Unknown filter channel: {key}. Must be one of {list(FILTER_KEYS)}"
            )
        if not _is_positive_int(value):
            raise ConfigError(f"Filter period {key} must be a positive integer")


def _validate_session(session: Dict[str, Any]) -> None:
    """Validate session options."""
    if "buffer_capacity" in session and not _is_positive_int(session["buffer_capacity"]):
        raise ConfigError("Session buffer_capacity must be a positive integer")
    if "apply_filters" in session and not isinstance(session["apply_filters"], bool):
        raise ConfigError("Session apply_filters must be a boolean")


def merge_configs(base: Dict[str, Any],
                 override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override config into base config.

    Args:
        base: Base configuration
        override: Configuration to merge in (overrides base)

    Returns:
        Merged configuration

    Example:
        >>> base = {"calibration": {"load_mass": 18.5, "gear_spacing": 0.144}}
        >>> merge_configs(base, {"calibration": {"load_mass": 20.0}})
        {'calibration': {'load_mass': 20.0, 'gear_spacing': 0.144}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            # Recursive merge for nested dicts
            result[key] = merge_configs(result[key], value)
        else:
            # Direct override
            result[key] = value

    logger.debug(f"Merged {len(override)} config keys")
    return result


def get_config_value(config: Dict[str, Any],
                    key_path: str,
                    default: Any = None) -> Any:
    """
    Get nested config value using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "calibration.load_mass")
        default: Default value if not found

    Returns:
        Config value or default
    """
    value = config

    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def set_config_value(config: Dict[str, Any],
                    key_path: str,
                    value: Any) -> Dict[str, Any]:
    """
    Set nested config value using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "filters.torque")
        value: Value to set

    Returns:
        Modified config
    """
    keys = key_path.split(".")
    current = config

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
    return config


def save_config(config: Dict[str, Any],
               output_path: str) -> None:
    """
    Save configuration to a YAML (or, by suffix, JSON) file.

    Args:
        config: Configuration dictionary
        output_path: Output file path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        if output_path.suffix.lower() in JSON_SUFFIXES:
            json.dump(config, f, indent=2)
        else:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved config to {output_path}")
