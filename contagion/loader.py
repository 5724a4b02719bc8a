"""
YAML field configuration loader with schema validation.

Loads field parameters from YAML files, validates them against the JSON
schema shipped in contagion/schemas, and applies the cross-field rules the
schema cannot express.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import FieldConfig


SCHEMA_DIR = Path(__file__).parent / "schemas"
FIELD_SCHEMA_PATH = SCHEMA_DIR / "field.schema.json"

_SCHEMA_CACHE = {}


class DataLoadError(Exception):
    """Raised when a configuration file cannot be found or parsed"""
    pass


class ConfigError(ValueError):
    """Raised when field parameters fail validation"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")


def load_schema(schema_path: Path = FIELD_SCHEMA_PATH) -> dict:
    """Load (and cache) a JSON schema"""
    key = str(schema_path)
    if key not in _SCHEMA_CACHE:
        try:
            with open(schema_path, 'r') as f:
                _SCHEMA_CACHE[key] = json.load(f)
        except json.JSONDecodeError as e:
            raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")
    return _SCHEMA_CACHE[key]


def validate_against_schema(data: dict, schema_path: Path = FIELD_SCHEMA_PATH, data_path: Optional[Path] = None):
    """Validate data dict against JSON schema"""
    schema = load_schema(schema_path)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        where = f" in {data_path}" if data_path else ""
        location = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"Validation error{where} at {location}: {e.message}")


def _check_cross_field(config: FieldConfig):
    """Rules spanning several parameters (schema checks each one alone)"""
    if config.initial_sick >= config.subject_count:
        raise ConfigError(
            f"initial_sick ({config.initial_sick}) must be less than "
            f"subject_count ({config.subject_count})"
        )

    if config.min_infection_time >= config.max_infection_time:
        raise ConfigError(
            f"min_infection_time ({config.min_infection_time}) must be less than "
            f"max_infection_time ({config.max_infection_time})"
        )

    if config.min_stay_time > config.max_stay_time:
        raise ConfigError(
            f"min_stay_time ({config.min_stay_time}) must not exceed "
            f"max_stay_time ({config.max_stay_time})"
        )

    for axis, (lo, hi) in enumerate(zip(config.lo_bound, config.hi_bound)):
        if lo >= hi:
            raise ConfigError(f"lo_bound must be below hi_bound on axis {axis} ({lo} >= {hi})")


def validate_config(config: FieldConfig, data_path: Optional[Path] = None) -> FieldConfig:
    """
    Validate a FieldConfig.

    Args:
        config: Parameters to check
        data_path: Source file (for error messages)

    Returns:
        The same config, for chaining

    Raises:
        ConfigError: On any schema or cross-field violation
    """
    validate_against_schema(config.to_dict(), FIELD_SCHEMA_PATH, data_path)
    _check_cross_field(config)
    return config


def config_from_dict(data: dict, data_path: Optional[Path] = None) -> FieldConfig:
    """Validate a raw parameter dict and build a FieldConfig"""
    validate_against_schema(data, FIELD_SCHEMA_PATH, data_path)
    config = FieldConfig.from_dict(data)
    _check_cross_field(config)
    return config


def load_field_config(file_path: Path) -> FieldConfig:
    """
    Load field configuration from YAML.

    Expected layout:
        field_id: default
        name: Default field
        parameters:
          subject_count: 200
          ...

    Missing parameters keep their defaults.
    """
    file_path = Path(file_path)
    data = load_yaml(file_path)

    if 'parameters' not in data:
        raise DataLoadError(f"Missing 'parameters' section in {file_path}")

    return config_from_dict(data['parameters'] or {}, file_path)
