"""
Test field configuration loading

Verifies YAML -> FieldConfig conversion and schema/cross-field validation.
"""

from pathlib import Path

import pytest

from contagion.loader import (
    load_field_config,
    load_yaml,
    config_from_dict,
    validate_config,
    DataLoadError,
    ConfigError,
)
from contagion.data_types import FieldConfig


DATA_ROOT = Path(__file__).parent.parent.parent / "data"


def test_load_default_field():
    """Shipped default file matches built-in defaults (explicit centre destination)"""
    config = load_field_config(DATA_ROOT / "field" / "default.yaml")

    print(f"[OK] Loaded field: {config.subject_count} subjects, "
          f"bounds {config.lo_bound} - {config.hi_bound}")

    assert config == FieldConfig(destination=[320.0, 240.0])
    assert list(config.resolved_destination()) == [320.0, 240.0]


def test_partial_parameters_keep_defaults(tmp_path):
    path = tmp_path / "small.yaml"
    path.write_text(
        "field_id: small\n"
        "parameters:\n"
        "  subject_count: 12\n"
        "  infection_radius: 0\n"
        "  seed: 42\n"
    )

    config = load_field_config(path)
    assert config.subject_count == 12
    assert config.infection_radius == 0
    assert config.seed == 42
    assert config.friction_factor == FieldConfig().friction_factor


def test_missing_file():
    with pytest.raises(DataLoadError):
        load_field_config(DATA_ROOT / "field" / "does-not-exist.yaml")


def test_bad_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("parameters: [unclosed\n")
    with pytest.raises(DataLoadError):
        load_yaml(path)


def test_missing_parameters_section(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("field_id: nothing\n")
    with pytest.raises(DataLoadError):
        load_field_config(path)


def test_schema_violation_reports_location(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("parameters:\n  friction_factor: 2.0\n")
    with pytest.raises(ConfigError) as excinfo:
        load_field_config(path)
    assert "friction_factor" in str(excinfo.value)


def test_unknown_parameter_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({'subject_count': 10, 'colour': 'red'})


def test_wrong_type_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({'subject_count': "many"})
    with pytest.raises(ConfigError):
        config_from_dict({'subject_count': True})


def test_cross_field_rules():
    with pytest.raises(ConfigError):
        validate_config(FieldConfig(min_infection_time=10, max_infection_time=5))
    with pytest.raises(ConfigError):
        validate_config(FieldConfig(subject_count=3, initial_sick=3))

    # Equal stay times are allowed (constant stay)
    validate_config(FieldConfig(min_stay_time=40, max_stay_time=40))


def test_tuple_bounds_accepted():
    config = validate_config(FieldConfig(lo_bound=(0.0, 0.0), hi_bound=(10.0, 10.0), initial_sick=1))
    assert config.to_dict()['hi_bound'] == [10.0, 10.0]
