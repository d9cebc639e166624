"""
YAML configuration loader with validation.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import fields, is_dataclass

from wallshear.errors import ConfigError
from .schema import (
    CaseConfig, TimeSelection, RegimeConfig, TransportConfig,
    ThermoConfig, TurbulenceConfig, OutputConfig, LoggingConfig,
)


_SECTIONS = {
    'times': TimeSelection,
    'regime': RegimeConfig,
    'transport': TransportConfig,
    'thermo': ThermoConfig,
    'turbulence': TurbulenceConfig,
    'output': OutputConfig,
    'logging': LoggingConfig,
}

_TURBULENCE_MODELS = ('laminar', 'nut')
_THERMO_TRANSPORT = ('constant', 'sutherland')


def _coerce_type(value, field_type):
    """Coerce value to the expected field type."""
    # YAML reads "1e-5" as a string
    if isinstance(value, str) and field_type in (float, Optional[float]):
        try:
            return float(value)
        except ValueError:
            return value
    if isinstance(value, str) and field_type == int:
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(value, (int, float)) and not isinstance(value, bool) \
            and field_type in (str, Optional[str]):
        # Single times in YAML arrive as numbers
        return str(value)
    return value


def _dict_to_dataclass(cls, data: dict):
    """Convert a nested dictionary to a dataclass instance."""
    if not is_dataclass(cls):
        return data

    field_types = {f.name: f.type for f in fields(cls)}
    kwargs = {}

    for key, value in data.items():
        if key not in field_types:
            continue  # Skip unknown fields
        kwargs[key] = _coerce_type(value, field_types[key])

    return cls(**kwargs)


def validate(config: CaseConfig) -> CaseConfig:
    """Check option values that are chosen from a fixed set."""
    if config.turbulence.model not in _TURBULENCE_MODELS:
        raise ConfigError(
            f"Unknown turbulence model '{config.turbulence.model}', "
            f"expected one of {_TURBULENCE_MODELS}"
        )
    if config.thermo.transport is not None and config.thermo.transport not in _THERMO_TRANSPORT:
        raise ConfigError(
            f"Unknown thermo transport '{config.thermo.transport}', "
            f"expected one of {_THERMO_TRANSPORT}"
        )
    if config.transport.rho is not None and config.transport.rho <= 0.0:
        raise ConfigError(f"Transport density must be positive, got {config.transport.rho}")
    return config


def load_yaml(path: Union[str, Path]) -> CaseConfig:
    """
    Load post-processing configuration from a YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        CaseConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If YAML is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse configuration {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must contain a mapping")

    return from_dict(data)


def from_dict(data: Dict[str, Any]) -> CaseConfig:
    """
    Create CaseConfig from a dictionary.

    Handles nested structures and applies defaults for missing values.
    """
    config_dict = {}

    if 'case' in data:
        config_dict['case'] = str(data['case'])

    for section, cls in _SECTIONS.items():
        if section in data and data[section] is not None:
            if not isinstance(data[section], dict):
                raise ConfigError(f"Section '{section}' must be a mapping")
            config_dict[section] = _dict_to_dataclass(cls, data[section])

    return validate(CaseConfig(**config_dict))


def apply_cli_overrides(config: CaseConfig, args) -> CaseConfig:
    """
    Apply command-line argument overrides to a configuration.

    Only overrides values that were explicitly set (not default).

    Args:
        config: Base configuration
        args: argparse.Namespace with CLI arguments

    Returns:
        Updated CaseConfig
    """
    config_dict = config.to_dict()

    cli_mapping = {
        'case': ('case',),
        'time': ('times', 'time'),
        'latest_time': ('times', 'latest_time'),
        'no_zero': ('times', 'no_zero'),
        'compressible': ('regime', 'compressible'),
        'region': ('regime', 'region'),
        'turbulence': ('turbulence', 'model'),
        'vtk': ('output', 'vtk'),
        'log_level': ('logging', 'level'),
    }

    for cli_name, config_path in cli_mapping.items():
        if hasattr(args, cli_name):
            value = getattr(args, cli_name)
            if value is not None:
                target = config_dict
                for key in config_path[:-1]:
                    target = target[key]
                target[config_path[-1]] = value

    return from_dict(config_dict)


def save_yaml(config: CaseConfig, path: Union[str, Path]) -> None:
    """Save configuration to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
