"""
Configuration module for the wall shear stress post-processor.

Provides YAML-based configuration with dataclass schema.
"""

from .schema import (
    CaseConfig,
    TimeSelection,
    RegimeConfig,
    TransportConfig,
    ThermoConfig,
    TurbulenceConfig,
    OutputConfig,
    LoggingConfig,
)

from .loader import (
    load_yaml,
    from_dict,
    apply_cli_overrides,
    save_yaml,
    validate,
)

__all__ = [
    # Schema classes
    'CaseConfig',
    'TimeSelection',
    'RegimeConfig',
    'TransportConfig',
    'ThermoConfig',
    'TurbulenceConfig',
    'OutputConfig',
    'LoggingConfig',
    # Loader functions
    'load_yaml',
    'from_dict',
    'apply_cli_overrides',
    'save_yaml',
    'validate',
]
