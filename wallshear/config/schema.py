"""
Configuration schema for the wall shear stress post-processor.

Dataclass-based configuration that can be loaded from YAML or constructed
programmatically. Physical constants that belong to the case (transport and
thermophysical properties) are read from the case's ``constant`` directory
and may be overridden here.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, List

from wallshear.constants import VELOCITY_FIELD, DENSITY_FIELD, VISCOSITY_FIELD


@dataclass
class TimeSelection:
    """Which time directories to process."""

    # Comma separated times and ranges, e.g. "0.1,0.5:1.0" or ":2" or "1:"
    time: Optional[str] = None
    latest_time: bool = False      # Only the last time directory
    no_zero: bool = False          # Exclude the 0 directory


@dataclass
class RegimeConfig:
    """Flow regime selection."""

    compressible: bool = False
    region: Optional[str] = None   # Mesh region sub-directory


@dataclass
class TransportConfig:
    """Incompressible single-phase transport properties.

    Values left as None are read from ``constant/transport.yaml``.
    """

    rho: Optional[float] = None    # Density constant multiplying the traction
    nu: Optional[float] = None     # Kinematic viscosity; None derives mu/rho


@dataclass
class ThermoConfig:
    """Compressible transport (molecular viscosity) model.

    Values left as None are read from ``constant/thermo.yaml``.
    """

    # "constant": mu is a constant
    # "sutherland": mu = As * sqrt(T) / (1 + Ts / T), needs a T field
    transport: Optional[str] = None
    mu: Optional[float] = None
    As: Optional[float] = None
    Ts: Optional[float] = None


@dataclass
class TurbulenceConfig:
    """Closure model for the turbulent stress contribution."""

    # "laminar": molecular stress only
    # "nut": add the eddy viscosity stored in the nut field
    model: str = "laminar"
    nut_field: str = "nut"


@dataclass
class OutputConfig:
    """Output configuration."""

    wss_field: str = "WSS"
    average_field: str = "TAWSSPP"
    vtk: bool = False              # Also write boundary VTK files
    vtk_directory: str = "VTK"     # Relative to the case directory


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    show_time: bool = False


@dataclass
class CaseConfig:
    """Complete post-processing configuration."""

    case: str = "."
    times: TimeSelection = field(default_factory=TimeSelection)
    regime: RegimeConfig = field(default_factory=RegimeConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    thermo: ThermoConfig = field(default_factory=ThermoConfig)
    turbulence: TurbulenceConfig = field(default_factory=TurbulenceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def required_fields(self) -> List[str]:
        """Input fields the selected regime needs at every time."""
        auxiliary = DENSITY_FIELD if self.regime.compressible else VISCOSITY_FIELD
        return [VELOCITY_FIELD, auxiliary]

    def to_dict(self) -> dict:
        """Convert to nested dictionary."""
        return asdict(self)
