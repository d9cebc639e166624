"""
Single-phase incompressible transport model.

Provides the kinematic viscosity at boundary faces and the density
constant that converts kinematic stresses to physical ones.

Properties come from ``constant/transport.yaml``::

    rho: 1060.0      # required
    nu: 3.3e-06      # optional; otherwise nu = mu / rho from the mu field

and may be overridden by the run configuration.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional

from wallshear.constants import TRANSPORT_FILE
from wallshear.config.schema import TransportConfig
from wallshear.errors import ConfigError
from wallshear.grid.boundary import BoundaryMesh
from wallshear.io.fields import Field


@dataclass
class SinglePhaseTransport:
    """Constant-density transport properties."""

    rho: float
    nu: Optional[float] = None

    def __post_init__(self):
        if not self.rho > 0.0:
            raise ConfigError(f"Transport density must be positive, got {self.rho}")
        if self.nu is not None and self.nu < 0.0:
            raise ConfigError(f"Kinematic viscosity must be non-negative, got {self.nu}")

    def nu_boundary(self, mesh: BoundaryMesh, mu: Field) -> Dict[str, np.ndarray]:
        """Kinematic viscosity on each patch."""
        if self.nu is not None:
            return {p.name: np.full(p.n_faces, self.nu) for p in mesh.patches}
        return {p.name: mu.patch(p.name) / self.rho for p in mesh.patches}

    @classmethod
    def from_case(cls, case, overrides: Optional[TransportConfig] = None) -> "SinglePhaseTransport":
        """
        Read properties from the case, applying non-None overrides.

        Raises
        ------
        ConfigError
            If no density is defined.
        """
        props = case.read_constant_dict(TRANSPORT_FILE, required=False)
        if overrides is not None:
            props.update({k: v for k, v in vars(overrides).items() if v is not None})

        if props.get('rho') is None:
            raise ConfigError(
                f"No density 'rho' in {case.constant_path / TRANSPORT_FILE} "
                f"or in the transport configuration"
            )
        nu = props.get('nu')
        return cls(rho=float(props['rho']), nu=None if nu is None else float(nu))
