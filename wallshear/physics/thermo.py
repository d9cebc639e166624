"""
Thermophysical model for compressible cases.

Supplies the molecular dynamic viscosity at boundary faces. Properties come
from ``constant/thermo.yaml``::

    transport: sutherland    # or: constant
    As: 1.458e-06            # sutherland coefficient
    Ts: 110.4                # sutherland temperature
    mu: 1.8e-05              # constant viscosity

Sutherland's law:
    mu = As * sqrt(T) / (1 + Ts / T)
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from wallshear.constants import THERMO_FILE, TEMPERATURE_FIELD
from wallshear.config.schema import ThermoConfig
from wallshear.errors import ConfigError, MissingCaseDataError
from wallshear.grid.boundary import BoundaryMesh
from wallshear.io.fields import Field, SCALAR


def sutherland_mu(T, As: float, Ts: float):
    """Sutherland viscosity law (any array shape)."""
    T = np.asarray(T, dtype=np.float64)
    return As * np.sqrt(T) / (1.0 + Ts / T)


@dataclass
class PsiThermo:
    """Compressibility-based thermophysical model (viscosity only)."""

    transport: str = "constant"
    mu: Optional[float] = None
    As: Optional[float] = None
    Ts: Optional[float] = None

    def __post_init__(self):
        if self.transport == "constant":
            if self.mu is None or self.mu < 0.0:
                raise ConfigError(f"Constant transport needs mu >= 0, got {self.mu}")
        elif self.transport == "sutherland":
            if self.As is None or self.Ts is None:
                raise ConfigError("Sutherland transport needs both As and Ts")
        else:
            raise ConfigError(f"Unknown thermo transport '{self.transport}'")

    def required_fields(self) -> List[Tuple[str, str]]:
        """Fields read from each time directory."""
        if self.transport == "sutherland":
            return [(TEMPERATURE_FIELD, SCALAR)]
        return []

    def mu_boundary(self, mesh: BoundaryMesh,
                    fields: Dict[str, Field]) -> Dict[str, np.ndarray]:
        """
        Molecular dynamic viscosity on each patch.

        Raises
        ------
        MissingCaseDataError
            If Sutherland transport is used without a temperature field.
        """
        if self.transport == "constant":
            return {p.name: np.full(p.n_faces, self.mu) for p in mesh.patches}

        T = fields.get(TEMPERATURE_FIELD)
        if T is None:
            raise MissingCaseDataError(
                f"Sutherland transport needs the {TEMPERATURE_FIELD} field"
            )
        return {p.name: sutherland_mu(T.patch(p.name), self.As, self.Ts)
                for p in mesh.patches}

    @classmethod
    def from_case(cls, case, overrides: Optional[ThermoConfig] = None) -> "PsiThermo":
        """Read properties from the case, applying non-None overrides."""
        props = case.read_constant_dict(THERMO_FILE, required=False)
        if overrides is not None:
            props.update({k: v for k, v in vars(overrides).items() if v is not None})

        if not props:
            raise MissingCaseDataError(
                f"No thermophysical properties in {case.constant_path / THERMO_FILE}"
            )

        def _opt(key):
            return None if props.get(key) is None else float(props[key])

        return cls(
            transport=str(props.get('transport', 'constant')),
            mu=_opt('mu'),
            As=_opt('As'),
            Ts=_opt('Ts'),
        )
