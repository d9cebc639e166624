"""
Wall traction (wall shear stress) on boundary faces.

For every boundary face the traction exerted by the fluid is the effective
stress projected on the inward unit normal:

    WSS = scale * (-Sf/|Sf|) · R

Incompressible flow uses the kinematic stress devReff and multiplies by the
density constant; compressible flow uses devRhoReff, which already carries
the density, with scale = 1.
"""

import numpy as np
from abc import ABC, abstractmethod
from numba import njit
from typing import Dict, List, Optional, Tuple

from wallshear.constants import FLUX_FIELD, WSS_FIELD, VISCOSITY_FIELD, DENSITY_FIELD
from wallshear.errors import FieldError
from wallshear.grid.boundary import BoundaryMesh, BoundaryPatch
from wallshear.io.fields import Field, VECTOR, SCALAR
from wallshear.numerics.flux import boundary_flux
from wallshear.physics.transport import SinglePhaseTransport
from wallshear.physics.thermo import PsiThermo
from wallshear.physics.turbulence import IncompressibleClosure, CompressibleClosure


@njit(cache=True)
def _project_kernel(n: np.ndarray, R: np.ndarray, scale: float, out: np.ndarray) -> None:
    """
    out[f, j] = -scale * sum_i n[f, i] * R[f, i, j]

    Parameters
    ----------
    n : ndarray, shape (n_faces, 3)
        Outward unit normals.
    R : ndarray, shape (n_faces, 3, 3)
        Stress tensor at each face.
    scale : float
        Density constant (1 when R already includes density).
    out : ndarray, shape (n_faces, 3)
        Traction vectors.
    """
    for f in range(n.shape[0]):
        for j in range(3):
            acc = 0.0
            for i in range(3):
                acc += n[f, i] * R[f, i, j]
            out[f, j] = -scale * acc


def project_traction(patch: BoundaryPatch, R: np.ndarray, scale: float = 1.0) -> np.ndarray:
    """
    Traction on the faces of ``patch`` from the face stress ``R``.

    Raises
    ------
    DegenerateGeometryError
        If a face of the patch has zero area.
    FieldError
        If the traction is not finite.
    """
    n = patch.unit_normals()
    R = np.ascontiguousarray(R, dtype=np.float64)
    if R.shape != (patch.n_faces, 3, 3):
        raise FieldError(
            f"Stress on patch '{patch.name}' has shape {R.shape}, "
            f"expected ({patch.n_faces}, 3, 3)"
        )

    out = np.empty((patch.n_faces, 3))
    _project_kernel(np.ascontiguousarray(n), R, float(scale), out)

    if not np.all(np.isfinite(out)):
        bad = int(np.flatnonzero(~np.all(np.isfinite(out), axis=1))[0])
        raise FieldError(f"Non-finite wall traction on patch '{patch.name}', face {bad}")
    return out


def wall_traction(mesh: BoundaryMesh, stress: Dict[str, np.ndarray],
                  scale: float = 1.0, name: str = WSS_FIELD) -> Field:
    """Traction field over all patches; interior values are zero."""
    wss = Field.zeros(name, mesh, VECTOR)
    for patch in mesh.patches:
        wss.boundary[patch.name] = project_traction(patch, stress[patch.name], scale)
    return wss


class TractionCalculator(ABC):
    """
    Per-time wall traction for one flow regime.

    Subclasses name the auxiliary field they need (viscosity or density)
    and evaluate the regime's effective stress. Instances hold only
    configuration; compute_traction has no side effects.
    """

    #: Field that must be stored alongside U for the regime
    auxiliary_field: str = ""

    def __init__(self, model, name: str = WSS_FIELD):
        self.model = model
        self.name = name

    def optional_fields(self) -> List[Tuple[str, str]]:
        """Additional fields read when present: (name, kind)."""
        return [(FLUX_FIELD, SCALAR)] + list(self.model.required_fields())

    @abstractmethod
    def compute_traction(self, U: Field, auxiliary: Field, mesh: BoundaryMesh,
                         fields: Optional[Dict[str, Field]] = None) -> Field:
        """Wall traction for one time."""


class IncompressibleTractionCalculator(TractionCalculator):
    """WSS = rho * (-n) · devReff, with rho the transport density constant."""

    auxiliary_field = VISCOSITY_FIELD

    def __init__(self, transport: SinglePhaseTransport, model, name: str = WSS_FIELD):
        super().__init__(model, name)
        self.transport = transport

    def compute_traction(self, U: Field, auxiliary: Field, mesh: BoundaryMesh,
                         fields: Optional[Dict[str, Field]] = None) -> Field:
        fields = fields or {}
        phi = boundary_flux(mesh, U, stored=fields.get(FLUX_FIELD))
        closure = IncompressibleClosure(U, phi, self.transport, self.model)
        reff = closure.dev_reff(mesh, auxiliary, fields)
        return wall_traction(mesh, reff, scale=self.transport.rho, name=self.name)


class CompressibleTractionCalculator(TractionCalculator):
    """WSS = (-n) · devRhoReff."""

    auxiliary_field = DENSITY_FIELD

    def __init__(self, thermo: PsiThermo, model, name: str = WSS_FIELD):
        super().__init__(model, name)
        self.thermo = thermo

    def optional_fields(self) -> List[Tuple[str, str]]:
        return super().optional_fields() + list(self.thermo.required_fields())

    def compute_traction(self, U: Field, auxiliary: Field, mesh: BoundaryMesh,
                         fields: Optional[Dict[str, Field]] = None) -> Field:
        fields = fields or {}
        phi = boundary_flux(mesh, U, rho=auxiliary, stored=fields.get(FLUX_FIELD))
        closure = CompressibleClosure(auxiliary, U, phi, self.thermo, self.model)
        rho_reff = closure.dev_rho_reff(mesh, fields)
        return wall_traction(mesh, rho_reff, scale=1.0, name=self.name)
