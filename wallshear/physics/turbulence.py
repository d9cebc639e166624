"""
Effective stress closures evaluated at boundary faces.

The effective (molecular + modelled turbulent) deviatoric stress on a wall
face is built from the wall velocity gradient:

    snGrad(U) = (U_face - U_owner) / delta
    grad(U)   = n ⊗ snGrad(U)
    devReff    = -nu_eff * dev(grad(U) + grad(U)^T)        (kinematic)
    devRhoReff = -mu_eff * dev(grad(U) + grad(U)^T)        (density weighted)

with nu_eff = nu + nut and mu_eff = mu + rho * nut.

Only the wall-normal part of the gradient is available from boundary data,
so tangential derivatives of the face velocity are neglected. On a no-slip
wall these vanish.

Tensors are returned as full (n_faces, 3, 3) arrays per patch.
"""

import numpy as np
from typing import Dict, List, Optional, Tuple

from loguru import logger

from wallshear.constants import TURBULENT_VISCOSITY_FIELD
from wallshear.config.schema import TurbulenceConfig
from wallshear.errors import ConfigError, FieldError
from wallshear.grid.boundary import BoundaryMesh, BoundaryPatch
from wallshear.io.fields import Field, SCALAR
from wallshear.physics.transport import SinglePhaseTransport
from wallshear.physics.thermo import PsiThermo


def wall_velocity_gradient(patch: BoundaryPatch, U: Field) -> np.ndarray:
    """
    Velocity gradient tensor at the faces of ``patch``.

    Returns
    -------
    grad : ndarray, shape (n_faces, 3, 3)
        grad[f, i, j] = n_i * d(U_j)/dn
    """
    if U.internal.size == 0:
        raise FieldError(f"Field '{U.name}' has no cell values to form a wall gradient")

    n = patch.unit_normals()
    U_face = U.patch(patch.name)
    U_cell = U.internal[patch.face_cells]
    sn_grad = (U_face - U_cell) / patch.delta()[:, None]
    return n[:, :, None] * sn_grad[:, None, :]


def dev_two_symm(grad: np.ndarray) -> np.ndarray:
    """Deviatoric part of grad + grad^T for (..., 3, 3) arrays."""
    two_symm = grad + np.swapaxes(grad, -1, -2)
    trace = np.trace(two_symm, axis1=-2, axis2=-1)
    return two_symm - (trace / 3.0)[..., None, None] * np.eye(3)


class LaminarModel:
    """No turbulent stress contribution."""

    name = "laminar"

    def required_fields(self) -> List[Tuple[str, str]]:
        return []

    def nut(self, patch: BoundaryPatch, fields: Dict[str, Field]) -> np.ndarray:
        return np.zeros(patch.n_faces)


class EddyViscosityModel:
    """
    Eddy viscosity taken from a stored ``nut`` field.

    Falls back to laminar stress at times where the field is not stored.
    """

    name = "nut"

    def __init__(self, field_name: str = TURBULENT_VISCOSITY_FIELD):
        self.field_name = field_name

    def required_fields(self) -> List[Tuple[str, str]]:
        return [(self.field_name, SCALAR)]

    def nut(self, patch: BoundaryPatch, fields: Dict[str, Field]) -> np.ndarray:
        nut = fields.get(self.field_name)
        if nut is None:
            return np.zeros(patch.n_faces)
        return np.maximum(0.0, nut.patch(patch.name))


def make_turbulence_model(config: TurbulenceConfig):
    """Closure selected by the configuration."""
    if config.model == "laminar":
        return LaminarModel()
    if config.model == "nut":
        return EddyViscosityModel(config.nut_field)
    raise ConfigError(f"Unknown turbulence model '{config.model}'")


def _log_missing(model, fields: Dict[str, Field]):
    for name, _ in model.required_fields():
        if name not in fields:
            logger.info(f"    no {name} field, using laminar stress")


def _log_flux(mesh: BoundaryMesh, phi: Optional[Dict[str, np.ndarray]]):
    if phi is None:
        return
    for patch in mesh.patches:
        logger.debug(f"    patch {patch.name}: net flux {np.sum(phi[patch.name]):.6e}")


class IncompressibleClosure:
    """
    Kinematic effective stress for constant-density flow.

    Parameters
    ----------
    U : Field
        Velocity.
    phi : dict
        Boundary volumetric flux per patch.
    transport : SinglePhaseTransport
        Transport properties (molecular viscosity, density constant).
    model : LaminarModel or EddyViscosityModel
        Turbulent viscosity closure.
    """

    def __init__(self, U: Field, phi: Dict[str, np.ndarray],
                 transport: SinglePhaseTransport, model):
        self.U = U
        self.phi = phi
        self.transport = transport
        self.model = model

    def dev_reff(self, mesh: BoundaryMesh, mu: Field,
                 fields: Dict[str, Field]) -> Dict[str, np.ndarray]:
        """Deviatoric effective stress (divided by density) on each patch."""
        _log_missing(self.model, fields)
        _log_flux(mesh, self.phi)

        nu = self.transport.nu_boundary(mesh, mu)
        stress = {}
        for patch in mesh.patches:
            nu_eff = nu[patch.name] + self.model.nut(patch, fields)
            D = dev_two_symm(wall_velocity_gradient(patch, self.U))
            stress[patch.name] = -nu_eff[:, None, None] * D
        return stress


class CompressibleClosure:
    """
    Density-weighted effective stress for compressible flow.

    Parameters
    ----------
    rho : Field
        Density.
    U : Field
        Velocity.
    phi : dict
        Boundary mass flux per patch.
    thermo : PsiThermo
        Molecular viscosity model.
    model : LaminarModel or EddyViscosityModel
        Turbulent viscosity closure.
    """

    def __init__(self, rho: Field, U: Field, phi: Dict[str, np.ndarray],
                 thermo: PsiThermo, model):
        self.rho = rho
        self.U = U
        self.phi = phi
        self.thermo = thermo
        self.model = model

    def dev_rho_reff(self, mesh: BoundaryMesh,
                     fields: Dict[str, Field]) -> Dict[str, np.ndarray]:
        """Deviatoric effective stress (density included) on each patch."""
        _log_missing(self.model, fields)
        _log_flux(mesh, self.phi)

        mu = self.thermo.mu_boundary(mesh, fields)
        stress = {}
        for patch in mesh.patches:
            mut = self.rho.patch(patch.name) * self.model.nut(patch, fields)
            mu_eff = mu[patch.name] + mut
            D = dev_two_symm(wall_velocity_gradient(patch, self.U))
            stress[patch.name] = -mu_eff[:, None, None] * D
        return stress
