"""
Boundary face fluxes.

phi = U_f · Sf for incompressible flow, phi = rho_f U_f · Sf for
compressible flow. A stored ``phi`` field takes precedence.
"""

import numpy as np
from typing import Dict, Optional

from wallshear.grid.boundary import BoundaryMesh
from wallshear.io.fields import Field


def boundary_flux(mesh: BoundaryMesh, U: Field, rho: Optional[Field] = None,
                  stored: Optional[Field] = None) -> Dict[str, np.ndarray]:
    """
    Face flux on every patch.

    Parameters
    ----------
    mesh : BoundaryMesh
        Boundary geometry.
    U : Field
        Velocity.
    rho : Field, optional
        Density; gives a mass flux when present.
    stored : Field, optional
        Previously written flux, returned as is.
    """
    if stored is not None:
        return {p.name: stored.patch(p.name) for p in mesh.patches}

    phi = {}
    for patch in mesh.patches:
        flux = np.sum(U.patch(patch.name) * patch.Sf, axis=1)
        if rho is not None:
            flux = rho.patch(patch.name) * flux
        phi[patch.name] = flux
    return phi
