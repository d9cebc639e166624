"""
Physical models for wall stress evaluation.

This module provides:
- Single-phase incompressible transport (viscosity, density constant)
- Compressible thermophysical viscosity (constant, Sutherland)
- Laminar and eddy-viscosity effective stress closures at walls
"""

from .transport import SinglePhaseTransport
from .thermo import PsiThermo, sutherland_mu
from .turbulence import (
    LaminarModel,
    EddyViscosityModel,
    IncompressibleClosure,
    CompressibleClosure,
    make_turbulence_model,
    wall_velocity_gradient,
    dev_two_symm,
)

__all__ = [
    'SinglePhaseTransport',
    'PsiThermo',
    'sutherland_mu',
    'LaminarModel',
    'EddyViscosityModel',
    'IncompressibleClosure',
    'CompressibleClosure',
    'make_turbulence_model',
    'wall_velocity_gradient',
    'dev_two_symm',
]
