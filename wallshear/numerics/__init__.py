"""
Numerical methods for wall traction post-processing.

This module provides:
- Boundary face flux evaluation
- Projection of face stress tensors to wall traction (incompressible and
  compressible variants)
- Running time average of boundary fields
"""

from .flux import boundary_flux

from .traction import (
    TractionCalculator,
    IncompressibleTractionCalculator,
    CompressibleTractionCalculator,
    project_traction,
    wall_traction,
)

from .averaging import (
    RunningAverage,
    RunningAverageAccumulator,
    update_running_average,
)

__all__ = [
    # Fluxes
    'boundary_flux',
    # Traction
    'TractionCalculator',
    'IncompressibleTractionCalculator',
    'CompressibleTractionCalculator',
    'project_traction',
    'wall_traction',
    # Averaging
    'RunningAverage',
    'RunningAverageAccumulator',
    'update_running_average',
]
