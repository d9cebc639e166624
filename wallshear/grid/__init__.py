"""
Boundary geometry module.

This module provides:
- Boundary patches with outward face area vectors, face centres and owner
  cell centres
- Reading, writing and per-time updating of the boundary mesh
"""

from .boundary import (
    BoundaryPatch,
    BoundaryMesh,
    load_boundary_mesh,
    write_boundary_mesh,
)

__all__ = [
    'BoundaryPatch',
    'BoundaryMesh',
    'load_boundary_mesh',
    'write_boundary_mesh',
]
