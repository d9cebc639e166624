"""
I/O module for the wall shear stress post-processor.

Provides the case/time database, field readers and writers, and VTK output.
"""

from .case import Case, Instant, parse_time_spec
from .fields import Field, read_field, write_field, field_exists, SCALAR, VECTOR
from .output import write_boundary_vtk, BoundaryVTKWriter

__all__ = [
    'Case',
    'Instant',
    'parse_time_spec',
    'Field',
    'read_field',
    'write_field',
    'field_exists',
    'SCALAR',
    'VECTOR',
    'write_boundary_vtk',
    'BoundaryVTKWriter',
]
