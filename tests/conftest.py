"""
Shared pytest fixtures for the test suite.

This module provides factories for small boundary meshes and synthetic case
directories written under pytest's tmp_path.
"""

import pytest
import numpy as np
import yaml

from wallshear.constants import CONSTANT_DIR, BOUNDARY_FILE, TRANSPORT_FILE, THERMO_FILE
from wallshear.grid.boundary import BoundaryMesh, BoundaryPatch, write_boundary_mesh
from wallshear.io.fields import Field, write_field, SCALAR, VECTOR


# =============================================================================
# Geometry
# =============================================================================

def floor_patch(name="wall", n_faces=4, area=0.25, cell_height=0.5, first_cell=0):
    """
    Flat wall at y=0 with the fluid above it.

    Sf points in -y (out of the domain); owner cell centres sit at
    y = cell_height.
    """
    x = np.arange(n_faces, dtype=float)
    Cf = np.column_stack([x, np.zeros(n_faces), np.zeros(n_faces)])
    Sf = np.zeros((n_faces, 3))
    Sf[:, 1] = -area
    cell_centres = Cf.copy()
    cell_centres[:, 1] = cell_height
    face_cells = first_cell + np.arange(n_faces)
    return BoundaryPatch(name, Sf, Cf, cell_centres, face_cells)


def ceiling_patch(name="top", n_faces=4, area=0.25, height=1.0, cell_height=0.5,
                  first_cell=0):
    """Flat wall at y=height with the fluid below it (Sf in +y)."""
    x = np.arange(n_faces, dtype=float)
    Cf = np.column_stack([x, np.full(n_faces, height), np.zeros(n_faces)])
    Sf = np.zeros((n_faces, 3))
    Sf[:, 1] = area
    cell_centres = Cf.copy()
    cell_centres[:, 1] = height - cell_height
    face_cells = first_cell + np.arange(n_faces)
    return BoundaryPatch(name, Sf, Cf, cell_centres, face_cells)


@pytest.fixture
def floor_mesh():
    """Single 4-face floor patch, one cell per face."""
    return BoundaryMesh([floor_patch()], n_cells=4)


@pytest.fixture
def channel_mesh():
    """Floor and ceiling patches sharing no cells."""
    return BoundaryMesh(
        [floor_patch("bottom", n_faces=3), ceiling_patch("top", n_faces=2, first_cell=3)],
        n_cells=5,
    )


# =============================================================================
# Fields
# =============================================================================

def velocity_field(mesh, u_cell, u_wall=0.0):
    """U with x-velocity u_cell in every cell and u_wall on the walls."""
    U = Field.zeros("U", mesh, VECTOR)
    U.internal[:, 0] = u_cell
    for patch in mesh.patches:
        U.boundary[patch.name][:, 0] = u_wall
    return U


def uniform_scalar(mesh, name, value):
    fld = Field.zeros(name, mesh, SCALAR)
    fld.internal[:] = value
    for patch in mesh.patches:
        fld.boundary[patch.name][:] = value
    return fld


# =============================================================================
# Cases
# =============================================================================

@pytest.fixture
def make_case(tmp_path):
    """
    Factory writing a case directory.

    Parameters of the returned function
    -----------------------------------
    mesh : BoundaryMesh
    times : dict
        Time name -> dict of field name -> Field.
    transport, thermo : dict, optional
        Written to constant/transport.yaml and constant/thermo.yaml.
    region : str, optional
        Region sub-directory.
    """
    def _make(mesh, times, transport=None, thermo=None, region=None, root=None):
        case = tmp_path / (root or "case")
        constant = case / CONSTANT_DIR
        if region:
            constant = constant / region
        write_boundary_mesh(constant / BOUNDARY_FILE, mesh)

        if transport is not None:
            with open(constant / TRANSPORT_FILE, 'w') as f:
                yaml.dump(transport, f)
        if thermo is not None:
            with open(constant / THERMO_FILE, 'w') as f:
                yaml.dump(thermo, f)

        for name, fields in times.items():
            time_dir = case / name
            if region:
                time_dir = time_dir / region
            time_dir.mkdir(parents=True, exist_ok=True)
            for fld in fields.values():
                write_field(time_dir, fld)
        return case

    return _make


@pytest.fixture
def fields():
    """Field builders: velocity(mesh, u_cell) and scalar(mesh, name, value)."""
    class _Builders:
        velocity = staticmethod(velocity_field)
        scalar = staticmethod(uniform_scalar)
    return _Builders


@pytest.fixture
def patches():
    """Patch builders: floor(...) and ceiling(...)."""
    class _Builders:
        floor = staticmethod(floor_patch)
        ceiling = staticmethod(ceiling_patch)
    return _Builders
