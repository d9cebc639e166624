"""
VTK Output Writer for boundary fields.

This module writes boundary face data (wall shear stress and its time
average) to VTK files for inspection in ParaView or other VTK-compatible
viewers.

File Format:
    Legacy VTK ASCII POLYDATA. Each boundary face is a vertex located at
    the face centre; per-face values are POINT_DATA. A ``.vtk.series``
    file lists the written times so ParaView loads them as one series.
"""

import os
import numpy as np
from typing import Dict, Optional

from wallshear.grid.boundary import BoundaryMesh


def _stack(mesh: BoundaryMesh, values: Dict[str, np.ndarray]) -> np.ndarray:
    return np.concatenate([values[p.name] for p in mesh.patches], axis=0)


def write_boundary_vtk(filename: str,
                       mesh: BoundaryMesh,
                       vectors: Optional[Dict[str, Dict[str, np.ndarray]]] = None,
                       title: str = "Boundary fields") -> str:
    """
    Write boundary face fields to a VTK file.

    Parameters
    ----------
    filename : str
        Output filename (will add .vtk extension if not present).
    mesh : BoundaryMesh
        Boundary geometry; face centres become the points.
    vectors : dict, optional
        Field name -> {patch name -> ndarray of shape (n_faces, 3)}.
        A ``patchID`` scalar is always written as well.

    Returns
    -------
    str
        Path to the written file.
    """
    if not filename.endswith('.vtk'):
        filename = filename + '.vtk'

    output_dir = os.path.dirname(filename)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    n_points = mesh.n_faces
    points = (np.concatenate([p.Cf for p in mesh.patches], axis=0)
              if mesh.patches else np.zeros((0, 3)))
    patch_id = (np.concatenate([np.full(p.n_faces, i, dtype=float)
                                for i, p in enumerate(mesh.patches)])
                if mesh.patches else np.zeros(0))

    with open(filename, 'w') as f:
        f.write("# vtk DataFile Version 3.0\n")
        f.write(f"{title}\n")
        f.write("ASCII\n")
        f.write("DATASET POLYDATA\n")

        f.write(f"POINTS {n_points} float\n")
        for x, y, z in points:
            f.write(f"{x:.10e} {y:.10e} {z:.10e}\n")

        # One vertex cell per face centre
        f.write(f"\nVERTICES {n_points} {2 * n_points}\n")
        for i in range(n_points):
            f.write(f"1 {i}\n")

        f.write(f"\nPOINT_DATA {n_points}\n")
        _write_scalar_field(f, "patchID", patch_id)

        if vectors:
            for name, data in vectors.items():
                values = _stack(mesh, data)
                if values.shape != (n_points, 3):
                    raise ValueError(f"Vector '{name}' has wrong shape: {values.shape}")
                _write_vector_field(f, name, values)

    return filename


def _write_scalar_field(f, name: str, data: np.ndarray):
    """Write a scalar field to VTK file."""
    f.write(f"SCALARS {name} float 1\n")
    f.write("LOOKUP_TABLE default\n")
    for value in data:
        f.write(f"{value:.10e}\n")


def _write_vector_field(f, name: str, data: np.ndarray):
    """Write a vector field to VTK file."""
    f.write(f"VECTORS {name} float\n")
    for vx, vy, vz in data:
        f.write(f"{vx:.10e} {vy:.10e} {vz:.10e}\n")


class BoundaryVTKWriter:
    """
    Class-based VTK writer for managing output during a time series.

    Example
    -------
    >>> writer = BoundaryVTKWriter("case/VTK/wall")
    >>> for step, instant in enumerate(times):
    >>>     writer.write(mesh, instant.value, {"WSS": wss.boundary})
    >>> writer.finalize()  # Writes .vtk.series file
    """

    def __init__(self, base_filename: str):
        self.base_filename = base_filename
        self.files: Dict[float, str] = {}  # Maps time to filename

    def write(self,
              mesh: BoundaryMesh,
              time: float,
              vectors: Dict[str, Dict[str, np.ndarray]],
              index: Optional[int] = None) -> str:
        """
        Write the boundary fields of one time.

        Returns
        -------
        str
            Path to written file.
        """
        if index is None:
            index = len(self.files)
        filename = f"{self.base_filename}_{index:06d}.vtk"
        write_boundary_vtk(filename, mesh, vectors=vectors, title=f"Time = {time:g}")
        self.files[time] = filename
        return filename

    def finalize(self) -> str:
        """
        Write .vtk.series file for ParaView time series loading.

        Returns
        -------
        str
            Path to the .vtk.series file, empty if nothing was written.
        """
        if not self.files:
            return ""

        series_filename = f"{self.base_filename}.vtk.series"
        with open(series_filename, 'w') as f:
            f.write('{\n')
            f.write('  "file-series-version" : "1.0",\n')
            f.write('  "files" : [\n')

            sorted_items = sorted(self.files.items())
            for idx, (time, vtk_file) in enumerate(sorted_items):
                comma = "," if idx < len(sorted_items) - 1 else ""
                vtk_basename = os.path.basename(vtk_file)
                f.write(f'    {{ "name" : "{vtk_basename}", "time" : {time!r} }}{comma}\n')

            f.write('  ]\n')
            f.write('}\n')

        return series_filename
