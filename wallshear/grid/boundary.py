"""
Boundary mesh geometry.

Only the boundary of the finite volume mesh is needed to evaluate wall
traction: for each boundary face the area vector, the face centre and the
centre of the owner cell.

Conventions:
    - Sf points out of the domain, |Sf| is the face area
    - Per-face arrays have shape (n_faces, 3)
    - Patches keep the order in which they are stored
"""

import zipfile
import numpy as np
from pathlib import Path
from typing import NamedTuple, List, Optional, Union

from loguru import logger

from wallshear.constants import N_DIM
from wallshear.errors import DegenerateGeometryError, MissingCaseDataError


class BoundaryPatch(NamedTuple):
    """
    Geometry of one named boundary surface.

    Attributes
    ----------
    name : str
        Patch name.
    Sf : ndarray, shape (n_faces, 3)
        Outward face area vectors.
    Cf : ndarray, shape (n_faces, 3)
        Face centres.
    cell_centres : ndarray, shape (n_faces, 3)
        Centres of the cells owning each face.
    face_cells : ndarray, shape (n_faces,)
        Index of the cell owning each face.
    """

    name: str
    Sf: np.ndarray
    Cf: np.ndarray
    cell_centres: np.ndarray
    face_cells: np.ndarray

    @property
    def n_faces(self) -> int:
        return self.Sf.shape[0]

    @property
    def magSf(self) -> np.ndarray:
        """Face areas."""
        return np.sqrt(np.sum(self.Sf**2, axis=1))

    def unit_normals(self) -> np.ndarray:
        """
        Outward unit normals Sf/|Sf|.

        Raises
        ------
        DegenerateGeometryError
            If any face has zero or non-finite area.
        """
        mag = self.magSf
        bad = np.flatnonzero(~(np.isfinite(mag) & (mag > 0.0)))
        if bad.size:
            raise DegenerateGeometryError(self.name, int(bad[0]), float(mag[bad[0]]))
        return self.Sf / mag[:, None]

    def delta(self) -> np.ndarray:
        """
        Wall-normal distance from each owner cell centre to its face.

        Raises
        ------
        DegenerateGeometryError
            If a cell centre lies on its boundary face.
        """
        n = self.unit_normals()
        d = np.abs(np.sum((self.Cf - self.cell_centres) * n, axis=1))
        bad = np.flatnonzero(~(np.isfinite(d) & (d > 0.0)))
        if bad.size:
            raise DegenerateGeometryError(self.name, int(bad[0]), float(d[bad[0]]), "delta")
        return d


class BoundaryMesh:
    """
    Boundary patches of a (possibly moving) mesh.

    Example
    -------
    >>> mesh = load_boundary_mesh("case/constant/boundary.npz")
    >>> for patch in mesh.patches:
    ...     print(patch.name, patch.n_faces)
    """

    def __init__(self, patches: List[BoundaryPatch], n_cells: int = 0,
                 path: Optional[Path] = None):
        names = [p.name for p in patches]
        if len(set(names)) != len(names):
            raise MissingCaseDataError(f"Duplicate patch names: {names}")
        self.patches = list(patches)
        self.n_cells = int(n_cells)
        self.path = path

    @property
    def patch_names(self) -> List[str]:
        return [p.name for p in self.patches]

    @property
    def n_faces(self) -> int:
        return sum(p.n_faces for p in self.patches)

    def patch(self, name: str) -> BoundaryPatch:
        for p in self.patches:
            if p.name == name:
                return p
        raise KeyError(f"No patch named '{name}'")

    def read_update(self, candidates: List[Path]) -> bool:
        """
        Reload geometry for a new time.

        ``candidates`` are boundary files in order of preference (the time
        directory first, then ``constant``). The first existing file is
        loaded if it differs from the current one.

        Returns
        -------
        bool
            True if the geometry changed.
        """
        for candidate in candidates:
            candidate = Path(candidate)
            if candidate.exists():
                if self.path is not None and candidate.resolve() == self.path.resolve():
                    return False
                updated = load_boundary_mesh(candidate)
                self.patches = updated.patches
                self.n_cells = updated.n_cells
                self.path = updated.path
                logger.info(f"    Mesh updated from {candidate}")
                return True
        return False

    def __repr__(self) -> str:
        return (f"BoundaryMesh({len(self.patches)} patches, "
                f"{self.n_faces} faces, {self.n_cells} cells)")


def _check_array(name: str, key: str, arr: np.ndarray, n_faces: int) -> np.ndarray:
    arr = np.asarray(arr, dtype=np.float64)
    if arr.shape != (n_faces, N_DIM):
        raise MissingCaseDataError(
            f"Patch '{name}': {key} has shape {arr.shape}, expected ({n_faces}, {N_DIM})"
        )
    return arr


def _check_face_cells(name: str, arr: np.ndarray, n_faces: int, n_cells: int) -> np.ndarray:
    arr = np.asarray(arr, dtype=np.int64)
    if arr.shape != (n_faces,):
        raise MissingCaseDataError(
            f"Patch '{name}': faceCells has shape {arr.shape}, expected ({n_faces},)"
        )
    if arr.size and (arr.min() < 0 or arr.max() >= n_cells):
        raise MissingCaseDataError(
            f"Patch '{name}': faceCells out of range for {n_cells} cells"
        )
    return arr


def load_boundary_mesh(path: Union[str, Path]) -> BoundaryMesh:
    """
    Read boundary geometry from a ``boundary.npz`` archive.

    The archive holds ``patches`` (patch names in order), ``n_cells`` and,
    for each patch, ``Sf:<name>``, ``Cf:<name>``, ``cellCentres:<name>`` and
    ``faceCells:<name>``.

    Raises
    ------
    MissingCaseDataError
        If the file does not exist, cannot be read or is incomplete.
    """
    path = Path(path)
    if not path.exists():
        raise MissingCaseDataError(f"Boundary mesh not found: {path}")

    try:
        data = np.load(path, allow_pickle=False)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise MissingCaseDataError(f"Cannot read boundary mesh {path}: {e}") from e

    with data:
        for key in ('patches', 'n_cells'):
            if key not in data.files:
                raise MissingCaseDataError(f"{path} has no '{key}' entry")
        names = [str(n) for n in data['patches']]
        n_cells = int(data['n_cells'])

        patches = []
        for name in names:
            keys = (f"Sf:{name}", f"Cf:{name}", f"cellCentres:{name}", f"faceCells:{name}")
            missing = [k for k in keys if k not in data.files]
            if missing:
                raise MissingCaseDataError(f"{path}: patch '{name}' is missing {missing}")
            Sf = np.asarray(data[keys[0]], dtype=np.float64)
            n_faces = Sf.shape[0] if Sf.ndim else 0
            patches.append(BoundaryPatch(
                name=name,
                Sf=_check_array(name, "Sf", Sf, n_faces),
                Cf=_check_array(name, "Cf", data[keys[1]], n_faces),
                cell_centres=_check_array(name, "cellCentres", data[keys[2]], n_faces),
                face_cells=_check_face_cells(name, data[keys[3]], n_faces, n_cells),
            ))

    return BoundaryMesh(patches, n_cells=n_cells, path=path)


def write_boundary_mesh(path: Union[str, Path], mesh: BoundaryMesh) -> Path:
    """Write boundary geometry in the format read by load_boundary_mesh."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    arrays = {
        'patches': np.array(mesh.patch_names, dtype=str),
        'n_cells': np.array(mesh.n_cells),
    }
    for p in mesh.patches:
        arrays[f"Sf:{p.name}"] = p.Sf
        arrays[f"Cf:{p.name}"] = p.Cf
        arrays[f"cellCentres:{p.name}"] = p.cell_centres
        arrays[f"faceCells:{p.name}"] = p.face_cells

    np.savez(path, **arrays)
    return path
