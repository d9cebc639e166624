"""
Field storage for case time directories.

A field is stored as a ``<name>.npz`` archive holding the per-cell values
under ``internal`` and the per-face values of each boundary patch under
``patch:<name>``. Scalar fields have one value per cell/face, vector fields
three.
"""

import zipfile
import numpy as np
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from wallshear.constants import INTERNAL_KEY, PATCH_PREFIX, N_DIM, FIELD_SUFFIX, patch_key
from wallshear.errors import FieldError
from wallshear.grid.boundary import BoundaryMesh


SCALAR = "scalar"
VECTOR = "vector"


def _value_shape(kind: str) -> tuple:
    if kind == SCALAR:
        return ()
    if kind == VECTOR:
        return (N_DIM,)
    raise ValueError(f"Unknown field kind '{kind}'")


@dataclass
class Field:
    """
    A named volume field with boundary values.

    Attributes
    ----------
    name : str
        Field name (file stem).
    kind : str
        "scalar" or "vector".
    internal : ndarray, shape (n_cells,) or (n_cells, 3)
        Cell values. May be empty when only boundary values are stored.
    boundary : dict
        Patch name -> ndarray of shape (n_faces,) or (n_faces, 3).
    """

    name: str
    kind: str
    internal: np.ndarray
    boundary: Dict[str, np.ndarray] = field(default_factory=dict)

    @classmethod
    def zeros(cls, name: str, mesh: BoundaryMesh, kind: str = VECTOR) -> "Field":
        """Field that is zero everywhere on ``mesh``."""
        shape = _value_shape(kind)
        return cls(
            name=name,
            kind=kind,
            internal=np.zeros((mesh.n_cells,) + shape),
            boundary={p.name: np.zeros((p.n_faces,) + shape) for p in mesh.patches},
        )

    def patch(self, name: str) -> np.ndarray:
        return self.boundary[name]

    def copy(self, name: Optional[str] = None) -> "Field":
        return Field(
            name=name or self.name,
            kind=self.kind,
            internal=self.internal.copy(),
            boundary={k: v.copy() for k, v in self.boundary.items()},
        )


def field_path(directory: Union[str, Path], name: str) -> Path:
    return Path(directory) / f"{name}{FIELD_SUFFIX}"


def field_exists(directory: Union[str, Path], name: str) -> bool:
    """Whether ``name`` is stored in ``directory`` (header check only)."""
    return field_path(directory, name).is_file()


def read_field(directory: Union[str, Path],
               name: str,
               mesh: BoundaryMesh,
               kind: str) -> Optional[Field]:
    """
    Read a field from a time directory.

    Returns
    -------
    Field or None
        None if the field is not stored in ``directory``.

    Raises
    ------
    FieldError
        If the archive lacks a patch of ``mesh`` or has the wrong shape.
    """
    path = field_path(directory, name)
    if not path.is_file():
        return None

    shape = _value_shape(kind)
    try:
        data = np.load(path, allow_pickle=False)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise FieldError(f"Cannot read field '{name}' from {path}: {e}") from e

    with data:
        if INTERNAL_KEY in data.files:
            internal = np.asarray(data[INTERNAL_KEY], dtype=np.float64)
        else:
            internal = np.zeros((0,) + shape)
        if internal.size and internal.shape != (mesh.n_cells,) + shape:
            raise FieldError(
                f"Field '{name}' in {path}: internal values have shape "
                f"{internal.shape}, expected {(mesh.n_cells,) + shape}"
            )

        boundary = {}
        for patch in mesh.patches:
            key = patch_key(patch.name)
            if key not in data.files:
                raise FieldError(f"Field '{name}' in {path} has no values for patch '{patch.name}'")
            values = np.asarray(data[key], dtype=np.float64)
            expected = (patch.n_faces,) + shape
            if values.shape != expected:
                raise FieldError(
                    f"Field '{name}' in {path}: patch '{patch.name}' has shape "
                    f"{values.shape}, expected {expected}"
                )
            boundary[patch.name] = values

    return Field(name=name, kind=kind, internal=internal, boundary=boundary)


def write_field(directory: Union[str, Path], fld: Field) -> Path:
    """Write ``fld`` into ``directory`` as ``<name>.npz``."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = field_path(directory, fld.name)

    arrays = {INTERNAL_KEY: fld.internal}
    for patch_name, values in fld.boundary.items():
        arrays[f"{PATCH_PREFIX}{patch_name}"] = values

    np.savez(path, **arrays)
    return path
