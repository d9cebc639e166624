#!/usr/bin/env python3
"""
Generate a synthetic channel case for trying out the post-processor.

Two parallel walls (y = 0 and y = H) bound a plane Couette/Poiseuille-like
flow. Each time directory stores the velocity, viscosity and density fields;
optionally some times are written without U to exercise the zero-snapshot
path.

Usage:
    python make_channel_case.py <case> --n-faces 16 --times 0,0.1,0.2
    python make_channel_case.py <case> --drop-u 0.2
"""

import sys
import argparse
from pathlib import Path

import numpy as np
import yaml

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wallshear.constants import CONSTANT_DIR, BOUNDARY_FILE, TRANSPORT_FILE, THERMO_FILE
from wallshear.grid.boundary import BoundaryMesh, BoundaryPatch, write_boundary_mesh
from wallshear.io.fields import Field, write_field, SCALAR, VECTOR


def channel_mesh(n_faces: int, length: float = 1.0, height: float = 0.1,
                 depth: float = 0.1) -> BoundaryMesh:
    """Bottom and top wall patches, one cell layer per wall."""
    dx = length / n_faces
    x = (np.arange(n_faces) + 0.5) * dx
    dy = height / 4

    def wall(name, y_face, y_cell, normal_sign, first_cell):
        Cf = np.column_stack([x, np.full(n_faces, y_face), np.full(n_faces, 0.5 * depth)])
        Sf = np.zeros((n_faces, 3))
        Sf[:, 1] = normal_sign * dx * depth
        cc = Cf.copy()
        cc[:, 1] = y_cell
        return BoundaryPatch(name, Sf, Cf, cc, first_cell + np.arange(n_faces))

    bottom = wall("bottomWall", 0.0, 0.5 * dy, -1.0, 0)
    top = wall("topWall", height, height - 0.5 * dy, 1.0, n_faces)
    return BoundaryMesh([bottom, top], n_cells=2 * n_faces)


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic channel case")
    parser.add_argument("case", help="Output case directory")
    parser.add_argument("--n-faces", type=int, default=16)
    parser.add_argument("--times", default="0,0.1,0.2,0.3")
    parser.add_argument("--u-wall-cell", type=float, default=1.0,
                        help="Velocity in the near-wall cells")
    parser.add_argument("--rho", type=float, default=1000.0)
    parser.add_argument("--mu", type=float, default=1e-3)
    parser.add_argument("--drop-u", default="", help="Times written without U")
    args = parser.parse_args()

    case = Path(args.case)
    mesh = channel_mesh(args.n_faces)
    write_boundary_mesh(case / CONSTANT_DIR / BOUNDARY_FILE, mesh)

    with open(case / CONSTANT_DIR / TRANSPORT_FILE, 'w') as f:
        yaml.dump({'rho': args.rho}, f)
    with open(case / CONSTANT_DIR / THERMO_FILE, 'w') as f:
        yaml.dump({'transport': 'constant', 'mu': args.mu}, f)

    drop = {t.strip() for t in args.drop_u.split(',') if t.strip()}
    for k, name in enumerate(t.strip() for t in args.times.split(',')):
        time_dir = case / name
        amplitude = 1.0 + 0.5 * np.sin(2.0 * np.pi * k / 4)

        U = Field.zeros("U", mesh, VECTOR)
        U.internal[:, 0] = amplitude * args.u_wall_cell
        mu = Field.zeros("mu", mesh, SCALAR)
        mu.internal[:] = args.mu
        rho = Field.zeros("rho", mesh, SCALAR)
        rho.internal[:] = args.rho
        for patch in mesh.patches:
            mu.boundary[patch.name][:] = args.mu
            rho.boundary[patch.name][:] = args.rho

        if name not in drop:
            write_field(time_dir, U)
        write_field(time_dir, mu)
        write_field(time_dir, rho)
        print(f"Wrote time {name}")


if __name__ == "__main__":
    main()
