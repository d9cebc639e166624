"""
Time-averaged wall shear stress post-processing.

Computes the boundary wall traction (WSS) of stored flow snapshots and its
cumulative time average (TAWSSPP) for incompressible and compressible cases.
"""

__version__ = "0.1.0"
