"""
Global constants for the wall shear stress post-processor.

This module defines the field names and array layouts shared by the readers,
the calculators and the writers.
"""

# Input fields read from each time directory
VELOCITY_FIELD = "U"
VISCOSITY_FIELD = "mu"
DENSITY_FIELD = "rho"
TURBULENT_VISCOSITY_FIELD = "nut"
TEMPERATURE_FIELD = "T"
FLUX_FIELD = "phi"

# Output fields written to each time directory
WSS_FIELD = "WSS"
TAWSS_FIELD = "TAWSSPP"

# Case layout
CONSTANT_DIR = "constant"
BOUNDARY_FILE = "boundary.npz"
TRANSPORT_FILE = "transport.yaml"
THERMO_FILE = "thermo.yaml"
FIELD_SUFFIX = ".npz"

# Keys inside a field archive
INTERNAL_KEY = "internal"
PATCH_PREFIX = "patch:"

# Components
N_DIM = 3   # Vector components (x, y, z)



def patch_key(name: str) -> str:
    """Archive key holding the boundary values of patch ``name``."""
    return f"{PATCH_PREFIX}{name}"
