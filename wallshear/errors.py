"""
Exception hierarchy for wall shear stress post-processing.

Every fatal condition raised by the package derives from WallShearError so
the command-line entry point can report it and exit non-zero.
"""


class WallShearError(Exception):
    """Base class for fatal post-processing errors."""


class DegenerateGeometryError(WallShearError):
    """A boundary face has a zero (or non-finite) geometric magnitude."""

    def __init__(self, patch: str, face: int, magnitude: float, quantity: str = "|Sf|"):
        self.patch = patch
        self.face = face
        self.magnitude = magnitude
        self.quantity = quantity
        super().__init__(
            f"Degenerate face {face} on patch '{patch}': "
            f"{quantity} = {magnitude!r}"
        )


class MissingCaseDataError(WallShearError):
    """Required case data (mesh, time directories, constants) is missing."""


class FieldError(WallShearError):
    """A stored field is malformed or does not match the mesh."""


class ConfigError(WallShearError):
    """Configuration values are invalid for the selected regime."""
