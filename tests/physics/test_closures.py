"""
Tests for wall effective stress closures.

A floor at y=0 with outward normal -y and owner cells at y=d carrying
velocity (u, 0, 0) over a no-slip wall has du/dy = u/d. The deviatoric
strain dev(grad U + grad U^T) is then u/d in the xy and yx entries only.
"""

import numpy as np
import pytest

from wallshear.errors import ConfigError, FieldError
from wallshear.config.schema import TurbulenceConfig
from wallshear.grid.boundary import BoundaryMesh
from wallshear.io.fields import Field, VECTOR
from wallshear.physics.thermo import PsiThermo
from wallshear.physics.transport import SinglePhaseTransport
from wallshear.physics.turbulence import (
    CompressibleClosure,
    EddyViscosityModel,
    IncompressibleClosure,
    LaminarModel,
    dev_two_symm,
    make_turbulence_model,
    wall_velocity_gradient,
)


class TestWallGradient:

    def test_shear_gradient(self, floor_mesh, fields):
        U = fields.velocity(floor_mesh, u_cell=2.0)
        grad = wall_velocity_gradient(floor_mesh.patch("wall"), U)

        expected = np.zeros((3, 3))
        expected[1, 0] = 2.0 / 0.5   # d(U_x)/dy
        np.testing.assert_allclose(grad, np.broadcast_to(expected, (4, 3, 3)))

    def test_ceiling_has_opposite_sign(self, patches, fields):
        mesh = BoundaryMesh([patches.ceiling(n_faces=2)], n_cells=2)
        U = fields.velocity(mesh, u_cell=1.0)

        grad = wall_velocity_gradient(mesh.patch("top"), U)

        # Velocity decreases towards the ceiling
        np.testing.assert_allclose(grad[:, 1, 0], -2.0)

    def test_requires_cell_values(self, floor_mesh):
        U = Field("U", VECTOR, np.zeros((0, 3)),
                  {"wall": np.zeros((4, 3))})

        with pytest.raises(FieldError):
            wall_velocity_gradient(floor_mesh.patch("wall"), U)

    def test_dev_two_symm_is_traceless_and_symmetric(self):
        rng = np.random.default_rng(0)
        grad = rng.normal(size=(5, 3, 3))

        D = dev_two_symm(grad)

        np.testing.assert_allclose(np.trace(D, axis1=1, axis2=2), 0.0, atol=1e-12)
        np.testing.assert_allclose(D, np.swapaxes(D, 1, 2))


class TestTurbulenceModels:

    def test_factory(self):
        assert isinstance(make_turbulence_model(TurbulenceConfig()), LaminarModel)
        model = make_turbulence_model(TurbulenceConfig(model="nut", nut_field="nuSgs"))
        assert isinstance(model, EddyViscosityModel)
        assert model.required_fields() == [("nuSgs", "scalar")]

    def test_unknown_model(self):
        with pytest.raises(ConfigError):
            make_turbulence_model(TurbulenceConfig(model="kOmega"))

    def test_eddy_viscosity_clipped_and_optional(self, floor_mesh, fields):
        model = EddyViscosityModel()
        patch = floor_mesh.patch("wall")
        nut = fields.scalar(floor_mesh, "nut", 0.1)
        nut.boundary["wall"][0] = -1.0

        np.testing.assert_allclose(model.nut(patch, {"nut": nut}), [0.0, 0.1, 0.1, 0.1])
        np.testing.assert_allclose(model.nut(patch, {}), 0.0)


class TestIncompressibleClosure:

    def test_laminar_dev_reff(self, floor_mesh, fields):
        U = fields.velocity(floor_mesh, u_cell=1.0)
        mu = fields.scalar(floor_mesh, "mu", 2.0)
        transport = SinglePhaseTransport(rho=4.0)

        closure = IncompressibleClosure(U, {"wall": np.zeros(4)}, transport, LaminarModel())
        R = closure.dev_reff(floor_mesh, mu, {})["wall"]

        # nu = mu/rho = 0.5, strain = u/d = 2
        np.testing.assert_allclose(R[:, 0, 1], -1.0)
        np.testing.assert_allclose(R[:, 1, 0], -1.0)
        np.testing.assert_allclose(R[:, 0, 0], 0.0)

    def test_configured_nu_and_eddy_viscosity(self, floor_mesh, fields):
        U = fields.velocity(floor_mesh, u_cell=1.0)
        mu = fields.scalar(floor_mesh, "mu", 123.0)
        nut = fields.scalar(floor_mesh, "nut", 0.25)
        transport = SinglePhaseTransport(rho=1.0, nu=0.25)

        closure = IncompressibleClosure(U, None, transport, EddyViscosityModel())
        R = closure.dev_reff(floor_mesh, mu, {"nut": nut})["wall"]

        np.testing.assert_allclose(R[:, 1, 0], -(0.25 + 0.25) * 2.0)


class TestCompressibleClosure:

    def test_constant_viscosity(self, floor_mesh, fields):
        U = fields.velocity(floor_mesh, u_cell=1.0)
        rho = fields.scalar(floor_mesh, "rho", 1.2)
        thermo = PsiThermo(transport="constant", mu=0.5)

        closure = CompressibleClosure(rho, U, None, thermo, LaminarModel())
        R = closure.dev_rho_reff(floor_mesh, {})["wall"]

        np.testing.assert_allclose(R[:, 1, 0], -0.5 * 2.0)

    def test_density_weights_eddy_viscosity(self, floor_mesh, fields):
        U = fields.velocity(floor_mesh, u_cell=1.0)
        rho = fields.scalar(floor_mesh, "rho", 2.0)
        nut = fields.scalar(floor_mesh, "nut", 0.1)
        thermo = PsiThermo(transport="constant", mu=0.0)

        closure = CompressibleClosure(rho, U, None, thermo, EddyViscosityModel())
        R = closure.dev_rho_reff(floor_mesh, {"nut": nut})["wall"]

        np.testing.assert_allclose(R[:, 1, 0], -(2.0 * 0.1) * 2.0)
