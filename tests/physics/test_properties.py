"""Tests for transport and thermophysical property models."""

import numpy as np
import pytest

from wallshear.config.schema import ThermoConfig, TransportConfig
from wallshear.errors import ConfigError, MissingCaseDataError
from wallshear.io.case import Case
from wallshear.physics.thermo import PsiThermo, sutherland_mu
from wallshear.physics.transport import SinglePhaseTransport


def _write_constant(root, name, text):
    (root / "constant").mkdir(exist_ok=True)
    (root / "constant" / name).write_text(text)


class TestSinglePhaseTransport:

    def test_nu_from_mu_field(self, floor_mesh, fields):
        transport = SinglePhaseTransport(rho=1000.0)
        mu = fields.scalar(floor_mesh, "mu", 3.5e-3)

        np.testing.assert_allclose(transport.nu_boundary(floor_mesh, mu)["wall"], 3.5e-6)

    def test_constant_nu(self, floor_mesh, fields):
        transport = SinglePhaseTransport(rho=1000.0, nu=1e-6)
        mu = fields.scalar(floor_mesh, "mu", 99.0)

        np.testing.assert_allclose(transport.nu_boundary(floor_mesh, mu)["wall"], 1e-6)

    @pytest.mark.parametrize("rho", [0.0, -1.0])
    def test_density_must_be_positive(self, rho):
        with pytest.raises(ConfigError):
            SinglePhaseTransport(rho=rho)

    def test_from_case_with_overrides(self, tmp_path):
        _write_constant(tmp_path, "transport.yaml", "rho: 1000\nnu: 1.0e-6\n")
        case = Case(tmp_path)

        assert SinglePhaseTransport.from_case(case) == SinglePhaseTransport(1000.0, 1e-6)
        overridden = SinglePhaseTransport.from_case(case, TransportConfig(rho=1060.0))
        assert overridden.rho == 1060.0
        assert overridden.nu == 1e-6

    def test_from_case_without_density(self, tmp_path):
        (tmp_path / "constant").mkdir()

        with pytest.raises(ConfigError):
            SinglePhaseTransport.from_case(Case(tmp_path))


class TestPsiThermo:

    def test_sutherland_air_at_reference(self):
        # Air: As = 1.458e-6, Ts = 110.4 gives ~1.716e-5 Pa s at 273.15 K
        assert sutherland_mu(273.15, 1.458e-6, 110.4) == pytest.approx(1.716e-5, rel=2e-3)

    def test_constant_mu(self, floor_mesh):
        thermo = PsiThermo(transport="constant", mu=1.8e-5)

        assert thermo.required_fields() == []
        np.testing.assert_allclose(thermo.mu_boundary(floor_mesh, {})["wall"], 1.8e-5)

    def test_sutherland_uses_temperature(self, floor_mesh, fields):
        thermo = PsiThermo(transport="sutherland", As=1.458e-6, Ts=110.4)
        T = fields.scalar(floor_mesh, "T", 300.0)

        assert thermo.required_fields() == [("T", "scalar")]
        np.testing.assert_allclose(thermo.mu_boundary(floor_mesh, {"T": T})["wall"],
                                   sutherland_mu(300.0, 1.458e-6, 110.4))

    def test_sutherland_without_temperature_is_fatal(self, floor_mesh):
        thermo = PsiThermo(transport="sutherland", As=1.458e-6, Ts=110.4)

        with pytest.raises(MissingCaseDataError):
            thermo.mu_boundary(floor_mesh, {})

    @pytest.mark.parametrize("kwargs", [
        {"transport": "constant"},
        {"transport": "sutherland", "As": 1.0},
        {"transport": "janaf", "mu": 1.0},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ConfigError):
            PsiThermo(**kwargs)

    def test_from_case(self, tmp_path):
        _write_constant(tmp_path, "thermo.yaml", "transport: sutherland\nAs: 1.458e-06\nTs: 110.4\n")
        case = Case(tmp_path)

        thermo = PsiThermo.from_case(case)
        assert thermo.transport == "sutherland"
        assert thermo.Ts == pytest.approx(110.4)

        constant = PsiThermo.from_case(case, ThermoConfig(transport="constant", mu=2e-5))
        assert constant.mu == pytest.approx(2e-5)

    def test_from_case_without_properties(self, tmp_path):
        (tmp_path / "constant").mkdir()

        with pytest.raises(MissingCaseDataError):
            PsiThermo.from_case(Case(tmp_path))
