"""
Post-processor factory.

Builds the case, mesh, regime-specific traction calculator and time series
driver from a CaseConfig, so the command line and library users share the
same setup.
"""

from typing import List

from loguru import logger

from wallshear.constants import BOUNDARY_FILE
from wallshear.config.schema import CaseConfig
from wallshear.grid.boundary import load_boundary_mesh
from wallshear.io.case import Case
from wallshear.numerics.traction import (
    TractionCalculator,
    IncompressibleTractionCalculator,
    CompressibleTractionCalculator,
)
from wallshear.physics.transport import SinglePhaseTransport
from wallshear.physics.thermo import PsiThermo
from wallshear.physics.turbulence import make_turbulence_model
from .time_series import TimeSeriesDriver, StepResult


def make_traction_calculator(config: CaseConfig, case: Case) -> TractionCalculator:
    """Traction calculator for the configured regime."""
    model = make_turbulence_model(config.turbulence)
    if config.regime.compressible:
        thermo = PsiThermo.from_case(case, config.thermo)
        return CompressibleTractionCalculator(thermo, model, name=config.output.wss_field)

    transport = SinglePhaseTransport.from_case(case, config.transport)
    return IncompressibleTractionCalculator(transport, model, name=config.output.wss_field)


def create_driver(config: CaseConfig) -> TimeSeriesDriver:
    """
    Set up a driver for the configured case.

    Raises
    ------
    MissingCaseDataError
        If the case has no boundary mesh or no selected times.
    """
    case = Case(config.case, region=config.regime.region)
    mesh = load_boundary_mesh(case.constant_path / BOUNDARY_FILE)
    times = case.select_times(config.times)
    calculator = make_traction_calculator(config, case)

    regime = "compressible" if config.regime.compressible else "incompressible"
    logger.info(f"Case: {case.root}" + (f" (region {case.region})" if case.region else ""))
    logger.info(f"Regime: {regime}, turbulence: {calculator.model.name}")
    logger.info(f"Required fields: {', '.join(config.required_fields())}")
    logger.info(f"Mesh: {mesh}")
    logger.info(f"Selected {len(times)} times: {times[0].name} .. {times[-1].name}")

    return TimeSeriesDriver(case, mesh, calculator, times, output=config.output)


def run_case(config: CaseConfig) -> List[StepResult]:
    """Process the whole case and return the per-step results."""
    return create_driver(config).run()
