"""
Time series driver for wall shear stress averaging.

Processes the selected times of a case one at a time, in increasing order:

    refresh mesh -> load fields -> compute WSS -> accumulate -> write

A time without a velocity field, or without the auxiliary field of the
regime (mu or rho), contributes a zero WSS snapshot. It still counts as a
sample of the running average.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from loguru import logger

from wallshear.constants import VELOCITY_FIELD
from wallshear.config.schema import OutputConfig
from wallshear.grid.boundary import BoundaryMesh
from wallshear.io.case import Case, Instant
from wallshear.io.fields import Field, read_field, write_field, VECTOR, SCALAR
from wallshear.io.output import BoundaryVTKWriter
from wallshear.numerics.averaging import RunningAverageAccumulator
from wallshear.numerics.traction import TractionCalculator


class DriverState(Enum):
    """Stages of processing one time."""
    IDLE = "idle"
    LOADING_FIELDS = "loading_fields"
    COMPUTING = "computing"
    ACCUMULATING = "accumulating"
    PERSISTING = "persisting"
    DONE = "done"


@dataclass
class StepResult:
    """Outcome of processing one time."""
    step: int
    instant: Instant
    wss: Field
    average: Field
    computed: bool                  # False when a zero snapshot was used
    missing: Optional[str] = None   # Name of the missing input field


class TimeSeriesDriver:
    """
    Drive the per-time traction computation and running average.

    Parameters
    ----------
    case : Case
        Case directory (time database).
    mesh : BoundaryMesh
        Boundary geometry; refreshed at every time.
    calculator : TractionCalculator
        Regime-specific traction computation.
    times : list of Instant
        Times to process, in increasing order.
    output : OutputConfig
        Output field names and VTK settings.
    """

    def __init__(self, case: Case, mesh: BoundaryMesh, calculator: TractionCalculator,
                 times: List[Instant], output: Optional[OutputConfig] = None):
        values = [t.value for t in times]
        if any(b <= a for a, b in zip(values, values[1:])):
            raise ValueError(f"Times must be strictly increasing: {[t.name for t in times]}")

        self.case = case
        self.mesh = mesh
        self.calculator = calculator
        self.times = list(times)
        self.output = output or OutputConfig()
        self.state = DriverState.IDLE
        self.accumulator = RunningAverageAccumulator(mesh, name=self.output.average_field)
        self.vtk_writer = None
        if self.output.vtk:
            base = self.case.root / self.output.vtk_directory / self.output.wss_field
            self.vtk_writer = BoundaryVTKWriter(str(base))

    def _load(self, instant: Instant, name: str, kind: str) -> Optional[Field]:
        return read_field(self.case.time_path(instant), name, self.mesh, kind)

    def _load_optional(self, instant: Instant) -> Dict[str, Field]:
        fields = {}
        for name, kind in self.calculator.optional_fields():
            fld = self._load(instant, name, kind)
            if fld is not None:
                fields[name] = fld
        return fields

    def compute_snapshot(self, instant: Instant) -> StepResult:
        """
        Load the inputs of ``instant`` and compute its WSS.

        The returned result has no average yet (step 0).
        """
        self.state = DriverState.LOADING_FIELDS
        wss = Field.zeros(self.output.wss_field, self.mesh, VECTOR)

        U = self._load(instant, VELOCITY_FIELD, VECTOR)
        if U is None:
            logger.info(f"    no {VELOCITY_FIELD} field")
            return StepResult(0, instant, wss, wss, computed=False, missing=VELOCITY_FIELD)
        logger.info(f"Reading field {VELOCITY_FIELD}")

        aux_name = self.calculator.auxiliary_field
        auxiliary = self._load(instant, aux_name, SCALAR)
        if auxiliary is None:
            logger.info(f"    no {aux_name} field")
            return StepResult(0, instant, wss, wss, computed=False, missing=aux_name)
        logger.info(f"Reading field {aux_name}")

        fields = self._load_optional(instant)

        self.state = DriverState.COMPUTING
        wss = self.calculator.compute_traction(U, auxiliary, self.mesh, fields)
        return StepResult(0, instant, wss, wss, computed=True)

    def process(self, step: int, instant: Instant) -> StepResult:
        """Process the ``step``-th selected time (1-based)."""
        logger.info(f"Time = {instant.name}")
        self.mesh.read_update(self.case.boundary_candidates(instant))

        result = self.compute_snapshot(instant)

        self.state = DriverState.ACCUMULATING
        average = self.accumulator.update(result.wss, step)

        self.state = DriverState.PERSISTING
        time_dir = self.case.time_path(instant)
        write_field(time_dir, result.wss)
        logger.info(f"Writing time average wall shear stress to field {average.name}")
        write_field(time_dir, average)
        if self.vtk_writer is not None:
            self.vtk_writer.write(
                self.mesh, instant.value,
                {result.wss.name: result.wss.boundary, average.name: average.boundary},
                index=step,
            )

        self.state = DriverState.IDLE
        result.step = step
        result.average = average
        return result

    def run(self) -> List[StepResult]:
        """Process every selected time and return the per-step results."""
        results = []
        for step, instant in enumerate(self.times, start=1):
            results.append(self.process(step, instant))

        if self.vtk_writer is not None:
            series = self.vtk_writer.finalize()
            logger.info(f"VTK series written to {series}")

        self.state = DriverState.DONE
        skipped = sum(1 for r in results if not r.computed)
        logger.info(f"Processed {len(results)} times ({skipped} with missing input)")
        logger.info("End")
        return results
