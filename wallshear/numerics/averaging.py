"""
Running time average of boundary fields.

The accumulator keeps the raw sum of all snapshots processed so far and the
number of snapshots, so the average after k steps is

    average_k = (w_1 + w_2 + ... + w_k) / k

with the sum formed in processing order. Nothing but the sum is retained,
so memory does not grow with the length of the series.
"""

import numpy as np
from typing import NamedTuple, Dict

from wallshear.constants import TAWSS_FIELD
from wallshear.errors import FieldError
from wallshear.io.fields import Field, VECTOR


class RunningAverage(NamedTuple):
    """
    Running sum and count of boundary snapshots.

    Attributes
    ----------
    total : dict
        Patch name -> ndarray, sum of all snapshots so far.
    count : int
        Number of snapshots summed.
    """

    total: Dict[str, np.ndarray]
    count: int

    @classmethod
    def empty(cls, like: Dict[str, np.ndarray]) -> "RunningAverage":
        """Zero sum with the patch layout of ``like``."""
        return cls({k: np.zeros_like(v, dtype=np.float64) for k, v in like.items()}, 0)

    def average(self) -> Dict[str, np.ndarray]:
        """Mean of the summed snapshots; zero before the first update."""
        if self.count == 0:
            return {k: np.zeros_like(v) for k, v in self.total.items()}
        return {k: v / self.count for k, v in self.total.items()}


def update_running_average(state: RunningAverage,
                           snapshot: Dict[str, np.ndarray],
                           step: int) -> RunningAverage:
    """
    Add one snapshot to the running sum.

    Parameters
    ----------
    state : RunningAverage
        Sum and count after ``step - 1`` snapshots. Not modified.
    snapshot : dict
        Patch name -> ndarray with the same layout as ``state.total``.
    step : int
        1-based index of ``snapshot`` in the series.

    Returns
    -------
    RunningAverage
        Sum and count after ``step`` snapshots.

    Raises
    ------
    ValueError
        If ``step`` does not follow ``state.count``.
    FieldError
        If the snapshot layout differs from the running sum.
    """
    if step != state.count + 1:
        raise ValueError(f"Step {step} does not follow {state.count} accumulated snapshots")

    if set(snapshot) != set(state.total):
        raise FieldError(
            f"Snapshot patches {sorted(snapshot)} differ from "
            f"accumulated patches {sorted(state.total)}"
        )

    total = {}
    for name, running in state.total.items():
        values = np.asarray(snapshot[name], dtype=np.float64)
        if values.shape != running.shape:
            raise FieldError(
                f"Snapshot on patch '{name}' has shape {values.shape}, "
                f"accumulated shape is {running.shape}; boundary topology changed"
            )
        total[name] = running + values

    return RunningAverage(total, step)


class RunningAverageAccumulator:
    """
    Cumulative mean of per-time boundary fields.

    Owns the running sum for the whole run. Each call to update adds one
    snapshot and returns the mean through that snapshot as a Field.

    Example
    -------
    >>> acc = RunningAverageAccumulator(mesh)
    >>> for step, wss in enumerate(snapshots, start=1):
    ...     tawss = acc.update(wss, step)
    """

    def __init__(self, mesh, name: str = TAWSS_FIELD):
        self.name = name
        self.mesh = mesh
        self.state = RunningAverage.empty(Field.zeros(name, mesh, VECTOR).boundary)

    @property
    def count(self) -> int:
        return self.state.count

    def current(self) -> Field:
        """The mean through the last processed snapshot, laid out on the current mesh."""
        return Field(
            name=self.name,
            kind=VECTOR,
            internal=np.zeros((self.mesh.n_cells, 3)),
            boundary=self.state.average(),
        )

    def update(self, snapshot: Field, step: int) -> Field:
        """Add ``snapshot`` as the ``step``-th sample and return the new mean."""
        self.state = update_running_average(self.state, snapshot.boundary, step)
        return self.current()
