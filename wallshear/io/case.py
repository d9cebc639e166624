"""
Case directory and time database.

A case holds a ``constant`` directory (boundary mesh, transport and
thermophysical properties) and one directory per stored time, named by the
time value. An optional region adds one more directory level below both.
"""

import re
import math
import yaml
from pathlib import Path
from typing import NamedTuple, List, Optional, Tuple, Dict, Any, Union

from wallshear.constants import CONSTANT_DIR, BOUNDARY_FILE
from wallshear.errors import MissingCaseDataError, ConfigError
from wallshear.config.schema import TimeSelection


# Plain decimal or exponent notation; no digit separators, inf or nan
_TIME_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class Instant(NamedTuple):
    """A stored time: numeric value and directory name."""
    value: float
    name: str


def _parse_time(name: str) -> Optional[float]:
    if not _TIME_PATTERN.fullmatch(name):
        return None
    value = float(name)
    if not math.isfinite(value):
        return None
    return value


def parse_time_spec(spec: str) -> List[Tuple[float, float]]:
    """
    Parse a time selection such as ``"0.1,0.5:1.0,2:"``.

    Each comma separated item is a single time or an inclusive range
    ``start:end`` where either bound may be omitted.

    Returns
    -------
    list of (lower, upper)
        Inclusive bounds; a single time gives lower == upper.
    """
    bounds = []
    for item in spec.split(','):
        item = item.strip()
        if not item:
            continue
        if ':' in item:
            lo_str, hi_str = (s.strip() for s in item.split(':', 1))
            lo = -math.inf if lo_str == '' else _parse_time(lo_str)
            hi = math.inf if hi_str == '' else _parse_time(hi_str)
        else:
            lo = hi = _parse_time(item)
        if lo is None or hi is None:
            raise ConfigError(f"Invalid time selection '{item}' in '{spec}'")
        if lo > hi:
            raise ConfigError(f"Empty time range '{item}' in '{spec}'")
        bounds.append((lo, hi))
    if not bounds:
        raise ConfigError(f"Empty time selection '{spec}'")
    return bounds


def _matches(value: float, bounds: List[Tuple[float, float]], tol: float = 1e-12) -> bool:
    for lo, hi in bounds:
        scale = max(1.0, abs(value))
        if lo - tol * scale <= value <= hi + tol * scale:
            return True
    return False


class Case:
    """
    Access to a case directory.

    Example
    -------
    >>> case = Case("cavity")
    >>> for instant in case.select_times(TimeSelection(no_zero=True)):
    ...     print(instant.name, case.time_path(instant))
    """

    def __init__(self, root: Union[str, Path], region: Optional[str] = None):
        self.root = Path(root)
        self.region = region

    def _with_region(self, path: Path) -> Path:
        return path / self.region if self.region else path

    @property
    def constant_path(self) -> Path:
        return self._with_region(self.root / CONSTANT_DIR)

    def time_path(self, instant: Instant) -> Path:
        """Directory holding the fields of ``instant``."""
        return self._with_region(self.root / instant.name)

    def boundary_candidates(self, instant: Instant) -> List[Path]:
        """Boundary mesh files for ``instant``, most specific first."""
        return [
            self.time_path(instant) / BOUNDARY_FILE,
            self.constant_path / BOUNDARY_FILE,
        ]

    def times(self) -> List[Instant]:
        """
        All stored times in increasing order.

        Raises
        ------
        MissingCaseDataError
            If the case directory is missing or two directories name the same time.
        """
        if not self.root.is_dir():
            raise MissingCaseDataError(f"Case directory not found: {self.root}")

        instants = []
        for entry in self.root.iterdir():
            if not entry.is_dir():
                continue
            value = _parse_time(entry.name)
            if value is not None:
                instants.append(Instant(value, entry.name))

        instants.sort(key=lambda inst: inst.value)
        for prev, inst in zip(instants, instants[1:]):
            if inst.value == prev.value:
                raise MissingCaseDataError(
                    f"Time directories '{prev.name}' and '{inst.name}' "
                    f"in {self.root} hold the same time {inst.value:g}"
                )
        return instants

    def select_times(self, selection: TimeSelection) -> List[Instant]:
        """
        Times chosen by ``selection``, in increasing order.

        Raises
        ------
        MissingCaseDataError
            If no time directory is found or none is selected.
        """
        instants = self.times()
        if not instants:
            raise MissingCaseDataError(f"No time directories found in {self.root}")

        if selection.no_zero:
            instants = [inst for inst in instants if inst.value != 0.0]

        if selection.time:
            bounds = parse_time_spec(selection.time)
            instants = [inst for inst in instants if _matches(inst.value, bounds)]

        if selection.latest_time and instants:
            instants = instants[-1:]

        if not instants:
            raise MissingCaseDataError(f"No times selected in {self.root}")

        return instants

    def read_constant_dict(self, filename: str, required: bool = True) -> Dict[str, Any]:
        """Load a YAML dictionary from the ``constant`` directory."""
        path = self.constant_path / filename
        if not path.is_file():
            if required:
                raise MissingCaseDataError(f"Cannot find {path}")
            return {}

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MissingCaseDataError(f"Cannot parse {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise MissingCaseDataError(f"{path} must contain a mapping")
        return data

    def __repr__(self) -> str:
        region = f", region={self.region!r}" if self.region else ""
        return f"Case({str(self.root)!r}{region})"
