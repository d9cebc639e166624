from .time_series import TimeSeriesDriver, DriverState, StepResult
from .factory import make_traction_calculator, create_driver, run_case

__all__ = [
    'TimeSeriesDriver',
    'DriverState',
    'StepResult',
    'make_traction_calculator',
    'create_driver',
    'run_case',
]
