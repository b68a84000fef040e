"""제어 로직 패키지."""

from .filters import EWMAFilter, ewma_filter
from .pid import Coefficient, IncrementalPIDController, PIDController
from .track_decision import TRACK_MASK, Direction, DriveCommand, decide
from .vehicle_controller import VehicleController

__all__ = [
    "Coefficient",
    "PIDController",
    "IncrementalPIDController",
    "ewma_filter",
    "EWMAFilter",
    "Direction",
    "DriveCommand",
    "TRACK_MASK",
    "decide",
    "VehicleController",
]
