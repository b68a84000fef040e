"""하드웨어 추상화 계층(HAL) 패키지."""

from .car import CarHardware, MockCar
from .infrared import InfraredTracker, MockInfraredTracker, pack_bits

__all__ = ["CarHardware", "MockCar", "InfraredTracker", "MockInfraredTracker", "pack_bits"]
