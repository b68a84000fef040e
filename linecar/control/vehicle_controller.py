"""차량 구동 제어기."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from linecar.control.track_decision import Direction, DriveCommand, STOP_COMMAND

if TYPE_CHECKING:
    from linecar.hardware.car import CarHardware


class VehicleController:
    def __init__(self, hardware: CarHardware, steering_neutral: float = 7.8) -> None:
        self.hardware = hardware
        self.steering_neutral = steering_neutral
        self.last_command: DriveCommand = STOP_COMMAND

    def apply(self, command: DriveCommand) -> DriveCommand:
        """결정 테이블 명령을 그대로 좌/우 듀티로 내보낸다."""
        self.hardware.run(command.direction, command.left_duty, command.right_duty)
        self.last_command = command
        return command

    def drive(self, speed_duty: float, steering_duty: float) -> Tuple[int, float]:
        """PID 모드: 양쪽 구동륜에 같은 듀티, 조향은 서보로."""
        duty = int(max(0.0, min(100.0, speed_duty)))
        self.hardware.run(Direction.FORWARD, duty, duty)
        self.hardware.set_steering(steering_duty)
        self.last_command = DriveCommand(Direction.FORWARD, duty, duty)
        return duty, steering_duty

    def stop(self) -> None:
        self.hardware.stop()
        self.hardware.set_steering(self.steering_neutral)
        self.last_command = STOP_COMMAND
