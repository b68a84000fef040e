"""차량(좌/우 구동륜 + 조향 서보 + 엔코더) 하드웨어 래퍼."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Optional

from linecar.control.track_decision import Direction

DEFAULT_DRIVER = "Car_Lib"


class MockCar:
    """실기 없이 로직만 점검할 때 사용하는 더미 드라이버.

    엔코더는 듀티에 비례하는 목표 펄스 수로 1차 지연 응답하는 단순 모델이다.
    """

    def __init__(self, pulses_per_duty: float = 7.4, response: float = 0.3, verbose: bool = True) -> None:
        self.pulses_per_duty = pulses_per_duty
        self.response = response
        self.verbose = verbose
        self.last_run = (int(Direction.STOP), 0, 0)
        self.last_servo_duty: Optional[float] = None
        self.pulses = 0.0

    def Car_Run(self, state: int, duty_left: int, duty_right: int) -> None:
        run = (int(state), int(duty_left), int(duty_right))
        if self.verbose and run != self.last_run:
            print(f"[MOCK] Car state={run[0]} L={run[1]} R={run[2]}")
        self.last_run = run

    def Servo_Duty(self, duty: float) -> None:
        if self.verbose and duty != self.last_servo_duty:
            print(f"[MOCK] Servo duty={duty:.2f}")
        self.last_servo_duty = duty

    def Encoder_Read(self) -> int:
        state, duty_left, duty_right = self.last_run
        goal = 0.0
        if state != Direction.STOP:
            goal = self.pulses_per_duty * (duty_left + duty_right) / 2.0
        self.pulses += (goal - self.pulses) * self.response
        return int(round(self.pulses))


class CarHardware:
    """차량 구동을 위한 고수준 래퍼.

    STOP 방향은 듀티 값을 무시하고 모든 채널을 0으로 내린다.
    """

    DUTY_LIMIT = 100

    def __init__(
        self,
        driver: str = DEFAULT_DRIVER,
        steering_neutral: float = 7.8,
        enable_mock: bool = False,
    ) -> None:
        self.driver = driver
        self.steering_neutral = steering_neutral

        self.bot = self._init_bot(driver, enable_mock)
        self.is_mock = isinstance(self.bot, MockCar)
        self.stop()

    def _init_bot(self, driver: str, enable_mock: bool):
        lib_path = Path(__file__).resolve().parents[2] / "lib" / "linecar"
        if str(lib_path) not in sys.path:
            sys.path.append(str(lib_path))
        try:
            module = importlib.import_module(driver)
            return module.Car()
        except Exception:
            if enable_mock:
                print(f"[WARN] 드라이버 '{driver}' 로드 실패 → MockCar 사용")
                return MockCar()
            raise

    @classmethod
    def _clamp_duty(cls, duty: float) -> int:
        return int(max(0, min(cls.DUTY_LIMIT, duty)))

    def run(self, direction: Direction, left_duty: float, right_duty: float) -> None:
        direction = Direction(direction)
        if direction is Direction.STOP:
            self.bot.Car_Run(int(Direction.STOP), 0, 0)
            return
        self.bot.Car_Run(int(direction), self._clamp_duty(left_duty), self._clamp_duty(right_duty))

    def set_steering(self, duty: float) -> None:
        self.bot.Servo_Duty(float(duty))

    def read_encoder(self) -> int:
        return int(self.bot.Encoder_Read())

    def stop(self) -> None:
        self.run(Direction.STOP, 0, 0)

    def cleanup(self) -> None:
        self.stop()
        self.set_steering(self.steering_neutral)
