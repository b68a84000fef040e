"""PID 제어기 구현 (위치형 / 증분형).

두 제어기 모두 dt를 생략하면 "compute 1회 = 단위 시간 1"로 취급한다(펌웨어와 동일한 반복 기반 모드).
dt를 넘기면 적분항에는 dt를 곱하고 미분항은 dt로 나눈다. dt <= 0 이면 1e-3으로 대체.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Tuple


class Coefficient(IntEnum):
    """런타임 튜닝 시 변경할 계수 선택자."""

    KP = 1
    KI = 2
    KD = 3


def _clamp(value: float, min_value: float, max_value: float) -> float:
    if value > max_value:
        return max_value
    if value < min_value:
        return min_value
    return value


class _GainsMixin:
    kp: float
    ki: float
    kd: float
    target: float

    def reset_target(self, target: float) -> None:
        """목표값만 교체한다. 적분/오차 이력은 유지."""
        self.target = float(target)

    def reset_coefficient(self, which: Coefficient, value: float) -> None:
        which = Coefficient(which)
        if which is Coefficient.KP:
            self.kp = float(value)
        elif which is Coefficient.KI:
            self.ki = float(value)
        else:
            self.kd = float(value)

    @property
    def gains(self) -> Tuple[float, float, float]:
        return self.kp, self.ki, self.kd


class PIDController(_GainsMixin):
    """위치형 PID.

    적분 누적값(integral) 자체는 제한하지 않고 ki * integral 항만 integral_limits로 자른다.
    오래 포화된 뒤 오차 부호가 바뀌면 숨은 누적값 때문에 출력이 늦게 반응할 수 있다.
    """

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        target: float = 0.0,
        integral_limits: Tuple[float, float] = (-255.0, 255.0),
        output_limits: Tuple[float, float] = (-255.0, 255.0),
    ) -> None:
        self.kp = float(kp)
        self.ki = float(ki)
        self.kd = float(kd)
        self.target = float(target)
        self.min_integral, self.max_integral = (float(v) for v in integral_limits)
        self.min_output, self.max_output = (float(v) for v in output_limits)

        self.error = 0.0
        self.last_error = 0.0
        self.integral = 0.0
        # 마지막 compute에서 사용한 (제한 후) 적분항
        self.i_term = 0.0

    def compute(self, value: float, dt: Optional[float] = None) -> float:
        self.error = self.target - value

        if dt is None:
            self.integral += self.error
            derivative = self.error - self.last_error
        else:
            if dt <= 0:
                dt = 1e-3
            self.integral += self.error * dt
            derivative = (self.error - self.last_error) / dt

        p_term = self.kp * self.error
        i_term = _clamp(self.ki * self.integral, self.min_integral, self.max_integral)
        d_term = self.kd * derivative
        self.i_term = i_term

        self.last_error = self.error

        return _clamp(p_term + i_term + d_term, self.min_output, self.max_output)


class IncrementalPIDController(_GainsMixin):
    """증분형 PID. 매 호출의 증분을 output에 누적하고 누적값 자체를 제한한다."""

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        target: float = 0.0,
        output_limits: Tuple[float, float] = (-255.0, 255.0),
        initial_output: float = 0.0,
    ) -> None:
        self.kp = float(kp)
        self.ki = float(ki)
        self.kd = float(kd)
        self.target = float(target)
        self.min_output, self.max_output = (float(v) for v in output_limits)

        self.error = 0.0
        self.last_error = 0.0
        self.prev_error = 0.0
        self.output = float(initial_output)

    def compute(self, value: float, dt: Optional[float] = None) -> float:
        self.error = self.target - value

        p_term = self.kp * (self.error - self.last_error)
        second_diff = self.error - 2 * self.last_error + self.prev_error
        if dt is None:
            i_term = self.ki * self.error
            d_term = self.kd * second_diff
        else:
            if dt <= 0:
                dt = 1e-3
            i_term = self.ki * self.error * dt
            d_term = self.kd * second_diff / dt

        self.prev_error = self.last_error
        self.last_error = self.error

        self.output = _clamp(self.output + p_term + i_term + d_term, self.min_output, self.max_output)
        return self.output
