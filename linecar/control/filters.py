"""단일 극점 저역통과(EWMA) 필터."""

from __future__ import annotations


def ewma_filter(value: float, filtered_value: float, alpha: float) -> float:
    # alpha 범위 검사는 호출 측 책임
    return alpha * value + (1.0 - alpha) * filtered_value


class EWMAFilter:
    """이전 필터 값을 직접 들고 다니기 번거로울 때 쓰는 상태 보관용 래퍼."""

    def __init__(self, alpha: float, initial: float = 0.0) -> None:
        self.alpha = alpha
        self.initial = initial
        self.value = initial

    def update(self, value: float) -> float:
        self.value = ewma_filter(value, self.value, self.alpha)
        return self.value

    def reset(self, value: float | None = None) -> None:
        self.value = self.initial if value is None else value
