"""5채널 적외선 라인 센서 읽기."""

from __future__ import annotations

from itertools import cycle
from typing import Callable, Iterable, Iterator, Sequence

CHANNELS = 5


def pack_bits(levels: Sequence[int], line_level: int = 1) -> int:
    """OUT1(왼쪽)..OUT5(오른쪽) 순서의 레벨을 상위 비트부터 채운다.

    line_level과 같은 레벨을 1(라인 검출)로 본다. 센서 배선에 따라 0이 검출일 수도 있다.
    """
    bitmask = 0
    for level in levels:
        bitmask = (bitmask << 1) | (1 if int(level) == line_level else 0)
    return bitmask


class InfraredTracker:
    def __init__(self, read_channel: Callable[[int], int], line_level: int = 1) -> None:
        self.read_channel = read_channel
        self.line_level = line_level

    def read(self) -> int:
        return pack_bits([self.read_channel(ch) for ch in range(1, CHANNELS + 1)], self.line_level)


class MockInfraredTracker:
    """미리 정한 비트마스크 시퀀스를 반복 재생한다."""

    def __init__(self, sequence: Iterable[int]) -> None:
        values = [int(v) & 0x1F for v in sequence] or [0]
        self._iter: Iterator[int] = cycle(values)

    def read(self) -> int:
        return next(self._iter)
