"""적외선 5채널 비트마스크 → 주행 명령 결정 테이블.

비트 순서는 왼쪽(OUT1)이 최상위 비트. 판단에는 좌1/중앙/우1에 해당하는 비트만 쓰고(TRACK_MASK),
양쪽 끝 비트는 디버그 표시용으로만 읽는다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple


class Direction(IntEnum):
    STOP = 0
    FORWARD = 1
    BACKWARD = 2


@dataclass(frozen=True)
class DriveCommand:
    direction: Direction
    left_duty: int
    right_duty: int


TRACK_MASK = 0x0E

STOP_COMMAND = DriveCommand(Direction.STOP, 0, 0)

# 위에서부터 순서대로 비교, 처음 일치하는 규칙을 사용
TRACK_TABLE: Tuple[Tuple[int, DriveCommand], ...] = (
    (0b1010, DriveCommand(Direction.FORWARD, 30, 30)),  # 중앙
    (0b0110, DriveCommand(Direction.FORWARD, 0, 30)),  # 오른쪽으로 치우침 → 좌회전
    (0b1100, DriveCommand(Direction.FORWARD, 30, 0)),  # 왼쪽으로 치우침 → 우회전
    (0b1000, DriveCommand(Direction.FORWARD, 50, 0)),
    (0b0010, DriveCommand(Direction.FORWARD, 0, 50)),
    (0b0000, STOP_COMMAND),  # 라인 이탈
)


def lookup(key: int) -> DriveCommand:
    """마스크가 이미 적용된 키로 명령 조회. 테이블에 없으면 정지."""
    for pattern, command in TRACK_TABLE:
        if key == pattern:
            return command
    return STOP_COMMAND


def decide(bitmask: int, mask: int = TRACK_MASK) -> DriveCommand:
    return lookup(bitmask & mask)


def format_bits(bitmask: int, width: int = 5) -> str:
    return format(bitmask & ((1 << width) - 1), f"0{width}b")
