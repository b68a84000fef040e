"""시리얼 PID 튜닝 프로토콜.

한 줄 형식: ``<선택자><실수>*`` (예: ``p1.234*``). 선택자는 p/i/d.
처리 결과로 "OK" 또는 "ERROR" 응답 문자열을 돌려준다. 거부된 줄은 제어기 상태를 바꾸지 않는다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from linecar.control.pid import Coefficient, IncrementalPIDController, PIDController

ACK_OK = "OK"
ACK_ERROR = "ERROR"
TERMINATOR = "*"

SELECTORS = {
    "p": Coefficient.KP,
    "i": Coefficient.KI,
    "d": Coefficient.KD,
}

_NUMBER = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


@dataclass(frozen=True)
class TuningCommand:
    coefficient: Coefficient
    value: float


def parse_tuning_line(line: Union[str, bytes]) -> Optional[TuningCommand]:
    if isinstance(line, bytes):
        line = line.decode("ascii", errors="replace")
    if not line:
        return None

    coefficient = SELECTORS.get(line[0])
    if coefficient is None:
        return None

    # 종결자 `*` 는 필수, 줄의 마지막 문자여야 한다
    body = line[1:].rstrip()
    if not body.endswith(TERMINATOR):
        return None
    match = _NUMBER.fullmatch(body[: -len(TERMINATOR)])
    if match is None:
        return None
    return TuningCommand(coefficient, float(match.group(1)))


def apply_tuning_line(
    line: Union[str, bytes],
    controller: Union[PIDController, IncrementalPIDController],
) -> str:
    command = parse_tuning_line(line)
    if command is None:
        return ACK_ERROR
    controller.reset_coefficient(command.coefficient, command.value)
    return ACK_OK
