"""시리얼 통신(수신 프레이밍, 링크, 튜닝 프로토콜) 패키지."""

from .line_receiver import LineReceiver
from .serial_link import MockSerialLink, SerialLink
from .tuning import ACK_ERROR, ACK_OK, TuningCommand, apply_tuning_line, parse_tuning_line

__all__ = [
    "LineReceiver",
    "SerialLink",
    "MockSerialLink",
    "TuningCommand",
    "parse_tuning_line",
    "apply_tuning_line",
    "ACK_OK",
    "ACK_ERROR",
]
