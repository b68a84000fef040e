"""CR LF 로 끝나는 수신 프레임 조립기."""

from __future__ import annotations

from typing import List

CR = 0x0D
LF = 0x0A
DEFAULT_CAPACITY = 200


class LineReceiver:
    """바이트를 하나씩 받아 CR LF 단위 프레임으로 자른다.

    - CR 다음에 LF가 아니면 조립 중이던 프레임을 버리고 다시 시작
    - 버퍼가 capacity에 닿으면 버리고 다시 시작
    완성된 프레임은 CR LF를 뺀 bytes 사본으로 돌려준다.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._buffer = bytearray()
        self._got_cr = False
        self.dropped = 0

    def reset(self) -> None:
        self._buffer.clear()
        self._got_cr = False

    def feed_byte(self, byte: int) -> bytes | None:
        if self._got_cr:
            if byte == LF:
                frame = bytes(self._buffer)
                self.reset()
                return frame
            self.dropped += 1
            self.reset()
            return None

        if byte == CR:
            self._got_cr = True
            return None

        self._buffer.append(byte)
        if len(self._buffer) > self.capacity - 1:
            self.dropped += 1
            self.reset()
        return None

    def feed(self, data: bytes) -> List[bytes]:
        frames: List[bytes] = []
        for byte in data:
            frame = self.feed_byte(byte)
            if frame is not None:
                frames.append(frame)
        return frames
