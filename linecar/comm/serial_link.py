"""시리얼 수신을 메인 제어 루프에서 분리하기 위한 링크.

리더 스레드가 바이트를 LineReceiver로 프레임 단위로 조립하고, 완성된 프레임 사본만
bounded 큐에 넣는다. 메인 루프는 poll()로 쌓인 프레임을 모두 꺼내 쓴다.
큐가 가득 차면 가장 오래된 프레임을 버린다.
"""

from __future__ import annotations

import queue
import threading
from typing import Iterable, List, Optional

import serial

from linecar.comm.line_receiver import DEFAULT_CAPACITY, LineReceiver


class _FrameQueue:
    def __init__(self, maxsize: int) -> None:
        self._queue: "queue.Queue[bytes]" = queue.Queue(maxsize=maxsize)

    def put(self, frame: bytes) -> None:
        try:
            self._queue.put_nowait(frame)
        except queue.Full:
            try:
                _ = self._queue.get_nowait()
            except queue.Empty:
                pass
            try:
                self._queue.put_nowait(frame)
            except queue.Full:
                pass

    def drain(self) -> List[bytes]:
        frames: List[bytes] = []
        while True:
            try:
                frames.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return frames


class SerialLink:
    """pyserial 포트를 별도 스레드에서 읽고 완성 프레임을 큐로 전달한다."""

    def __init__(
        self,
        port: str,
        baudrate: int = 115200,
        timeout: float = 0.05,
        capacity: int = DEFAULT_CAPACITY,
        queue_size: int = 16,
        name: str = "serial_link",
    ) -> None:
        # 포트 열기 실패(serial.SerialException)는 호출 측으로 전파
        self.serial_port = serial.Serial(port=port, baudrate=baudrate, timeout=timeout)
        self.receiver = LineReceiver(capacity)
        self._frames = _FrameQueue(queue_size)
        self._write_lock = threading.Lock()

        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._reader_loop, name=name, daemon=True)
        self._thread.start()

    def poll(self) -> List[bytes]:
        return self._frames.drain()

    def write_line(self, text: str) -> None:
        with self._write_lock:
            self.serial_port.write(f"{text}\n".encode("ascii"))
            self.serial_port.flush()

    def close(self, timeout_s: float = 1.0) -> None:
        self._stop_event.set()
        self._thread.join(timeout=timeout_s)
        self.serial_port.close()

    def _reader_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                data = self.serial_port.read(self.serial_port.in_waiting or 1)
            except serial.SerialException as e:
                print(f"[WARN] 시리얼 읽기 오류: {e}")
                break
            for frame in self.receiver.feed(data):
                self._frames.put(frame)


class MockSerialLink:
    """포트 없이 프레임 주입/응답 확인용 링크."""

    def __init__(self, incoming: Optional[Iterable[bytes]] = None, capacity: int = DEFAULT_CAPACITY) -> None:
        self.receiver = LineReceiver(capacity)
        self._pending: List[bytes] = []
        self.sent: List[str] = []
        if incoming:
            for chunk in incoming:
                self.inject(chunk)

    def inject(self, data: bytes) -> None:
        self._pending.extend(self.receiver.feed(data))

    def poll(self) -> List[bytes]:
        frames, self._pending = self._pending, []
        return frames

    def write_line(self, text: str) -> None:
        self.sent.append(text)

    def close(self, timeout_s: float = 1.0) -> None:
        pass
