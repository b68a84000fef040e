import pytest

from linecar.comm.line_receiver import LineReceiver
from linecar.comm.serial_link import MockSerialLink, _FrameQueue
from linecar.comm.tuning import ACK_ERROR, ACK_OK, apply_tuning_line, parse_tuning_line
from linecar.control.pid import Coefficient, IncrementalPIDController, PIDController


def test_receiver_splits_on_crlf():
    rx = LineReceiver()
    assert rx.feed(b"p1.0*\r\ni2*\r\n") == [b"p1.0*", b"i2*"]


def test_receiver_keeps_partial_frame_between_chunks():
    rx = LineReceiver()
    assert rx.feed(b"d0.") == []
    assert rx.feed(b"5*\r") == []
    assert rx.feed(b"\n") == [b"d0.5*"]


def test_receiver_drops_frame_when_cr_not_followed_by_lf():
    rx = LineReceiver()
    assert rx.feed(b"ab\rXcd\r\n") == [b"cd"]
    assert rx.dropped == 1


def test_receiver_restarts_on_overflow():
    rx = LineReceiver(capacity=4)
    assert rx.feed(b"abcdef\r\n") == [b"ef"]
    assert rx.dropped == 1

    rx = LineReceiver(capacity=4)
    assert rx.feed(b"abc\r\n") == [b"abc"]


def test_frame_queue_discards_oldest_when_full():
    frames = _FrameQueue(maxsize=2)
    for frame in (b"a", b"b", b"c"):
        frames.put(frame)
    assert frames.drain() == [b"b", b"c"]
    assert frames.drain() == []


def test_mock_link_poll_is_copy_and_clear():
    link = MockSerialLink(incoming=[b"p1*\r", b"\nx\r\n"])
    assert link.poll() == [b"p1*", b"x"]
    assert link.poll() == []

    link.write_line("OK")
    assert link.sent == ["OK"]


@pytest.mark.parametrize(
    "line, coefficient, value",
    [
        ("p1.234*", Coefficient.KP, 1.234),
        (b"i0.5*", Coefficient.KI, 0.5),
        ("d-2e-3*", Coefficient.KD, -0.002),
        ("p.75*", Coefficient.KP, 0.75),
        ("i3* ", Coefficient.KI, 3.0),
    ],
)
def test_parse_valid_lines(line, coefficient, value):
    command = parse_tuning_line(line)
    assert command is not None
    assert command.coefficient is coefficient
    assert command.value == pytest.approx(value)


@pytest.mark.parametrize(
    "line", ["", "x1.0*", "P1.0*", "p*", "pabc*", b"d1.2.3*", "1.0*", "i3", "p1.0*2", "d1*1*"]
)
def test_parse_rejects_malformed_lines(line):
    assert parse_tuning_line(line) is None


def test_apply_updates_controller_and_acks_ok():
    pid = PIDController(kp=0.015, ki=0.014, kd=0.001)
    assert apply_tuning_line("p0.02*", pid) == ACK_OK
    assert pid.gains == (0.02, 0.014, 0.001)


def test_apply_rejects_without_touching_state():
    pid = IncrementalPIDController(kp=0.05, ki=0.0, kd=0.01, target=70)
    pid.compute(60)
    before = (pid.gains, pid.target, pid.output, pid.last_error)

    assert apply_tuning_line("k9*", pid) == ACK_ERROR
    assert apply_tuning_line("dnan-ish*", pid) == ACK_ERROR
    assert (pid.gains, pid.target, pid.output, pid.last_error) == before


def test_apply_rejects_line_without_terminator():
    pid = PIDController(kp=0.015, ki=0.014, kd=0.001)
    assert apply_tuning_line("i3", pid) == ACK_ERROR
    assert pid.ki == 0.014
