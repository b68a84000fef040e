import pytest

from linecar.control.track_decision import Direction
from linecar.hardware.car import CarHardware, MockCar
from linecar.hardware.infrared import InfraredTracker, MockInfraredTracker, pack_bits

MISSING_DRIVER = "linecar_missing_driver"


@pytest.fixture
def hardware():
    return CarHardware(driver=MISSING_DRIVER, enable_mock=True)


def test_missing_driver_raises_without_mock():
    with pytest.raises(ImportError):
        CarHardware(driver=MISSING_DRIVER)


def test_mock_fallback(hardware):
    assert hardware.is_mock
    assert isinstance(hardware.bot, MockCar)
    assert hardware.bot.last_run == (0, 0, 0)


def test_run_clamps_duty(hardware):
    hardware.run(Direction.FORWARD, 130, -5)
    assert hardware.bot.last_run == (1, 100, 0)

    hardware.run(Direction.BACKWARD, 40, 20)
    assert hardware.bot.last_run == (2, 40, 20)


def test_stop_ignores_duty(hardware):
    hardware.run(Direction.STOP, 80, 80)
    assert hardware.bot.last_run == (0, 0, 0)


def test_cleanup_centers_steering(hardware):
    hardware.set_steering(9.0)
    hardware.cleanup()
    assert hardware.bot.last_servo_duty == 7.8
    assert hardware.bot.last_run == (0, 0, 0)


def test_mock_encoder_follows_duty():
    car = MockCar(pulses_per_duty=10.0, response=0.5, verbose=False)
    car.Car_Run(1, 40, 40)
    readings = [car.Encoder_Read() for _ in range(20)]
    assert readings[0] == 200
    assert readings[-1] == 400

    car.Car_Run(0, 40, 40)
    for _ in range(30):
        last = car.Encoder_Read()
    assert last == 0


def test_pack_bits_high_bit_first():
    assert pack_bits([1, 0, 0, 0, 0]) == 0b10000
    assert pack_bits([0, 1, 0, 1, 0]) == 0b01010


def test_pack_bits_inverted_polarity():
    assert pack_bits([1, 0, 1, 1, 1], line_level=0) == 0b01000


def test_tracker_reads_channels_left_to_right():
    levels = {1: 0, 2: 1, 3: 1, 4: 0, 5: 0}
    tracker = InfraredTracker(levels.__getitem__)
    assert tracker.read() == 0b01100


def test_mock_tracker_cycles():
    tracker = MockInfraredTracker([0b00100, 0xFF])
    assert [tracker.read() for _ in range(3)] == [0b00100, 0b11111, 0b00100]
    assert MockInfraredTracker([]).read() == 0
