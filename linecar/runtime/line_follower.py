"""라인 추종 주행 루프 (table | pid 모드 선택).

- table: 적외선 5채널 비트마스크 → 결정 테이블 → 좌/우 듀티
- pid  : 비전 모듈 오프셋 → 증분형 PID(조향 서보), 엔코더 펄스 → 위치형 PID(구동 속도)
두 모드 모두 튜닝 시리얼 링크로 p/i/d 계수를 실시간 변경할 수 있다.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import cv2
import serial

from linecar.comm import ACK_OK, MockSerialLink, SerialLink, apply_tuning_line
from linecar.control import (
    TRACK_MASK,
    DriveCommand,
    EWMAFilter,
    IncrementalPIDController,
    PIDController,
    VehicleController,
    decide,
)
from linecar.control.track_decision import format_bits
from linecar.hardware import CarHardware, InfraredTracker, MockInfraredTracker
from linecar.utils import FpsTimer, LoopClock, load_config, section
from linecar.utils.visualization import render_panel

PANEL_WINDOW = "linecar/diagnostics"
MODE_CHOICES = ("table", "pid")
DEFAULT_MOCK_SEQUENCE = (0b01010, 0b01100, 0b01010, 0b00110, 0b01010, 0b00000)

# 설정 파일에서 빠진 항목을 채우는 기본값
DEFAULT_CONFIG: Dict[str, Any] = {
    "hardware": {"driver": "Car_Lib", "steering_neutral": 7.8, "line_level": 1},
    "control": {"mode": "table", "track_mask": TRACK_MASK, "use_measured_dt": False, "nominal_dt": 0.01},
    "runtime": {"show_windows": True, "start_running": False, "headless_delay": 0.01},
}

Link = Union[SerialLink, MockSerialLink]
Controller = Union[PIDController, IncrementalPIDController]


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="적외선 라인 추종 / PID 주행 루프")
    parser.add_argument(
        "--config",
        type=str,
        default=str(Path(__file__).resolve().parents[2] / "configs" / "line_follower.yaml"),
        help="YAML 설정 파일 경로",
    )
    parser.add_argument(
        "--mode",
        choices=MODE_CHOICES,
        help="주행 모드 선택 (table | pid). 미지정 시 설정 파일 값 사용.",
    )
    parser.add_argument(
        "--mock-hw",
        action="store_true",
        help="실기 없이 모터/서보/센서/시리얼 호출을 더미로 대체",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="OpenCV 진단 윈도우를 띄우지 않고 동작",
    )
    return parser.parse_args(argv)


def build_speed_pid(cfg: Dict[str, Any]) -> PIDController:
    return PIDController(
        kp=float(cfg.get("kp", 0.015)),
        ki=float(cfg.get("ki", 0.014)),
        kd=float(cfg.get("kd", 0.001)),
        target=float(cfg.get("target", 370)),
        integral_limits=tuple(cfg.get("integral_limits", (-1850, 1850))),
        output_limits=tuple(cfg.get("output_limits", (0, 100))),
    )


def build_steering_pid(cfg: Dict[str, Any]) -> IncrementalPIDController:
    return IncrementalPIDController(
        kp=float(cfg.get("kp", 0.05)),
        ki=float(cfg.get("ki", 0.0)),
        kd=float(cfg.get("kd", 0.01)),
        target=float(cfg.get("target", 70)),
        output_limits=tuple(cfg.get("output_limits", (4.5, 9.5))),
        initial_output=float(cfg.get("initial_output", 0.0)),
    )


def build_tracker(hardware: CarHardware, hardware_cfg: Dict[str, Any]):
    if hardware.is_mock:
        return MockInfraredTracker(hardware_cfg.get("mock_sequence", DEFAULT_MOCK_SEQUENCE))
    return InfraredTracker(hardware.bot.Track_Read, line_level=int(hardware_cfg.get("line_level", 1)))


def build_loop_clock(control_cfg: Dict[str, Any], runtime_cfg: Dict[str, Any]) -> LoopClock:
    """첫 tick도 초 단위 dt가 나오도록 공칭 주기로 시드한 시계."""
    nominal_dt = float(control_cfg.get("nominal_dt", runtime_cfg.get("headless_delay", 0.01)))
    return LoopClock(initial_dt=nominal_dt)


def open_link(link_cfg: Dict[str, Any], mock: bool, name: str) -> Optional[Link]:
    port = link_cfg.get("port")
    if not port:
        return MockSerialLink() if mock else None
    try:
        link = SerialLink(
            port=port,
            baudrate=int(link_cfg.get("baudrate", 115200)),
            capacity=int(link_cfg.get("capacity", 200)),
            name=name,
        )
        print(f"[INFO] {name}: {port} @ {link_cfg.get('baudrate', 115200)}")
        return link
    except serial.SerialException as e:
        if not mock:
            raise
        print(f"[WARN] {name} 열기 실패: {e} → MockSerialLink 사용")
        return MockSerialLink()


def process_tuning(link: Optional[Link], controller: Controller) -> List[str]:
    """수신된 튜닝 줄을 모두 처리하고 각 줄의 응답을 돌려준다."""
    if link is None:
        return []
    acks = []
    for frame in link.poll():
        ack = apply_tuning_line(frame, controller)
        link.write_line(ack)
        acks.append(ack)
        if ack != ACK_OK:
            print(f"[WARN] 잘못된 튜닝 명령: {frame!r}")
    return acks


def read_vision_offset(link: Optional[Link], current: float) -> float:
    """비전 링크 프레임의 마지막 바이트가 라인 오프셋. 새 프레임이 없으면 이전 값 유지."""
    if link is None:
        return current
    for frame in link.poll():
        if frame:
            current = float(frame[-1])
    return current


def step_table(tracker, controller: VehicleController, running: bool, mask: int = TRACK_MASK) -> Tuple[int, DriveCommand]:
    bitmask = tracker.read()
    command = decide(bitmask, mask)
    if running:
        controller.apply(command)
    else:
        controller.stop()
    return bitmask, command


def step_pid(
    hardware: CarHardware,
    controller: VehicleController,
    speed_pid: PIDController,
    steering_pid: IncrementalPIDController,
    offset: float,
    running: bool,
    speed_target: float,
    dt: Optional[float] = None,
) -> Dict[str, float]:
    speed = float(hardware.read_encoder())

    steering_out = steering_pid.compute(offset, dt)
    speed_out = speed_pid.compute(speed, dt)

    # 정지 중에는 속도 목표 0
    if running:
        speed_pid.reset_target(speed_target)
        controller.drive(speed_out, steering_out)
    else:
        speed_pid.reset_target(0)
        controller.stop()

    return {
        "Snow": offset,
        "Spidout": steering_out,
        "Mnow": speed,
        "Mpidout": speed_out,
        "Mint": speed_pid.integral,
    }


def run(cfg, args) -> None:
    hardware_cfg = section(cfg, "hardware")
    control_cfg = section(cfg, "control")
    serial_cfg = section(cfg, "serial")
    runtime_cfg = section(cfg, "runtime")

    mode = (args.mode or str(control_cfg.get("mode", "table"))).lower()
    if mode not in MODE_CHOICES:
        print(f"[WARN] 지원하지 않는 모드 '{mode}', table로 강제 전환합니다.")
        mode = "table"

    show_windows = runtime_cfg.get("show_windows", True) and not args.headless
    print_debug = runtime_cfg.get("print_debug", False)
    use_measured_dt = bool(control_cfg.get("use_measured_dt", False))
    mask = int(control_cfg.get("track_mask", TRACK_MASK))

    steering_neutral = float(hardware_cfg.get("steering_neutral", 7.8))
    hardware = CarHardware(
        driver=hardware_cfg.get("driver", "Car_Lib"),
        steering_neutral=steering_neutral,
        enable_mock=args.mock_hw,
    )
    controller = VehicleController(hardware, steering_neutral=steering_neutral)
    tracker = build_tracker(hardware, hardware_cfg)

    speed_cfg = section(control_cfg, "speed_pid")
    speed_pid = build_speed_pid(speed_cfg)
    speed_target = speed_pid.target
    steering_pid = build_steering_pid(section(control_cfg, "steering_pid"))
    offset_filter = EWMAFilter(float(control_cfg.get("offset_filter_alpha", 1.0)))

    tuning_cfg = section(serial_cfg, "tuning")
    tuned: Controller = steering_pid if tuning_cfg.get("controller") == "steering" else speed_pid
    tuning_link = open_link(tuning_cfg, args.mock_hw, "tuning_link")
    vision_link = open_link(section(serial_cfg, "vision"), args.mock_hw, "vision_link") if mode == "pid" else None
    echo_speed = bool(runtime_cfg.get("echo_speed", False))

    fps_timer = FpsTimer()
    loop_clock = build_loop_clock(control_cfg, runtime_cfg)
    running = bool(runtime_cfg.get("start_running", False))
    raw_offset = 0.0

    if show_windows:
        cv2.namedWindow(PANEL_WINDOW, cv2.WINDOW_NORMAL)

    print(f"=== 라인 추종 주행 시작 (mode={mode}) ===")
    print("키 입력:")
    print("  ESC/q : 프로그램 종료")
    print(f"  s     : 주행/정지 토글 (초기 상태: {'주행' if running else '정지'})")

    try:
        while True:
            process_tuning(tuning_link, tuned)
            dt = loop_clock.tick() if use_measured_dt else None

            bitmask: Optional[int] = None
            values: Dict[str, float] = {}
            if mode == "table":
                bitmask, command = step_table(tracker, controller, running, mask)
            else:
                raw_offset = read_vision_offset(vision_link, raw_offset)
                values = step_pid(
                    hardware,
                    controller,
                    speed_pid,
                    steering_pid,
                    offset_filter.update(raw_offset),
                    running,
                    speed_target,
                    dt,
                )
                command = controller.last_command
                if echo_speed and tuning_link is not None:
                    tuning_link.write_line(f"{values['Mnow']:.2f}")

            fps = fps_timer.lap()

            if print_debug:
                bits_text = format_bits(bitmask) if bitmask is not None else "-----"
                extra = " ".join(f"{k}={v:.2f}" for k, v in values.items())
                print(
                    f"bits={bits_text} "
                    f"dir={command.direction.name} "
                    f"L={command.left_duty} R={command.right_duty} "
                    f"{extra}"
                )

            if show_windows:
                panel = render_panel(bitmask, command, values, running, fps, mask)
                cv2.imshow(PANEL_WINDOW, panel)
                key = cv2.waitKey(1) & 0xFF
                try:
                    if cv2.getWindowProperty(PANEL_WINDOW, cv2.WND_PROP_VISIBLE) < 1:
                        break
                except cv2.error:
                    pass
                if key in (27, ord("q")):
                    break
                elif key == ord("s"):
                    running = not running
                    controller.stop()
                    print("주행 시작" if running else "정지")
            else:
                time.sleep(runtime_cfg.get("headless_delay", 0.01))

    except KeyboardInterrupt:
        pass
    finally:
        controller.stop()
        for link in (tuning_link, vision_link):
            if link is not None:
                link.close()
        hardware.cleanup()
        if show_windows:
            cv2.destroyAllWindows()
        print("정상 종료되었습니다.")


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    cfg = load_config(args.config, DEFAULT_CONFIG)
    run(cfg, args)


if __name__ == "__main__":
    sys.exit(main())
