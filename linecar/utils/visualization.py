"""디버그용 진단 패널 (OLED 표시 대체)."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from linecar.control.track_decision import TRACK_MASK, DriveCommand

PANEL_SIZE: Tuple[int, int] = (360, 260)  # (w, h)


def draw_sensor_bits(panel: np.ndarray, bitmask: int, mask: int = TRACK_MASK, y: int = 40) -> None:
    """센서 5개를 원으로 그린다. 검출=채움, 판단에서 제외되는 바깥 비트는 회색."""
    w = panel.shape[1]
    spacing = w // 6
    for i in range(5):
        bit = 1 << (4 - i)
        center = (spacing * (i + 1), y)
        color = (0, 255, 255) if bit & mask else (140, 140, 140)
        thickness = -1 if bitmask & bit else 2
        cv2.circle(panel, center, 14, color, thickness)


def render_panel(
    bitmask: Optional[int],
    command: Optional[DriveCommand],
    values: Optional[Dict[str, float]] = None,
    running: bool = False,
    fps: Optional[float] = None,
    mask: int = TRACK_MASK,
) -> np.ndarray:
    w, h = PANEL_SIZE
    panel = np.zeros((h, w, 3), dtype=np.uint8)

    if bitmask is not None:
        draw_sensor_bits(panel, bitmask, mask)

    y = 90
    state_text = "RUN" if running else "STOP"
    cv2.putText(
        panel,
        state_text,
        (10, y),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.8,
        (0, 255, 0) if running else (0, 0, 255),
        2,
    )
    if fps is not None:
        cv2.putText(panel, f"{fps:5.1f} Hz", (w - 120, y), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (200, 200, 200), 1)

    if command is not None:
        y += 30
        cv2.putText(
            panel,
            f"{command.direction.name} L:{command.left_duty:3d} R:{command.right_duty:3d}",
            (10, y),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.6,
            (255, 255, 255),
            1,
        )

    for name, value in (values or {}).items():
        y += 24
        if y > h - 10:
            break
        cv2.putText(panel, f"{name}: {value:.2f}", (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (180, 255, 180), 1)

    return panel
