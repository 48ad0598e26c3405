"""Per-hand signal conditioning: landmark midpoint, smoothing and pinch hysteresis.

Landmarks are anything with normalized ``.x`` / ``.y`` (MediaPipe NormalizedLandmark
or a test double). Positions come out in viewport pixels, mirrored horizontally so
the screen behaves like a mirror.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Any, Optional, Sequence, Tuple

from pinch_tetris.config import (
    GRAB_THRESHOLD, RELEASE_THRESHOLD, SMOOTHING_IDLE, SMOOTHING_DRAG,
)

WRIST = 0
THUMB_TIP = 4
INDEX_TIP = 8
MIDDLE_MCP = 9

SIDES = ("left", "right")


@dataclass(frozen=True)
class HandSample:
    """One hand for one frame, already routed to a side."""
    landmarks: Sequence[Any]
    pinch_distance: float


def route_side(label: str) -> str:
    # Mirrored view: the provider's "Right" is the player's left hand on screen
    return "left" if label == "Right" else "right"


def l2(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return (dx*dx + dy*dy) ** 0.5


def pinch_distance(landmarks: Sequence[Any]) -> float:
    thumb, index = landmarks[THUMB_TIP], landmarks[INDEX_TIP]
    return l2((thumb.x, thumb.y), (index.x, index.y))


def hand_position(landmarks: Sequence[Any], width: float, height: float) -> Tuple[float, float]:
    thumb, index = landmarks[THUMB_TIP], landmarks[INDEX_TIP]
    x = (1 - (thumb.x + index.x) / 2) * width
    y = ((thumb.y + index.y) / 2) * height
    return x, y


def wrist_angle(landmarks: Sequence[Any]) -> float:
    """Angle in degrees of the wrist -> middle-finger knuckle vector."""
    wrist, mcp = landmarks[WRIST], landmarks[MIDDLE_MCP]
    return math.degrees(math.atan2(mcp.y - wrist.y, mcp.x - wrist.x))


# Hysteresis band: grab below one threshold, release above a looser one.
def can_grab(distance: float, threshold: float = GRAB_THRESHOLD) -> bool:
    return distance < threshold


def should_release(distance: float, threshold: float = RELEASE_THRESHOLD) -> bool:
    return distance > threshold


class SignalConditioner:
    """Exponential smoothing of one hand's position. Snappier while dragging."""

    def __init__(self, idle_factor: float = SMOOTHING_IDLE, drag_factor: float = SMOOTHING_DRAG):
        self.idle_factor = idle_factor
        self.drag_factor = drag_factor
        self.position: Optional[Tuple[float, float]] = None

    def update(self, raw: Tuple[float, float], dragging: bool) -> Tuple[float, float]:
        if self.position is None:
            self.position = raw
            return raw
        factor = self.drag_factor if dragging else self.idle_factor
        sx, sy = self.position
        sx += (raw[0] - sx) * factor
        sy += (raw[1] - sy) * factor
        self.position = (sx, sy)
        return self.position

    def reset(self):
        self.position = None
