"""Per-hand interaction: IDLE -> TARGETING -> GRABBING -> DRAGGING -> IDLE.

Each hand owns one ``HandInteraction``. Grab data lives in a ``GrabSession`` that
exists only while the hand is GRABBING or DRAGGING, so an idle or targeting hand
carries no offset, angle or rotation step.

Play-zone drags never move the piece off the grid: with one hand, the angle around
the piece rotates it and horizontal travel shifts it; when both hands hold the
piece, the left hand only shifts and the right hand only rotates.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
import logging
import math
from typing import TYPE_CHECKING, Optional

from pinch_tetris.config import (
    TARGET_RADIUS, DRAG_EASE, GESTURE_CIRCLE_RADIUS, RELEASE_HARD_DROP,
    TWO_HAND_MOVE_THRESHOLD, TWO_HAND_MOVE_COOLDOWN_MS,
    TWO_HAND_ROTATE_RADIUS, TWO_HAND_ROTATE_COOLDOWN_MS,
    ONE_HAND_MOVE_THRESHOLD, ONE_HAND_MOVE_COOLDOWN_MS,
    ONE_HAND_ROTATE_RADIUS, ONE_HAND_ROTATE_COOLDOWN_MS,
)
from pinch_tetris.input.conditioner import (
    HandSample, SignalConditioner, can_grab, hand_position, should_release, wrist_angle,
)
from pinch_tetris.logic.board import Piece

if TYPE_CHECKING:
    from pinch_tetris.logic.game import Game

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    IDLE = auto()
    TARGETING = auto()
    GRABBING = auto()
    DRAGGING = auto()


@dataclass
class CircleGesture:
    center_x: float
    center_y: float
    radius: float
    angle: float  # radians, hand relative to piece center


@dataclass
class GrabSession:
    offset_x: float
    offset_y: float
    wrist_angle: Optional[float]
    anchor_x: float                       # hand x at grab or at the last applied shift
    last_move_time: float
    rotation_index: Optional[int] = None  # last applied quadrant, 0..3
    circle: Optional[CircleGesture] = None


def quantize_quadrant(angle: float) -> int:
    """Nearest 90 degree step (0..3) for an angle in radians; halves round up."""
    deg = (math.degrees(angle) + 360) % 360
    return int(math.floor(deg / 90 + 0.5)) % 4


def quadrant_step(current: int, target: int) -> int:
    """Signed shortest step between quadrants, wrapped into [-2, 2]."""
    diff = target - current
    if diff > 2:
        diff -= 4
    if diff < -2:
        diff += 4
    return diff


@dataclass
class HandInteraction:
    side: str
    state: InteractionState = InteractionState.IDLE
    target: Optional[Piece] = None
    target_in_play_zone: bool = False
    grab: Optional[GrabSession] = None
    last_rotate_time: float = 0.0
    conditioner: SignalConditioner = field(default_factory=SignalConditioner)

    @property
    def position(self):
        return self.conditioner.position

    @property
    def is_holding(self) -> bool:
        return self.state in (InteractionState.GRABBING, InteractionState.DRAGGING)

    @property
    def is_free_dragging(self) -> bool:
        return (self.state is InteractionState.DRAGGING and self.target is not None
                and not self.target_in_play_zone)

    @property
    def is_play_zone_dragging(self) -> bool:
        return self.state is InteractionState.DRAGGING and self.target_in_play_zone

    # ---------- resets ----------
    def release(self):
        """Back to IDLE without a drop; the target simply stops being grabbed."""
        if self.target is not None:
            self.target.grabbed = False
        self.state = InteractionState.IDLE
        self.target = None
        self.target_in_play_zone = False
        self.grab = None

    def reset(self):
        self.release()
        self.last_rotate_time = 0.0
        self.conditioner.reset()

    # ---------- per frame ----------
    def update(self, game: "Game", other: "HandInteraction", sample: Optional[HandSample],
               now: float, width: float, height: float):
        if sample is None:
            self.reset()
            return

        raw = hand_position(sample.landmarks, width, height)
        x, y = self.conditioner.update(raw, dragging=self.state is InteractionState.DRAGGING)

        if not self.is_holding:
            self._target(game, sample, x, y, now)
            return

        if self.target is None or not game.is_live(self.target):
            logger.debug("%s hand lost its target", self.side)
            self.release()
            return

        if should_release(sample.pinch_distance):
            self._release(game, x, y, now)
        else:
            self.state = InteractionState.DRAGGING
            self._drag(game, other, x, y, now)

    def _target(self, game: "Game", sample: HandSample, x: float, y: float, now: float):
        nearest = game.nearest_target(x, y)
        if nearest is not None and nearest[1] < TARGET_RADIUS:
            piece, _, in_play_zone = nearest
            self.state = InteractionState.TARGETING
            self.target = piece
            self.target_in_play_zone = in_play_zone
        else:
            self.state = InteractionState.IDLE
            self.target = None
            self.target_in_play_zone = False

        if self.target is None or not can_grab(sample.pinch_distance):
            return

        self.state = InteractionState.GRABBING
        # Play-zone pieces stay drawn on the grid
        if not self.target_in_play_zone:
            self.target.grabbed = True
        self.grab = GrabSession(
            offset_x=self.target.screen_x - x,
            offset_y=self.target.screen_y - y,
            wrist_angle=wrist_angle(sample.landmarks),
            anchor_x=x,
            last_move_time=now,
        )
        logger.debug("%s hand grabbed %s (play zone: %s)", self.side, self.target.kind,
                     self.target_in_play_zone)

    def _release(self, game: "Game", x: float, y: float, now: float):
        piece, in_play_zone = self.target, self.target_in_play_zone
        self.release()
        if not in_play_zone:
            game.resolve_drop(piece, x, y, now)
        elif RELEASE_HARD_DROP and piece is game.active:
            game.hard_drop()

    def _drag(self, game: "Game", other: "HandInteraction", x: float, y: float, now: float):
        assert self.grab is not None
        if self.target_in_play_zone and self.target is game.active:
            if is_two_handed(self, other):
                if self.side == "left":
                    self._shift(game, x, now, TWO_HAND_MOVE_THRESHOLD, TWO_HAND_MOVE_COOLDOWN_MS)
                    self.grab.circle = None
                else:
                    self._rotate(game, x, y, now, TWO_HAND_ROTATE_RADIUS, TWO_HAND_ROTATE_COOLDOWN_MS)
            else:
                self._rotate(game, x, y, now, ONE_HAND_ROTATE_RADIUS, ONE_HAND_ROTATE_COOLDOWN_MS)
                self._shift(game, x, now, ONE_HAND_MOVE_THRESHOLD, ONE_HAND_MOVE_COOLDOWN_MS)
            return

        # Spawn zone or hold: free drag, eased toward hand + offset
        piece = self.target
        piece.target_x = x + self.grab.offset_x
        piece.target_y = y + self.grab.offset_y
        piece.screen_x += (piece.target_x - piece.screen_x) * DRAG_EASE
        piece.screen_y += (piece.target_y - piece.screen_y) * DRAG_EASE

    def _shift(self, game: "Game", x: float, now: float, threshold: float, cooldown: float):
        move_x = x - self.grab.anchor_x
        if abs(move_x) <= threshold or now - self.grab.last_move_time <= cooldown:
            return
        direction = 1 if move_x > 0 else -1
        if game.try_shift(direction):
            self.grab.anchor_x = x
            self.grab.last_move_time = now

    def _rotate(self, game: "Game", x: float, y: float, now: float, radius: float, cooldown: float):
        piece = game.active
        dx = x - piece.screen_x
        dy = y - piece.screen_y
        angle = math.atan2(dy, dx)
        self.grab.circle = CircleGesture(piece.screen_x, piece.screen_y, GESTURE_CIRCLE_RADIUS, angle)
        if math.hypot(dx, dy) <= radius:
            return

        quadrant = quantize_quadrant(angle)
        if self.grab.rotation_index is None:
            self.grab.rotation_index = 0
        if quadrant == self.grab.rotation_index or now - self.last_rotate_time <= cooldown:
            return

        step = quadrant_step(self.grab.rotation_index, quadrant)
        # Only a clockwise primitive exists; three of them make one counter-clockwise turn
        for _ in range(1 if step > 0 else 3):
            game.rotate_active()
        self.grab.rotation_index = quadrant
        self.last_rotate_time = now


def is_two_handed(hand: HandInteraction, other: HandInteraction) -> bool:
    """Both hands drag the same play-zone piece. Reads ``other`` only."""
    return other.is_play_zone_dragging and other.target is hand.target
