from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
import logging
import math
import random
from typing import Dict, List, Mapping, Optional, Tuple

from pinch_tetris.config import (
    BOARD_COLS, BOARD_ROWS, CELL_SIZE, SPAWN_TICKS, GRAVITY_INTERVAL_MS,
    HOLD_SLOT_COUNT, HOLD_CAPACITY, HOLD_SLOT_WIDTH, HOLD_SLOT_HEIGHT, HOLD_TOLERANCE,
    HOLD_STACK_OFFSET, HOLD_SPAWN_DELAY_MS, SPAWN_LANE_TOP, SPAWN_LANE_TRAVEL,
    VIEWPORT_WIDTH, VIEWPORT_HEIGHT,
)
from pinch_tetris.input.conditioner import SIDES, HandSample
from pinch_tetris.logic.board import Action, Board, Piece, place_at_spawn, random_piece
from pinch_tetris.logic.hold import HoldInventory
from pinch_tetris.logic.interaction import HandInteraction
from pinch_tetris.logic.layout import ZoneLayout, compute_layout

logger = logging.getLogger(__name__)

SCORE_TABLE = {0: 0, 1: 100, 2: 300, 3: 500, 4: 800}


class GameState(Enum):
    RUNNING = auto()
    GAME_OVER = auto()


@dataclass
class Game:
    """Board, active piece, hold slots and both hands, advanced once per frame by
    ``update``. All timing compares the caller's timestamps (ms); nothing sleeps.

    Frame order:
        layout -> play-zone entry -> deferred spawn -> hands (left, right)
        -> grabbed-piece easing -> hold highlight -> gravity -> screen sync
    """
    rows: int = BOARD_ROWS
    cols: int = BOARD_COLS
    cell_size: int = CELL_SIZE
    spawn_ticks: int = SPAWN_TICKS
    gravity_interval: float = GRAVITY_INTERVAL_MS
    hold_spawn_delay: float = HOLD_SPAWN_DELAY_MS
    hold_count: int = HOLD_SLOT_COUNT
    hold_capacity: int = HOLD_CAPACITY
    rng: random.Random = field(default_factory=random.Random)

    board: Board = field(init=False)
    holds: HoldInventory = field(init=False)
    hands: Dict[str, HandInteraction] = field(init=False)
    layout: ZoneLayout = field(init=False)
    state: GameState = field(init=False, default=GameState.RUNNING)
    active: Optional[Piece] = field(init=False, default=None)
    pending_spawn_at: Optional[float] = field(init=False, default=None)
    last_drop_time: float = field(init=False, default=0.0)

    score: int = field(init=False, default=0)
    lines_cleared: int = field(init=False, default=0)

    def __post_init__(self):
        self.hands = {side: HandInteraction(side) for side in SIDES}
        self.reset()

    def reset(self):
        self.board = Board(rows=self.rows, cols=self.cols)
        self.holds = HoldInventory(self.hold_count, self.hold_capacity)
        for hand in self.hands.values():
            hand.reset()
        self.state = GameState.RUNNING
        self.pending_spawn_at = None
        self.last_drop_time = 0.0
        self.score = 0
        self.lines_cleared = 0
        self.spawn_piece()
        self._relayout(VIEWPORT_WIDTH, VIEWPORT_HEIGHT)
        self._sync_positions()

    # ----- Spawning -----
    def spawn_piece(self):
        self.active = random_piece(self.rng, self.cols, self.spawn_ticks)
        logger.debug("spawned %s", self.active.kind)

    # ----- Public: frame -----
    def update(self, now: float, samples: Optional[Mapping[str, Optional[HandSample]]],
               width: float, height: float):
        """Advance one frame. ``samples`` maps "left"/"right" to a sample or None;
        passing None instead of a mapping skips hand handling altogether."""
        self._relayout(width, height)
        if self.state is not GameState.RUNNING:
            self._sync_positions()
            return

        self._check_zone_entry()
        self._check_deferred_spawn(now)
        if samples is not None:
            left, right = self.hands["left"], self.hands["right"]
            left.update(self, right, samples.get("left"), now, width, height)
            right.update(self, left, samples.get("right"), now, width, height)
        self._ease_grabbed()
        self._update_hold_highlight()

        if self.active is not None and not self.active.grabbed:
            if now - self.last_drop_time > self.gravity_interval:
                self.last_drop_time = now
                self.gravity_tick()

        self._sync_positions()

    def _relayout(self, width: float, height: float):
        self.layout = compute_layout(width, height, self.active is not None,
                                     self.rows, self.cols, self.cell_size, self.hold_count)
        self.holds.place(self.layout.holds)

    def _check_zone_entry(self):
        piece = self.active
        if piece is not None and not piece.in_play_zone and not piece.grabbed and piece.y >= 0:
            self._enter_play_zone()

    def _enter_play_zone(self):
        self.active.in_play_zone = True
        if not self.board.can_place(self.active):
            self.state = GameState.GAME_OVER
            logger.info("game over: score %d, lines %d", self.score, self.lines_cleared)

    def _check_deferred_spawn(self, now: float):
        if self.pending_spawn_at is not None and self.active is None and now >= self.pending_spawn_at:
            self.pending_spawn_at = None
            self.spawn_piece()

    # ----- Gravity / locking -----
    def gravity_tick(self):
        piece = self.active
        if piece is None or piece.grabbed:
            return
        if piece.y < 0:
            # Spawn zone: falls freely until it reaches the grid
            piece.y += 1
            if piece.y >= 0:
                self._enter_play_zone()
        elif self.can_move(0, 1):
            piece.y += 1
        else:
            self._lock_active()

    def hard_drop(self):
        if self.active is None:
            return
        while self.can_move(0, 1):
            self.active.y += 1
        self._lock_active()

    def _lock_active(self):
        assert self.active is not None
        if any(r < 0 for r, _ in self.active.cells):
            self.state = GameState.GAME_OVER
            logger.info("game over (topped out): score %d, lines %d", self.score, self.lines_cleared)
        self.board.lock(self.active)
        cleared = self.board.clear_lines()
        self.lines_cleared += cleared
        self.score += SCORE_TABLE.get(cleared, 0)
        logger.debug("locked %s at (%d, %d), cleared %d", self.active.kind,
                     self.active.x, self.active.y, cleared)
        if self.state is GameState.RUNNING:
            self.spawn_piece()

    # ----- Moves -----
    def can_move(self, dx: int, dy: int) -> bool:
        return self.active is not None and self.board.can_place(self.active, dx, dy)

    def try_shift(self, direction: int) -> bool:
        if not self.can_move(direction, 0):
            return False
        self.active.x += direction
        return True

    def rotate_active(self) -> bool:
        if self.active is None:
            return False
        return self.board.rotate(self.active)

    def step(self, action: Action):
        """Keyboard fallback; ignored while a hand is free-dragging the piece."""
        if self.state is not GameState.RUNNING:
            return
        if action == Action.TICK:
            self.gravity_tick(); return
        if self.active is None or self.active.grabbed:
            return

        if action == Action.MOVE_LEFT:
            self.try_shift(-1)
        elif action == Action.MOVE_RIGHT:
            self.try_shift(1)
        elif action == Action.SOFT_DROP:
            self.gravity_tick()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.ROTATE_CW:
            self.rotate_active()
        elif action == Action.ROTATE_CCW:
            for _ in range(3):
                self.rotate_active()

    # ----- Targets -----
    def nearest_target(self, x: float, y: float) -> Optional[Tuple[Piece, float, bool]]:
        """Closest interactable piece as (piece, distance, in_play_zone). The active
        piece is checked first and wins ties; then the top of each slot in order."""
        best: Optional[Tuple[Piece, float, bool]] = None
        if self.active is not None:
            d = math.hypot(x - self.active.screen_x, y - self.active.screen_y)
            best = (self.active, d, self.active.in_play_zone)
        for _, top in self.holds.tops():
            d = math.hypot(x - top.screen_x, y - top.screen_y)
            if best is None or d < best[1]:
                best = (top, d, False)
        return best

    def is_live(self, piece: Piece) -> bool:
        return piece is self.active or self.holds.find(piece) is not None

    # ----- Drops -----
    def resolve_drop(self, piece: Piece, x: float, y: float, now: float) -> bool:
        """Hold slots first, then the spawn zone. Returns True if anything moved."""
        slot = self.holds.slot_at(x, y)
        if slot is not None:
            if not slot.accepts(piece):
                return False
            if piece is self.active:
                self.active = None
                self.pending_spawn_at = now + self.hold_spawn_delay
            else:
                self.holds.remove(piece)
            slot.push(piece)
            logger.debug("held %s in %s slot (%d/%d)", piece.kind, slot.side,
                         len(slot.pieces), slot.capacity)
            return True

        if not self.layout.spawn_zone.contains(x, y):
            return False
        source = self.holds.find(piece)
        if source is None:
            return False
        source.remove(piece)

        previous = self.active
        if previous is not None and not previous.in_play_zone:
            if not source.push(previous):
                logger.debug("discarded %s, slot cannot take it back", previous.kind)
        self.active = piece
        place_at_spawn(piece, self.cols, self.spawn_ticks)
        self.pending_spawn_at = None
        logger.debug("released %s from hold into the spawn zone", piece.kind)
        return True

    # ----- Animation -----
    def _ease_grabbed(self):
        pieces: List[Piece] = [self.active] if self.active is not None else []
        pieces += self.holds.all_pieces()
        for piece in pieces:
            if not piece.grabbed:
                continue
            dx = piece.target_x - piece.screen_x
            dy = piece.target_y - piece.screen_y
            lerp = 0.4 + min(math.hypot(dx, dy) / 50, 0.4)
            piece.screen_x += dx * lerp
            piece.screen_y += dy * lerp

    def _update_hold_highlight(self):
        dragger = self.dragging_hand()
        if dragger is None or dragger.position is None:
            return
        hx, hy = dragger.position
        for slot in self.holds:
            slot.targeted = slot.rect.contains(hx, hy, HOLD_TOLERANCE) and slot.accepts(dragger.target)

    def dragging_hand(self) -> Optional[HandInteraction]:
        for hand in self.hands.values():
            if hand.is_free_dragging:
                return hand
        return None

    def _sync_positions(self):
        layout = self.layout
        piece = self.active
        if piece is not None and not piece.grabbed:
            if piece.in_play_zone:
                cx = layout.offset_x + (piece.x + piece.width / 2) * self.cell_size
                cy = layout.offset_y + (piece.y + piece.height / 2) * self.cell_size
            else:
                total = self.spawn_ticks + piece.height
                progress = (piece.y + total) / total
                cx, _ = layout.board.center
                cy = layout.spawn_top + SPAWN_LANE_TOP + progress * SPAWN_LANE_TRAVEL
            piece.screen_x = piece.target_x = cx
            piece.screen_y = piece.target_y = cy

        for slot in self.holds:
            n = len(slot.pieces)
            for i, held in enumerate(slot.pieces):
                if held.grabbed:
                    continue
                cx = slot.rect.x + HOLD_SLOT_WIDTH / 2 + i * HOLD_STACK_OFFSET - (n - 1) * HOLD_STACK_OFFSET / 2
                cy = slot.rect.y + HOLD_SLOT_HEIGHT / 2 + 5
                held.screen_x = held.target_x = cx
                held.screen_y = held.target_y = cy
