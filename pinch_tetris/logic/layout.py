from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

from pinch_tetris.config import (
    BOARD_COLS, BOARD_ROWS, CELL_SIZE, SPAWN_ZONE_HEIGHT, BOARD_BOTTOM_MARGIN,
    HOLD_SLOT_COUNT, HOLD_SLOT_WIDTH, HOLD_SLOT_HEIGHT, HOLD_GAP, HOLD_MARGIN, HOLD_TOP,
)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2

    def contains(self, px: float, py: float, margin: float = 0.0) -> bool:
        return (self.x - margin <= px <= self.x + self.w + margin
                and self.y - margin <= py <= self.y + self.h + margin)


@dataclass(frozen=True)
class ZoneLayout:
    board: Rect
    spawn_zone: Rect
    holds: List[Rect]
    cell_size: int
    divider_active: bool  # a piece exists; render sink tints the spawn divider

    @property
    def offset_x(self) -> float:
        return self.board.x

    @property
    def offset_y(self) -> float:
        return self.board.y

    @property
    def spawn_top(self) -> float:
        return self.spawn_zone.y

    @property
    def spawn_bottom(self) -> float:
        return self.spawn_zone.y + self.spawn_zone.h


def compute_layout(width: float, height: float, has_piece: bool,
                   rows: int = BOARD_ROWS, cols: int = BOARD_COLS,
                   cell_size: int = CELL_SIZE, slot_count: int = HOLD_SLOT_COUNT) -> ZoneLayout:
    """Pixel regions for one frame. Board centered and bottom-anchored, spawn band on
    top of it, hold slots in two stacks pinned to the left and right edges."""
    board_w = cols * cell_size
    board_h = rows * cell_size
    board = Rect((width - board_w) / 2, height - board_h - BOARD_BOTTOM_MARGIN, board_w, board_h)
    spawn_zone = Rect(board.x, board.y - SPAWN_ZONE_HEIGHT, board_w, SPAWN_ZONE_HEIGHT)

    assert slot_count >= 2 and slot_count % 2 == 0
    per_side = slot_count // 2
    left_x = HOLD_MARGIN
    right_x = width - HOLD_SLOT_WIDTH - HOLD_MARGIN
    holds = []
    for i in range(slot_count):
        x = left_x if i < per_side else right_x
        y = HOLD_TOP + (i % per_side) * (HOLD_SLOT_HEIGHT + HOLD_GAP)
        holds.append(Rect(x, y, HOLD_SLOT_WIDTH, HOLD_SLOT_HEIGHT))

    return ZoneLayout(board=board, spawn_zone=spawn_zone, holds=holds,
                      cell_size=cell_size, divider_active=has_piece)
