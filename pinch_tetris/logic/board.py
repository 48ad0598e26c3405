from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
import random
from typing import List, Optional, Tuple

from pinch_tetris.config import BOARD_COLS, BOARD_ROWS, SPAWN_TICKS, COLORS

# ===== Shapes (spawn orientation, rotated in place) =====
SHAPES = {
    "I": [[1, 1, 1, 1]],
    "O": [[1, 1], [1, 1]],
    "T": [[0, 1, 0], [1, 1, 1]],
    "S": [[0, 1, 1], [1, 1, 0]],
    "Z": [[1, 1, 0], [0, 1, 1]],
    "J": [[1, 0, 0], [1, 1, 1]],
    "L": [[0, 0, 1], [1, 1, 1]],
}
KINDS = tuple(SHAPES)

WALL_KICKS = (-1, 1, -2, 2)  # column offsets, tried in order


class Action(Enum):
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    SOFT_DROP = auto()
    HARD_DROP = auto()
    ROTATE_CW = auto()
    ROTATE_CCW = auto()
    TICK = auto()


@dataclass(eq=False)
class Piece:
    """A tetromino. Compared by identity: two pieces of one kind are never the same piece."""
    kind: str
    shape: List[List[int]]
    x: int = 0
    y: int = 0
    grabbed: bool = False
    in_play_zone: bool = False
    screen_x: float = 0.0
    screen_y: float = 0.0
    target_x: float = 0.0
    target_y: float = 0.0

    @property
    def width(self) -> int:
        return len(self.shape[0])

    @property
    def height(self) -> int:
        return len(self.shape)

    @property
    def color(self) -> Tuple[int, int, int]:
        return COLORS[self.kind]

    @property
    def cells(self) -> List[Tuple[int, int]]:
        """Filled (row, col) grid cells at the current position."""
        out = []
        for rr, line in enumerate(self.shape):
            for cc, filled in enumerate(line):
                if filled:
                    out.append((self.y + rr, self.x + cc))
        return out


def rotated_cw(shape: List[List[int]]) -> List[List[int]]:
    return [list(row) for row in zip(*reversed(shape))]


def new_piece(kind: str, cols: int = BOARD_COLS, spawn_ticks: int = SPAWN_TICKS) -> Piece:
    piece = Piece(kind=kind, shape=[list(row) for row in SHAPES[kind]])
    place_at_spawn(piece, cols, spawn_ticks)
    return piece


def place_at_spawn(piece: Piece, cols: int = BOARD_COLS, spawn_ticks: int = SPAWN_TICKS):
    # Centered, and exactly spawn_ticks + height gravity ticks above row 0
    piece.x = (cols - piece.width) // 2
    piece.y = -spawn_ticks - piece.height
    piece.in_play_zone = False


def random_piece(rng: random.Random, cols: int = BOARD_COLS, spawn_ticks: int = SPAWN_TICKS) -> Piece:
    return new_piece(rng.choice(KINDS), cols, spawn_ticks)


@dataclass
class Board:
    rows: int = BOARD_ROWS
    cols: int = BOARD_COLS
    grid: List[List[Optional[str]]] = field(default_factory=list)

    def __post_init__(self):
        if not self.grid:
            self.grid = [[None for _ in range(self.cols)] for _ in range(self.rows)]

    # ----- Collision -----
    def can_place(self, piece: Piece, dx: int = 0, dy: int = 0) -> bool:
        for r, c in piece.cells:
            r += dy
            c += dx
            if c < 0 or c >= self.cols or r >= self.rows:
                return False
            # Rows above the board only need horizontal bounds
            if r >= 0 and self.grid[r][c] is not None:
                return False
        return True

    # ----- Rotation -----
    def rotate(self, piece: Piece) -> bool:
        """Rotate clockwise in place, trying wall kicks. Returns False and leaves
        the piece untouched when no placement works."""
        if piece.kind == "O":
            return False
        old_shape, old_x = piece.shape, piece.x
        piece.shape = rotated_cw(old_shape)
        if self.can_place(piece):
            return True
        for kick in WALL_KICKS:
            piece.x = old_x + kick
            if self.can_place(piece):
                return True
        piece.shape, piece.x = old_shape, old_x
        return False

    # ----- Lock / clear -----
    def lock(self, piece: Piece):
        for r, c in piece.cells:
            if 0 <= r < self.rows:
                self.grid[r][c] = piece.kind

    def clear_lines(self) -> int:
        cleared = 0
        row = self.rows - 1
        while row >= 0:
            if self.is_full(row):
                del self.grid[row]
                self.grid.insert(0, [None] * self.cols)
                cleared += 1
                # rows above shifted down into this index; look at it again
                continue
            row -= 1
        return cleared

    def is_full(self, row: int) -> bool:
        return all(cell is not None for cell in self.grid[row])

    # ----- Queries for rendering -----
    def get_cells(self) -> List[Tuple[int, int, str]]:
        out = []
        for r in range(self.rows):
            for c in range(self.cols):
                k = self.grid[r][c]
                if k:
                    out.append((r, c, k))
        return out
