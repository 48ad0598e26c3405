from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from pinch_tetris.config import HOLD_SLOT_COUNT, HOLD_CAPACITY, HOLD_TOLERANCE
from pinch_tetris.logic.board import Piece
from pinch_tetris.logic.layout import Rect


@dataclass
class HoldSlot:
    side: str                      # "left" / "right", layout only
    capacity: int = HOLD_CAPACITY
    pieces: List[Piece] = field(default_factory=list)
    kind: Optional[str] = None     # None until the first piece goes in
    rect: Rect = Rect(0, 0, 0, 0)
    targeted: bool = False

    @property
    def top(self) -> Optional[Piece]:
        return self.pieces[-1] if self.pieces else None

    @property
    def is_full(self) -> bool:
        return len(self.pieces) >= self.capacity

    def accepts(self, piece: Piece) -> bool:
        return not self.is_full and (self.kind is None or self.kind == piece.kind)

    def push(self, piece: Piece) -> bool:
        if not self.accepts(piece):
            return False
        piece.in_play_zone = False
        self.pieces.append(piece)
        self.kind = piece.kind
        return True

    def remove(self, piece: Piece) -> bool:
        for i, p in enumerate(self.pieces):
            if p is piece:
                del self.pieces[i]
                if not self.pieces:
                    self.kind = None
                return True
        return False

    def holds(self, piece: Piece) -> bool:
        return any(p is piece for p in self.pieces)


class HoldInventory:
    """Fixed bank of hold slots; first half on the left, second half on the right."""

    def __init__(self, count: int = HOLD_SLOT_COUNT, capacity: int = HOLD_CAPACITY):
        half = count // 2
        self.slots: List[HoldSlot] = [
            HoldSlot(side="left" if i < half else "right", capacity=capacity)
            for i in range(count)
        ]

    def __iter__(self) -> Iterator[HoldSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, i: int) -> HoldSlot:
        return self.slots[i]

    def place(self, rects: Sequence[Rect]):
        for slot, rect in zip(self.slots, rects):
            slot.rect = rect
            slot.targeted = False

    def find(self, piece: Piece) -> Optional[HoldSlot]:
        for slot in self.slots:
            if slot.holds(piece):
                return slot
        return None

    def remove(self, piece: Piece) -> bool:
        slot = self.find(piece)
        return slot.remove(piece) if slot is not None else False

    def slot_at(self, x: float, y: float, margin: float = HOLD_TOLERANCE) -> Optional[HoldSlot]:
        for slot in self.slots:
            if slot.rect.contains(x, y, margin):
                return slot
        return None

    def tops(self) -> List[Tuple[HoldSlot, Piece]]:
        return [(slot, slot.top) for slot in self.slots if slot.pieces]

    def all_pieces(self) -> List[Piece]:
        return [p for slot in self.slots for p in slot.pieces]
