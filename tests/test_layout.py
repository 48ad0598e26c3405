import unittest

from pinch_tetris.config import HOLD_SLOT_HEIGHT, HOLD_SLOT_WIDTH
from pinch_tetris.logic.layout import Rect, compute_layout


class TestZoneLayout(unittest.TestCase):
    def setUp(self):
        self.layout = compute_layout(1280, 800, has_piece=True)

    def test_board_centered_and_bottom_anchored(self):
        """10x20 cells of 24px, 60px above the bottom edge."""
        self.assertEqual(self.layout.board, Rect(520, 260, 240, 480))
        self.assertEqual(self.layout.offset_x, 520)
        self.assertEqual(self.layout.offset_y, 260)

    def test_spawn_band_sits_on_the_board(self):
        spawn = self.layout.spawn_zone
        self.assertEqual(spawn, Rect(520, 40, 240, 220))
        self.assertEqual(self.layout.spawn_bottom, self.layout.board.y)
        self.assertEqual(self.layout.spawn_top, 40)

    def test_hold_stacks_pinned_to_edges(self):
        holds = self.layout.holds
        self.assertEqual(len(holds), 6)
        self.assertEqual([(r.x, r.y) for r in holds[:3]], [(40, 60), (40, 150), (40, 240)])
        self.assertEqual([(r.x, r.y) for r in holds[3:]], [(1150, 60), (1150, 150), (1150, 240)])
        for r in holds:
            self.assertEqual((r.w, r.h), (HOLD_SLOT_WIDTH, HOLD_SLOT_HEIGHT))

    def test_recomputed_from_viewport_only(self):
        again = compute_layout(1280, 800, has_piece=True)
        self.assertEqual(again, self.layout)
        wider = compute_layout(1600, 800, has_piece=True)
        self.assertEqual(wider.board.x, 680)
        self.assertEqual(wider.holds[3].x, 1600 - 90 - 40)
        self.assertFalse(compute_layout(1280, 800, has_piece=False).divider_active)

    def test_rect_contains_with_margin(self):
        r = Rect(40, 60, 90, 70)
        self.assertTrue(r.contains(40, 60))
        self.assertFalse(r.contains(35, 60))
        self.assertTrue(r.contains(35, 60, margin=10))
        self.assertFalse(r.contains(141, 60, margin=10))
        self.assertEqual(r.center, (85, 95))


if __name__ == '__main__':
    unittest.main()
