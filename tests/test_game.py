import random
import unittest

from pinch_tetris.config import BOARD_ROWS, SPAWN_TICKS
from pinch_tetris.logic.board import Action, new_piece
from pinch_tetris.logic.game import Game, GameState

W, H = 1280, 800


def make_game(kind="T"):
    game = Game(gravity_interval=10 ** 9, rng=random.Random(7))
    game.active = new_piece(kind)
    game.update(0, None, W, H)
    return game


class TestGravity(unittest.TestCase):
    def test_piece_falls_through_spawn_zone_and_locks(self):
        game = make_game("O")
        piece = game.active
        for _ in range(SPAWN_TICKS):
            game.step(Action.TICK)
        self.assertEqual(piece.y, -2)
        self.assertFalse(piece.in_play_zone)

        for _ in range(2 + BOARD_ROWS - 2):
            game.step(Action.TICK)
        self.assertTrue(piece.in_play_zone)
        self.assertEqual(piece.y, 18)
        self.assertIs(game.active, piece)

        game.step(Action.TICK)
        self.assertEqual(game.board.grid[19][4:6], ["O", "O"])
        self.assertEqual(game.board.grid[18][4:6], ["O", "O"])
        self.assertIsNot(game.active, piece)
        self.assertEqual(game.state, GameState.RUNNING)

    def test_timed_gravity(self):
        game = Game(gravity_interval=600, rng=random.Random(7))
        game.active = new_piece("T")
        start = game.active.y
        game.update(600, None, W, H)
        self.assertEqual(game.active.y, start)
        game.update(601, None, W, H)
        self.assertEqual(game.active.y, start + 1)
        game.update(1000, None, W, H)
        self.assertEqual(game.active.y, start + 1)

    def test_grabbed_piece_does_not_fall(self):
        game = Game(gravity_interval=600, rng=random.Random(7))
        game.active.grabbed = True
        start = game.active.y
        game.update(5000, None, W, H)
        self.assertEqual(game.active.y, start)

    def test_entry_into_play_zone_is_detected(self):
        game = make_game("T")
        game.active.y = 0
        game.update(16, None, W, H)
        self.assertTrue(game.active.in_play_zone)
        self.assertAlmostEqual(game.active.screen_x, 628)
        self.assertAlmostEqual(game.active.screen_y, 284)


class TestScoring(unittest.TestCase):
    def test_hard_drop_clears_line(self):
        game = make_game("I")
        game.board.grid[19][4:] = ["Z"] * 6
        game.active.x, game.active.y = 0, 0
        game.active.in_play_zone = True
        game.step(Action.HARD_DROP)
        self.assertEqual(game.lines_cleared, 1)
        self.assertEqual(game.score, 100)
        self.assertEqual(game.board.get_cells(), [])

    def test_blocked_entry_ends_game(self):
        game = make_game("T")
        game.board.grid[1][4] = "Z"
        game.active.y = -1
        game.step(Action.TICK)
        self.assertEqual(game.state, GameState.GAME_OVER)

        piece, x = game.active, game.active.x
        game.step(Action.MOVE_LEFT)
        game.update(100, None, W, H)
        self.assertIs(game.active, piece)
        self.assertEqual(piece.x, x)

    def test_reset(self):
        game = make_game("I")
        game.score, game.lines_cleared = 500, 3
        game.board.grid[19][0] = "J"
        game.state = GameState.GAME_OVER
        game.reset()
        self.assertEqual(game.state, GameState.RUNNING)
        self.assertEqual(game.score, 0)
        self.assertEqual(game.board.get_cells(), [])
        self.assertIsNotNone(game.active)


class TestKeyboard(unittest.TestCase):
    def setUp(self):
        self.game = make_game("T")
        self.piece = self.game.active

    def test_moves_and_rotations(self):
        self.game.step(Action.MOVE_LEFT)
        self.assertEqual(self.piece.x, 2)
        self.game.step(Action.MOVE_RIGHT)
        self.game.step(Action.MOVE_RIGHT)
        self.assertEqual(self.piece.x, 4)

        original = [row[:] for row in self.piece.shape]
        self.game.step(Action.ROTATE_CW)
        self.assertNotEqual(self.piece.shape, original)
        self.game.step(Action.ROTATE_CCW)
        self.assertEqual(self.piece.shape, original)

        y = self.piece.y
        self.game.step(Action.SOFT_DROP)
        self.assertEqual(self.piece.y, y + 1)

    def test_grabbed_piece_ignores_keys(self):
        self.piece.grabbed = True
        self.game.step(Action.MOVE_LEFT)
        self.game.step(Action.HARD_DROP)
        self.assertEqual(self.piece.x, 3)
        self.assertIs(self.game.active, self.piece)


class TestDrops(unittest.TestCase):
    def setUp(self):
        self.game = make_game("T")
        self.piece = self.game.active

    def test_drop_into_slot_defers_spawn(self):
        self.assertTrue(self.game.resolve_drop(self.piece, 85, 95, 1000))
        self.assertIsNone(self.game.active)
        self.assertEqual(self.game.pending_spawn_at, 3000)
        self.assertIs(self.game.holds[0].top, self.piece)

        self.game.update(2999, None, W, H)
        self.assertIsNone(self.game.active)
        self.assertFalse(self.game.layout.divider_active)
        self.game.update(3000, None, W, H)
        self.assertIsNotNone(self.game.active)
        self.assertIsNone(self.game.pending_spawn_at)

    def test_incompatible_slot_rejects(self):
        self.game.holds[0].push(new_piece("O"))
        self.assertFalse(self.game.resolve_drop(self.piece, 85, 95, 0))
        self.assertIs(self.game.active, self.piece)
        self.assertEqual(len(self.game.holds[0].pieces), 1)
        self.assertIsNone(self.game.pending_spawn_at)

    def test_typed_slot_rejects_other_kind(self):
        self.assertTrue(self.game.resolve_drop(self.piece, 85, 95, 1000))
        slot = self.game.holds[0]
        self.assertEqual(slot.kind, "T")
        self.assertEqual(len(slot.pieces), 1)

        o = new_piece("O")
        self.game.active = o
        self.assertFalse(self.game.resolve_drop(o, 85, 95, 1100))
        self.assertIs(self.game.active, o)
        self.assertEqual(slot.kind, "T")
        self.assertEqual(slot.pieces, [self.piece])
        self.assertEqual(self.game.pending_spawn_at, 3000)

    def test_full_slot_rejects(self):
        for _ in range(3):
            self.game.holds[0].push(new_piece("T"))
        self.assertFalse(self.game.resolve_drop(self.piece, 85, 95, 0))
        self.assertIs(self.game.active, self.piece)
        self.assertEqual(len(self.game.holds[0].pieces), 3)

    def test_drop_on_nothing_is_a_no_op(self):
        self.assertFalse(self.game.resolve_drop(self.piece, 300, 500, 0))
        self.assertIs(self.game.active, self.piece)
        # the active piece does not come from a hold, so the spawn zone ignores it
        self.assertFalse(self.game.resolve_drop(self.piece, 640, 150, 0))

    def test_transfer_between_slots(self):
        held = new_piece("L")
        self.game.holds[0].push(held)
        self.assertTrue(self.game.resolve_drop(held, 1195, 95, 0))
        self.assertIsNone(self.game.holds[0].kind)
        self.assertIs(self.game.holds[3].top, held)
        self.assertIs(self.game.active, self.piece)

    def test_promote_swaps_spawn_piece_back(self):
        held = new_piece("S")
        self.game.holds[0].push(held)
        self.assertTrue(self.game.resolve_drop(held, 640, 150, 0))
        self.assertIs(self.game.active, held)
        self.assertEqual((held.x, held.y), (3, -8))
        self.assertFalse(held.in_play_zone)
        self.assertIs(self.game.holds[0].top, self.piece)
        self.assertEqual(self.game.holds[0].kind, "T")

    def test_promote_discards_piece_that_cannot_go_back(self):
        first, second = new_piece("S"), new_piece("S")
        self.game.holds[0].push(first)
        self.game.holds[0].push(second)
        self.assertTrue(self.game.resolve_drop(second, 640, 150, 0))
        self.assertIs(self.game.active, second)
        self.assertEqual(self.game.holds[0].pieces, [first])
        self.assertIsNone(self.game.holds.find(self.piece))

    def test_promote_cancels_pending_spawn(self):
        self.game.resolve_drop(self.piece, 85, 95, 1000)
        held = new_piece("J")
        self.game.holds[2].push(held)
        self.assertTrue(self.game.resolve_drop(held, 640, 150, 1500))
        self.assertIs(self.game.active, held)
        self.assertIsNone(self.game.pending_spawn_at)
        self.game.update(3000, None, W, H)
        self.assertIs(self.game.active, held)

    def test_nearest_target_prefers_active_on_tie(self):
        held = new_piece("I")
        self.game.holds[0].push(held)
        self.game.update(16, None, W, H)
        held.screen_x, held.screen_y = self.piece.screen_x, self.piece.screen_y
        piece, dist, in_play_zone = self.game.nearest_target(self.piece.screen_x, self.piece.screen_y)
        self.assertIs(piece, self.piece)
        self.assertEqual(dist, 0)
        self.assertFalse(in_play_zone)


if __name__ == '__main__':
    unittest.main()
