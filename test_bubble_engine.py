import io
import unittest
from contextlib import redirect_stdout

from bubble_engine import BubbleShooterEngine
from bubble_geometry import GRID_COLS, SHOOT_SPEED, SHOOTER_Y
from bubble_grid import BubbleGrid
from bubble_matching import STATUS_LOST, STATUS_PLAYING, STATUS_WON


def engine_with(cells, loaded):
    engine = BubbleShooterEngine(seed=1, grid=BubbleGrid(cells))
    engine.shooter.loaded = loaded
    return engine


def shoot(engine, angle=0.0, max_ticks=1000):
    engine.set_aim(angle)
    engine.fire()
    out = io.StringIO()
    with redirect_stdout(out):
        for _ in range(max_ticks):
            result = engine.tick()
            if result.impact is not None:
                return result
    raise AssertionError("shot never landed")


class TestEngineScenarios(unittest.TestCase):

    def test_pair_plus_one_clears_board_and_wins(self):
        engine = engine_with({(0, 7): 2, (0, 8): 2}, loaded=2)
        result = shoot(engine)
        self.assertEqual(result.impact.placed.pos, (1, 7))
        self.assertTrue(result.match.popped)
        self.assertEqual(result.score_delta, 30)
        self.assertEqual(result.score, 30)
        self.assertEqual(result.status, STATUS_WON)
        self.assertEqual(result.grid, {})
        self.assertTrue(engine.won)

    def test_cluster_of_two_does_not_win(self):
        engine = engine_with({(0, 7): 2}, loaded=2)
        result = shoot(engine)
        self.assertEqual(result.status, STATUS_PLAYING)
        self.assertEqual(result.score_delta, 0)
        self.assertEqual(result.grid, {(0, 7): 2, (1, 7): 2})

    def test_crossing_danger_line_loses(self):
        # Column hanging from the ceiling down to row 12, alternating colors
        cells = {(row, 7): row % 2 for row in range(13)}
        engine = engine_with(cells, loaded=2)
        result = shoot(engine)
        self.assertEqual(result.impact.placed.pos, (13, 7))
        self.assertEqual(result.status, STATUS_LOST)
        self.assertTrue(engine.lost)

    def test_engine_frozen_after_game_over(self):
        engine = engine_with({(0, 7): 2, (0, 8): 2}, loaded=2)
        shoot(engine)
        self.assertFalse(engine.set_aim(0.3))
        self.assertFalse(engine.fire())
        result = engine.tick()
        self.assertEqual(result.status, STATUS_WON)
        self.assertIsNone(result.impact)
        self.assertEqual(engine.get_preview_path(), [])


class TestEngineInput(unittest.TestCase):

    def test_aim_and_fire_ignored_while_flying(self):
        engine = engine_with({(0, 0): 1}, loaded=3)
        engine.set_aim(0.2)
        self.assertTrue(engine.fire())
        self.assertFalse(engine.set_aim(-0.4))
        self.assertEqual(engine.get_shooter_state()['angle'], 0.2)
        self.assertFalse(engine.fire())
        self.assertEqual(engine.shots_fired, 1)

    def test_preview_only_while_idle(self):
        engine = engine_with({(0, 0): 1}, loaded=3)
        self.assertEqual(len(engine.get_preview_path()), 1)
        engine.fire()
        self.assertEqual(engine.get_preview_path(), [])

    def test_projectile_moves_fixed_step(self):
        engine = engine_with({(0, 0): 1}, loaded=3)
        engine.fire()
        engine.tick()
        self.assertEqual(engine.projectile.y, SHOOTER_Y - SHOOT_SPEED)

    def test_shooter_state_and_rotation(self):
        engine = engine_with({(0, 0): 1}, loaded=3)
        state = engine.get_shooter_state()
        self.assertEqual(state['state'], "idle")
        self.assertEqual(state['loaded'], 3)
        queued = state['queued']
        engine.fire()
        self.assertEqual(engine.get_shooter_state()['state'], "flying")
        shoot(engine)
        self.assertEqual(engine.get_shooter_state()['loaded'], queued)

    def test_get_grid_is_a_copy(self):
        engine = engine_with({(0, 0): 1}, loaded=3)
        snapshot = engine.get_grid()
        snapshot.insert(0, 1, 1)
        self.assertEqual(len(engine.grid), 1)


class TestEngineSetup(unittest.TestCase):

    def test_same_seed_same_game(self):
        a = BubbleShooterEngine(seed=11)
        b = BubbleShooterEngine(seed=11)
        self.assertEqual(a.grid.snapshot(), b.grid.snapshot())
        self.assertEqual(a.get_shooter_state(), b.get_shooter_state())

    def test_initial_layout(self):
        engine = BubbleShooterEngine(seed=5)
        self.assertEqual(len(engine.grid), 3 * GRID_COLS + 2 * (GRID_COLS - 1))
        self.assertEqual(engine.status, STATUS_PLAYING)

    def test_reset(self):
        engine = engine_with({(0, 7): 2, (0, 8): 2}, loaded=2)
        shoot(engine)
        engine.reset(seed=3)
        self.assertEqual(engine.status, STATUS_PLAYING)
        self.assertEqual(engine.score, 0)
        self.assertEqual(engine.shots_fired, 0)
        self.assertEqual(len(engine.grid), 3 * GRID_COLS + 2 * (GRID_COLS - 1))
        self.assertTrue(engine.fire())


if __name__ == '__main__':
    unittest.main()
