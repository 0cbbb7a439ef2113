import csv
import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from bubble_engine import BubbleShooterEngine
from bubble_geometry import BUBBLE_COLORS_COUNT
from evaluate_engine import evaluate_random_policy, play_random_game, play_shot


class TestEvaluation(unittest.TestCase):

    def test_play_shot_lands(self):
        engine = BubbleShooterEngine(seed=9)
        before = len(engine.grid)
        result = play_shot(engine, 0.3)
        self.assertIsNotNone(result.impact)
        self.assertGreaterEqual(result.impact.projectile.move_frames, 1)
        self.assertEqual(engine.shots_fired, 1)
        if result.match is not None and not result.match.popped:
            self.assertEqual(len(engine.grid), before + 1)

    def test_random_game_respects_shot_cap(self):
        with redirect_stdout(io.StringIO()):
            engine, rows = play_random_game(seed=5, max_shots=10)
        self.assertLessEqual(len(rows), 10)
        self.assertEqual(len(rows), engine.shots_fired)
        self.assertEqual(sum(r["score_delta"] for r in rows), engine.score)
        for row in rows:
            self.assertGreater(row["ticks"], 0)
            self.assertGreaterEqual(row["ticks"], row["bounces"])

    def test_outputs_written(self):
        with tempfile.TemporaryDirectory() as out_dir:
            with redirect_stdout(io.StringIO()):
                stats = evaluate_random_policy(2, out_dir, seed=1, max_shots=5, plot=False)
            self.assertEqual(sum(stats["outcomes"].values()), 2)
            self.assertTrue(os.path.exists(os.path.join(out_dir, "summary.txt")))
            with open(stats["csv"], newline="") as f:
                rows = list(csv.DictReader(f))
            self.assertEqual(len(rows), sum(stats["shots"]))
            self.assertTrue(all(int(r["ticks"]) > 0 for r in rows))

    def test_summary_reports_color_occupancy(self):
        with tempfile.TemporaryDirectory() as out_dir:
            with redirect_stdout(io.StringIO()):
                stats = evaluate_random_policy(2, out_dir, seed=1, max_shots=5, plot=False)
                final_sizes = [len(play_random_game(seed, 5)[0].grid) for seed in (1, 2)]
            with open(os.path.join(out_dir, "summary.txt")) as f:
                summary = f.read()
        occupancy = stats["color_occupancy"]
        self.assertEqual(len(occupancy), BUBBLE_COLORS_COUNT)
        self.assertAlmostEqual(sum(occupancy), sum(final_sizes) / 2)
        self.assertIn("Average bubbles left per color:", summary)
        for color_idx, avg_left in enumerate(occupancy):
            self.assertIn(f"Color {color_idx} ", summary)
            self.assertIn(f": {avg_left:.2f}", summary)


if __name__ == '__main__':
    unittest.main()
