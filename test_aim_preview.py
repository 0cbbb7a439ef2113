import math
import unittest

from aim_preview import compute_preview_path
from bubble_geometry import BUBBLE_RADIUS, MAX_AIM_ANGLE, PREVIEW_LENGTH, SCREEN_WIDTH, SHOOTER_X, SHOOTER_Y


def segment_length(segment):
    (x0, y0), (x1, y1) = segment
    return math.hypot(x1 - x0, y1 - y0)


class TestPreviewPath(unittest.TestCase):

    def test_straight_up_is_single_segment(self):
        path = compute_preview_path(0)
        self.assertEqual(len(path), 1)
        (x0, y0), (x1, y1) = path[0]
        self.assertEqual((x0, y0), (SHOOTER_X, SHOOTER_Y))
        self.assertAlmostEqual(x1, SHOOTER_X)
        self.assertAlmostEqual(y1, SHOOTER_Y - PREVIEW_LENGTH)

    def test_small_angle_stays_inside(self):
        self.assertEqual(len(compute_preview_path(0.1)), 1)

    def test_steep_right_angle_bounces(self):
        path = compute_preview_path(MAX_AIM_ANGLE)
        self.assertGreaterEqual(len(path), 2)
        first_end = path[0][1]
        self.assertAlmostEqual(first_end[0], SCREEN_WIDTH - BUBBLE_RADIUS)
        (sx, _), (ex, _) = path[1]
        self.assertLess(ex, sx)

    def test_steep_left_angle_bounces(self):
        path = compute_preview_path(-MAX_AIM_ANGLE)
        self.assertGreaterEqual(len(path), 2)
        self.assertAlmostEqual(path[0][1][0], BUBBLE_RADIUS)
        (sx, _), (ex, _) = path[1]
        self.assertGreater(ex, sx)

    def test_segments_are_connected_and_sum_to_length(self):
        path = compute_preview_path(0.4, origin=(50, 550), max_length=1000, width=100)
        self.assertGreater(len(path), 3)
        for previous, current in zip(path, path[1:]):
            self.assertEqual(previous[1], current[0])
        self.assertAlmostEqual(sum(segment_length(s) for s in path), 1000)

    def test_horizontal_direction_alternates(self):
        path = compute_preview_path(0.4, origin=(50, 550), max_length=1000, width=100)
        directions = [math.copysign(1, s[1][0] - s[0][0]) for s in path]
        for a, b in zip(directions, directions[1:]):
            self.assertEqual(a, -b)

    def test_bounce_cap_stops_on_wall(self):
        path = compute_preview_path(0.4, origin=(50, 550), max_length=1000, width=100, max_bounces=2)
        self.assertEqual(len(path), 3)
        for (x0, _), (x1, _) in path:
            self.assertGreaterEqual(min(x0, x1), BUBBLE_RADIUS - 1e-9)
            self.assertLessEqual(max(x0, x1), 100 - BUBBLE_RADIUS + 1e-9)
        self.assertAlmostEqual(path[-1][1][0], 100 - BUBBLE_RADIUS)
        self.assertLess(sum(segment_length(s) for s in path), 1000)

    def test_zero_bounces_ends_on_first_wall(self):
        path = compute_preview_path(MAX_AIM_ANGLE, max_bounces=0)
        self.assertEqual(len(path), 1)
        self.assertAlmostEqual(path[0][1][0], SCREEN_WIDTH - BUBBLE_RADIUS)

    def test_vertical_ray_never_touches_walls(self):
        path = compute_preview_path(0, origin=(20, 550), max_length=500)
        self.assertEqual(len(path), 1)

    def test_degenerate_inputs(self):
        self.assertEqual(compute_preview_path(0.2, max_length=0), [])
        self.assertEqual(compute_preview_path(0.2, max_length=-5), [])
        self.assertEqual(compute_preview_path(float('nan')), [])


if __name__ == '__main__':
    unittest.main()
