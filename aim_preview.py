"""
Aim line preview.

Walks the aim ray from the shooter and bounces it off the side walls until
the preview length is used up. Read-only: nothing here touches game state.
"""

import math
from typing import List, Tuple

from bubble_geometry import (
    BUBBLE_RADIUS, PREVIEW_LENGTH, SCREEN_WIDTH, SHOOTER_X, SHOOTER_Y,
    aim_direction,
)

Point = Tuple[float, float]
Segment = Tuple[Point, Point]


def compute_preview_path(angle: float,
                         origin: Point = (SHOOTER_X, SHOOTER_Y),
                         max_length: float = PREVIEW_LENGTH,
                         width: float = SCREEN_WIDTH,
                         max_bounces: int = 32) -> List[Segment]:
    """
    Compute the reflected aim ray as a list of line segments.

    The walls sit one bubble radius inside the canvas edges. Every time the
    remaining length would carry the ray past a wall, a segment ends on the
    wall and the horizontal direction flips.

    Args:
        angle: Aim angle in radians (0 is straight up)
        origin: Ray start (shooter position)
        max_length: Total length of the ray
        width: Canvas width
        max_bounces: Upper bound on reflections. Once it is used up the
            ray stops on the next wall it reaches

    Returns:
        Ordered list of ((x0, y0), (x1, y1)) segments, empty for a
        non-positive length
    """
    if not math.isfinite(angle) or max_length <= 0:
        return []

    left_wall = BUBBLE_RADIUS
    right_wall = width - BUBBLE_RADIUS

    current_x, current_y = origin
    dir_x, dir_y = aim_direction(angle)
    remaining = float(max_length)
    segments: List[Segment] = []

    while remaining > 0:
        next_x = current_x + dir_x * remaining
        next_y = current_y + dir_y * remaining

        wall_x = None
        if dir_x < 0 and next_x < left_wall:
            wall_x = left_wall
        elif dir_x > 0 and next_x > right_wall:
            wall_x = right_wall

        if wall_x is None:
            segments.append(((current_x, current_y), (next_x, next_y)))
            break

        t = (wall_x - current_x) / dir_x
        bounce_y = current_y + dir_y * t
        segments.append(((current_x, current_y), (wall_x, bounce_y)))
        if len(segments) > max_bounces:
            # Out of reflections: the ray ends on the wall
            break
        current_x, current_y = wall_x, bounce_y
        dir_x = -dir_x
        remaining -= t

    return segments
