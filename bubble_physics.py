"""
Projectile flight and snap-to-grid.

The simulator is a two-state machine:
- idle: no bubble in flight, the shooter may aim and fire
- flying: one projectile advances a fixed step per tick until it touches a
  grid bubble or the ceiling, then snaps into the grid and matches resolve

Movement is a fixed step per tick, not scaled by elapsed time, so game speed
follows the host frame rate.
"""

import math
import random
from typing import Dict, List, Optional, Tuple

from bubble_geometry import (
    BUBBLE_RADIUS, GRID_COLS, SCREEN_WIDTH, SHOOT_SPEED, SHOOTER_X, SHOOTER_Y,
    clamp_aim_angle, clamp_to_board, distance, get_adjacent_positions,
    grid_to_screen, screen_to_grid,
)
from bubble_grid import BubbleGrid, GridBubble, random_color
from bubble_matching import MatchResult, resolve_placement

STATE_IDLE = "idle"
STATE_FLYING = "flying"


class Projectile:
    def __init__(self, x: float, y: float, color: int, velocity_x: float = 0, velocity_y: float = 0):
        self.x = x
        self.y = y
        self.color = color
        self.radius = BUBBLE_RADIUS
        self.velocity_x = velocity_x
        self.velocity_y = velocity_y
        self.bounce_count = 0  # Track number of wall bounces
        self.move_frames = 0  # Ticks spent in flight

    def update(self):
        self.x += self.velocity_x
        self.y += self.velocity_y
        self.move_frames += 1

    def check_wall_collision(self, width: float = SCREEN_WIDTH) -> bool:
        # Only flip while heading into the wall, the position itself is not clamped
        if (self.x - self.radius < 0 and self.velocity_x < 0) or \
           (self.x + self.radius > width and self.velocity_x > 0):
            self.velocity_x *= -1
            self.bounce_count += 1
            return True
        return False

    def reached_ceiling(self) -> bool:
        return self.y - self.radius < 0

    def find_collision(self, grid: BubbleGrid) -> Optional[GridBubble]:
        """Nearest overlapping grid bubble, ties broken by (row, col)."""
        nearest = None
        nearest_dist = float("inf")
        for bubble in grid.bubbles():
            dist = distance(self.x, self.y, bubble.x, bubble.y)
            if dist < self.radius * 2 and dist < nearest_dist:
                nearest = bubble
                nearest_dist = dist
        return nearest


class Shooter:
    """Aim angle plus the loaded bubble and the queued one shown as preview."""

    def __init__(self, rng: Optional[random.Random] = None,
                 x: float = SHOOTER_X, y: float = SHOOTER_Y):
        self.rng = rng or random.Random()
        self.x = x
        self.y = y
        self.angle = 0.0
        self.loaded: Optional[int] = random_color(self.rng)
        self.queued: Optional[int] = random_color(self.rng)

    def set_angle(self, angle: float) -> bool:
        if not math.isfinite(angle):
            return False
        self.angle = clamp_aim_angle(angle)
        return True

    def rotate(self):
        """Promote the queued bubble and draw a fresh one behind it."""
        self.loaded = self.queued
        self.queued = random_color(self.rng)

    def as_dict(self) -> Dict:
        return {
            'x': self.x,
            'y': self.y,
            'angle': self.angle,
            'loaded': self.loaded,
            'queued': self.queued,
        }


class Impact:
    """What happened when the projectile stopped."""

    def __init__(self, projectile: Projectile, hit: Optional[GridBubble],
                 match: Optional[MatchResult]):
        self.projectile = projectile
        self.hit = hit  # None when the ceiling stopped it
        self.match = match  # None when the shot could not be placed

    @property
    def placed(self) -> Optional[GridBubble]:
        return self.match.placed if self.match else None

    @property
    def score_delta(self) -> int:
        return self.match.score_delta if self.match else 0


class ProjectileSimulator:
    def __init__(self, grid: BubbleGrid, shooter: Shooter,
                 width: float = SCREEN_WIDTH, speed: float = SHOOT_SPEED):
        self.grid = grid
        self.shooter = shooter
        self.width = width
        self.speed = speed
        self.state = STATE_IDLE
        self.projectile: Optional[Projectile] = None

    def is_idle(self) -> bool:
        return self.state == STATE_IDLE

    def fire(self, angle: Optional[float] = None, speed: Optional[float] = None) -> bool:
        """Launch the loaded bubble. Ignored unless idle with a loaded bubble."""
        if self.state != STATE_IDLE or self.shooter.loaded is None:
            return False
        angle = self.shooter.angle if angle is None else clamp_aim_angle(angle)
        speed = self.speed if speed is None else speed
        self.projectile = Projectile(
            self.shooter.x,
            self.shooter.y,
            self.shooter.loaded,
            math.sin(angle) * speed,
            -math.cos(angle) * speed,
        )
        self.state = STATE_FLYING
        return True

    def tick(self) -> Optional[Impact]:
        """Advance the projectile one step. Returns an Impact once it stops."""
        if self.state != STATE_FLYING:
            return None

        projectile = self.projectile
        projectile.update()
        projectile.check_wall_collision(self.width)

        hit = projectile.find_collision(self.grid)
        if hit is None and not projectile.reached_ceiling():
            return None

        placed = self.snap(projectile)
        match = resolve_placement(self.grid, placed) if placed is not None else None

        self.projectile = None
        self.state = STATE_IDLE
        self.shooter.rotate()
        return Impact(projectile, hit, match)

    def snap(self, projectile: Projectile) -> Optional[GridBubble]:
        """Insert the projectile at its grid cell, or the nearest free neighbor if that is taken."""
        row, col = clamp_to_board(*screen_to_grid(projectile.x, projectile.y))
        placed = self.grid.insert(row, col, projectile.color)
        if placed is not None:
            return placed

        free = self._free_cells_near(row, col, projectile.x, projectile.y)
        if free:
            r, c = free[0]
            return self.grid.insert(r, c, projectile.color)

        print(f"Warning: no free cell around ({row}, {col}), shot discarded")
        return None

    def _free_cells_near(self, row: int, col: int, x: float, y: float) -> List[Tuple[int, int]]:
        candidates = []
        for r, c in get_adjacent_positions(row, col):
            if r < 0 or not (0 <= c < GRID_COLS) or self.grid.is_occupied(r, c):
                continue
            cx, cy = grid_to_screen(r, c)
            candidates.append((distance(x, y, cx, cy), (r, c)))
        candidates.sort()
        return [pos for _, pos in candidates]
