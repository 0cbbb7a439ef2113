"""
Bubble shooter engine.

The single entry point for a presentation layer. The host calls set_aim on
pointer movement, fire on click, and tick once per frame; everything else is
read-only queries for drawing.
"""

import random
from typing import Dict, List, Optional, Tuple

from aim_preview import Segment, compute_preview_path
from bubble_grid import BubbleGrid, create_initial_grid
from bubble_matching import (
    MatchResult, STATUS_LOST, STATUS_PLAYING, STATUS_WON, evaluate_status,
)
from bubble_physics import Impact, Projectile, ProjectileSimulator, Shooter

# Per-shot console tracing (toggle with 'D' in the game window)
DEBUG_ENGINE = False


class TickResult:
    def __init__(self, grid: Dict[Tuple[int, int], int], score: int, score_delta: int,
                 status: str, impact: Optional[Impact] = None):
        self.grid = grid
        self.score = score
        self.score_delta = score_delta
        self.status = status
        self.impact = impact

    @property
    def match(self) -> Optional[MatchResult]:
        return self.impact.match if self.impact else None

    def __repr__(self):
        return f"TickResult(status={self.status}, score={self.score}, delta={self.score_delta})"


class BubbleShooterEngine:
    def __init__(self, seed: Optional[int] = None, grid: Optional[BubbleGrid] = None,
                 rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(seed)
        self.grid = grid if grid is not None else create_initial_grid(self.rng)
        self.shooter = Shooter(self.rng)
        self.simulator = ProjectileSimulator(self.grid, self.shooter)
        self.score = 0
        self.shots_fired = 0
        self.status = STATUS_PLAYING

    def reset(self, seed: Optional[int] = None):
        """Start a new game with a fresh layout."""
        if seed is not None:
            self.rng.seed(seed)
        self.grid = create_initial_grid(self.rng)
        self.shooter = Shooter(self.rng)
        self.simulator = ProjectileSimulator(self.grid, self.shooter)
        self.score = 0
        self.shots_fired = 0
        self.status = STATUS_PLAYING

    @property
    def game_over(self) -> bool:
        return self.status != STATUS_PLAYING

    @property
    def projectile(self) -> Optional[Projectile]:
        return self.simulator.projectile

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_aim(self, angle: float) -> bool:
        if self.game_over or not self.simulator.is_idle():
            return False
        return self.shooter.set_angle(angle)

    def fire(self) -> bool:
        if self.game_over:
            return False
        fired = self.simulator.fire()
        if fired:
            self.shots_fired += 1
        return fired

    # ------------------------------------------------------------------
    # Frame update
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        if self.game_over:
            return self._result(0)

        impact = self.simulator.tick()
        if impact is None:
            return self._result(0)

        delta = impact.score_delta
        self.score += delta
        self.status = evaluate_status(self.grid)

        if DEBUG_ENGINE:
            placed = impact.placed.pos if impact.placed else None
            hit = impact.hit.pos if impact.hit else "ceiling"
            print(f"[ENGINE] shot {self.shots_fired}: hit={hit} placed={placed} "
                  f"match={impact.match} delta={delta} score={self.score} status={self.status}")
        if self.status == STATUS_WON:
            print(f"Board cleared! Final score: {self.score}")
        elif self.status == STATUS_LOST:
            print(f"Bubbles crossed the danger line. Final score: {self.score}")

        return self._result(delta, impact)

    def _result(self, delta: int, impact: Optional[Impact] = None) -> TickResult:
        return TickResult(self.grid.snapshot(), self.score, delta, self.status, impact)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_grid(self) -> BubbleGrid:
        return self.grid.copy()

    def get_preview_path(self) -> List[Segment]:
        if self.game_over or not self.simulator.is_idle():
            return []
        return compute_preview_path(self.shooter.angle, (self.shooter.x, self.shooter.y))

    def get_shooter_state(self) -> Dict:
        state = self.shooter.as_dict()
        state['state'] = self.simulator.state
        return state

    @property
    def won(self) -> bool:
        return self.status == STATUS_WON

    @property
    def lost(self) -> bool:
        return self.status == STATUS_LOST
