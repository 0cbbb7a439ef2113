"""
Match resolution for the bubble grid.

Two breadth-first searches over the honeycomb:
- find_cluster: same-color bubbles reachable from a seed cell
- find_floating: bubbles with no path (any color) to the ceiling row

resolve_placement runs both after a shot lands and reports the score delta.
"""

from collections import deque
from typing import Optional, Set

from bubble_geometry import (
    CLUSTER_POINTS, DANGER_Y, FLOATING_POINTS, MATCH_THRESHOLD,
    get_adjacent_positions,
)
from bubble_grid import BubbleGrid, GridBubble

STATUS_PLAYING = "playing"
STATUS_WON = "won"
STATUS_LOST = "lost"


class MatchResult:
    """Outcome of resolving one placed bubble."""

    def __init__(self, placed: GridBubble, cluster: Set[GridBubble],
                 floating: Optional[Set[GridBubble]] = None, popped: bool = False):
        self.placed = placed
        self.cluster = cluster
        self.floating = floating or set()
        self.popped = popped

    @property
    def removed_count(self) -> int:
        if not self.popped:
            return 0
        return len(self.cluster) + len(self.floating)

    @property
    def score_delta(self) -> int:
        if not self.popped:
            return 0
        return len(self.cluster) * CLUSTER_POINTS + len(self.floating) * FLOATING_POINTS

    def __repr__(self):
        return (f"MatchResult(placed={self.placed}, cluster={len(self.cluster)}, "
                f"floating={len(self.floating)}, popped={self.popped})")


def find_cluster(grid: BubbleGrid, row: int, col: int, color: int) -> Set[GridBubble]:
    """
    Find all same-colored bubbles connected to (row, col).

    Only occupied cells of the given color are expanded. An empty or
    differently colored seed yields an empty set.
    """
    cluster = set()
    visited = {(row, col)}
    to_check = deque([(row, col)])

    while to_check:
        r, c = to_check.popleft()
        bubble = grid.get(r, c)
        if bubble is None or bubble.color != color:
            continue
        cluster.add(bubble)
        for pos in get_adjacent_positions(r, c):
            if pos not in visited:
                visited.add(pos)
                to_check.append(pos)

    return cluster


def find_floating(grid: BubbleGrid) -> Set[GridBubble]:
    """Bubbles not connected to row 0 through any chain of neighbors."""
    connected_to_top = set()
    to_check = deque()

    # Start with all bubbles in the top row
    for bubble in grid.top_row():
        connected_to_top.add(bubble.pos)
        to_check.append(bubble.pos)

    while to_check:
        row, col = to_check.popleft()
        for pos in get_adjacent_positions(row, col):
            if pos in grid and pos not in connected_to_top:
                connected_to_top.add(pos)
                to_check.append(pos)

    return {b for b in grid.bubbles() if b.pos not in connected_to_top}


def sweep_floating(grid: BubbleGrid) -> Set[GridBubble]:
    """Remove every floating bubble from the grid and return them."""
    floating = find_floating(grid)
    grid.remove_bubbles(floating)
    return floating


def resolve_placement(grid: BubbleGrid, placed: GridBubble) -> MatchResult:
    """
    Resolve matches for a bubble that was just inserted into the grid.

    A cluster of MATCH_THRESHOLD or more is removed together with everything
    it leaves hanging. Smaller clusters leave the grid unchanged.
    """
    cluster = find_cluster(grid, placed.row, placed.col, placed.color)
    if len(cluster) < MATCH_THRESHOLD:
        return MatchResult(placed, cluster)

    grid.remove_bubbles(cluster)
    floating = sweep_floating(grid)
    return MatchResult(placed, cluster, floating, popped=True)


def evaluate_status(grid: BubbleGrid) -> str:
    """Win when the grid is empty, lose when a bubble sits below the danger line."""
    if grid.is_empty():
        return STATUS_WON
    if grid.max_y() > DANGER_Y:
        return STATUS_LOST
    return STATUS_PLAYING
