"""
Bubble grid model.

Placed bubbles are kept in a map keyed by (row, col), so occupancy checks are
O(1) and a cell can never hold two bubbles. Pixel centers are derived from the
grid position once, at construction, and only serve as a rendering cache.
"""

import random
from typing import Dict, Iterator, List, Optional, Tuple

from bubble_geometry import (
    BUBBLE_COLORS_COUNT, GRID_COLS, INITIAL_ROWS,
    grid_to_screen,
)


class GridBubble:
    """A bubble sitting in the grid at (row, col) with a color index (0-5)."""
    __slots__ = ("row", "col", "color", "x", "y")

    def __init__(self, row: int, col: int, color: int):
        self.row = row
        self.col = col
        self.color = color
        self.x, self.y = grid_to_screen(row, col)

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def __str__(self):
        return f"({self.row}, {self.col}, {self.color})"

    def __repr__(self):
        return f"GridBubble{self.__str__()}"

    def __eq__(self, other):
        if isinstance(other, GridBubble):
            return self.row == other.row and self.col == other.col and self.color == other.color
        return False

    def __hash__(self):
        return hash((self.row, self.col, self.color))


class BubbleGrid:
    """Placed bubbles indexed by (row, col)."""

    def __init__(self, bubbles: Optional[Dict[Tuple[int, int], int]] = None):
        self._cells: Dict[Tuple[int, int], GridBubble] = {}
        if bubbles:
            for (row, col), color in bubbles.items():
                self.insert(row, col, color)

    def __len__(self):
        return len(self._cells)

    def __contains__(self, pos):
        return pos in self._cells

    def __iter__(self) -> Iterator[GridBubble]:
        return iter(self.bubbles())

    def get(self, row: int, col: int) -> Optional[GridBubble]:
        return self._cells.get((row, col))

    def is_occupied(self, row: int, col: int) -> bool:
        return (row, col) in self._cells

    def is_empty(self) -> bool:
        return not self._cells

    def insert(self, row: int, col: int, color: int) -> Optional[GridBubble]:
        """
        Place a new bubble at (row, col).

        Returns:
            The new bubble, or None if the cell is already taken. An occupied
            cell is never overwritten.
        """
        if (row, col) in self._cells:
            print(f"Warning: cell ({row}, {col}) is already occupied, insertion rejected")
            return None
        bubble = GridBubble(row, col, color)
        self._cells[(row, col)] = bubble
        return bubble

    def remove(self, row: int, col: int) -> Optional[GridBubble]:
        return self._cells.pop((row, col), None)

    def remove_bubbles(self, bubbles) -> int:
        removed = 0
        for bubble in bubbles:
            if self.remove(bubble.row, bubble.col) is not None:
                removed += 1
        return removed

    def bubbles(self) -> List[GridBubble]:
        """All bubbles in (row, col) order."""
        return [self._cells[pos] for pos in sorted(self._cells)]

    def top_row(self) -> List[GridBubble]:
        return [b for b in self.bubbles() if b.row == 0]

    def max_y(self) -> float:
        return max((b.y for b in self._cells.values()), default=0)

    def snapshot(self) -> Dict[Tuple[int, int], int]:
        """Grid state as {(row, col): color}."""
        return {pos: bubble.color for pos, bubble in self._cells.items()}

    def copy(self) -> "BubbleGrid":
        return BubbleGrid(self.snapshot())


def random_color(rng: Optional[random.Random] = None) -> int:
    rng = rng or random
    return rng.randrange(BUBBLE_COLORS_COUNT)


def create_initial_grid(rng: Optional[random.Random] = None, rows: int = INITIAL_ROWS) -> BubbleGrid:
    """
    Build the starting honeycomb: `rows` full rows from the ceiling, with the
    last column left out on odd rows to produce the stagger.
    """
    grid = BubbleGrid()
    for row in range(rows):
        for col in range(GRID_COLS):
            if row % 2 == 1 and col == GRID_COLS - 1:
                continue
            grid.insert(row, col, random_color(rng))
    return grid
