"""
Shared Bubble Geometry Module

This module provides consistent geometry, physics helpers and color encoding for
the engine, the pygame window and the evaluation tooling. Everything that maps
between pixel space and the offset (honeycomb) grid lives here so that a bubble
placed at (row, col) always converts back to the same (row, col).

Shared Components:
- Grid to screen coordinate mapping
- Screen to grid coordinate conversion
- Honeycomb neighbor tables (row parity dependent)
- Circle overlap test
- Aim angle clamping and pointer mapping
- Color encoding and constants
"""

import math
import numpy as np
from typing import Tuple, List, Dict

# ============================================================================
# SHARED CONSTANTS (must match between engine, window and evaluation)
# ============================================================================

# Screen dimensions
SCREEN_WIDTH = 620
SCREEN_HEIGHT = 600
BUBBLE_RADIUS = 20
BUBBLE_DIAMETER = BUBBLE_RADIUS * 2

# Grid dimensions
GRID_COLS = 15
INITIAL_ROWS = 5
# Rows that can exist when the lose check runs (row 13 is already past the danger line)
GRID_ROWS = 15

# Color constants (RGB tuples)
BUBBLE_COLORS = [
    (255, 107, 107),  # 0 - Coral
    (78, 205, 196),   # 1 - Turquoise
    (69, 183, 209),   # 2 - Sky blue
    (255, 160, 122),  # 3 - Salmon
    (152, 216, 200),  # 4 - Mint
    (247, 220, 111),  # 5 - Yellow
]
BUBBLE_COLORS_COUNT = len(BUBBLE_COLORS)

# Shooter
SHOOTER_X = SCREEN_WIDTH / 2
SHOOTER_Y = 550
MAX_AIM_ANGLE = math.pi * 0.45
SHOOT_SPEED = 8
PREVIEW_LENGTH = 300

# Game mechanics
MATCH_THRESHOLD = 3
CLUSTER_POINTS = 10
FLOATING_POINTS = 5
DANGER_Y = 500

# Neighbor offsets (dr, dc) for the offset grid
ODD_ROW_OFFSETS = [(-1, 0), (-1, 1), (0, -1), (0, 1), (1, 0), (1, 1)]
EVEN_ROW_OFFSETS = [(-1, -1), (-1, 0), (0, -1), (0, 1), (1, -1), (1, 0)]

# ============================================================================
# GRID TO SCREEN COORDINATE MAPPING
# ============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def row_offset(row: int) -> int:
    """Horizontal shift of a row: odd rows sit half a bubble to the right."""
    return BUBBLE_RADIUS if row % 2 == 1 else 0

def grid_to_screen(row: int, col: int) -> Tuple[float, float]:
    """
    Convert grid coordinates to screen coordinates.

    Args:
        row: Grid row (0 is the ceiling)
        col: Grid column

    Returns:
        Tuple of (x, y) screen coordinates of the bubble center
    """
    x = col * BUBBLE_DIAMETER + row_offset(row) + BUBBLE_RADIUS
    y = row * BUBBLE_DIAMETER + BUBBLE_RADIUS
    return x, y

def screen_to_grid(x: float, y: float) -> Tuple[int, int]:
    """
    Convert screen coordinates back to grid coordinates.

    This is the exact inverse of grid_to_screen; no clamping is applied, so the
    result may lie outside the board (see clamp_to_board).

    Args:
        x: Screen x coordinate
        y: Screen y coordinate

    Returns:
        Tuple of (row, col) grid coordinates
    """
    row = _round_half_up((y - BUBBLE_RADIUS) / BUBBLE_DIAMETER)
    col = _round_half_up((x - BUBBLE_RADIUS - row_offset(row)) / BUBBLE_DIAMETER)
    return row, col

def clamp_to_board(row: int, col: int) -> Tuple[int, int]:
    """Clamp a cell to the playable board (row >= 0, 0 <= col < GRID_COLS)."""
    row = max(0, row)
    col = max(0, min(GRID_COLS - 1, col))
    return row, col

def get_adjacent_positions(row: int, col: int) -> List[Tuple[int, int]]:
    """
    Get adjacent positions in honeycomb pattern.

    The six offsets depend on row parity. Positions are not filtered for
    occupancy or board bounds; callers check the grid.

    Args:
        row, col: Grid position

    Returns:
        List of adjacent (row, col) positions
    """
    offsets = ODD_ROW_OFFSETS if row % 2 == 1 else EVEN_ROW_OFFSETS
    return [(row + dr, col + dc) for dr, dc in offsets]

# ============================================================================
# COLLISION DETECTION
# ============================================================================

def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    dx = x1 - x2
    dy = y1 - y2
    return math.sqrt(dx * dx + dy * dy)

def check_bubble_collision(bubble_x: float, bubble_y: float,
                           target_x: float, target_y: float) -> bool:
    """
    Check if a bubble overlaps a target bubble.

    Args:
        bubble_x, bubble_y: Bubble position
        target_x, target_y: Target position

    Returns:
        True if the centers are closer than two radii
    """
    return distance(bubble_x, bubble_y, target_x, target_y) < BUBBLE_RADIUS * 2

# ============================================================================
# AIMING
# ============================================================================

def clamp_aim_angle(angle: float) -> float:
    return max(-MAX_AIM_ANGLE, min(MAX_AIM_ANGLE, angle))

def aim_angle_from_pointer(pointer_x: float, width: float = SCREEN_WIDTH) -> float:
    """
    Map the pointer's horizontal position to an aim angle.

    The offset from the canvas center is scaled linearly so that either edge
    of the canvas corresponds to the maximum angle.

    Args:
        pointer_x: Pointer x coordinate relative to the canvas
        width: Canvas width

    Returns:
        Angle in radians, clamped to [-MAX_AIM_ANGLE, MAX_AIM_ANGLE]
    """
    half = width / 2
    if half <= 0:
        return 0.0
    return clamp_aim_angle((pointer_x - half) / half * MAX_AIM_ANGLE)

def aim_direction(angle: float) -> Tuple[float, float]:
    """Unit direction for an aim angle (0 points straight up)."""
    return math.sin(angle), -math.cos(angle)

# ============================================================================
# COLOR ENCODING AND DECODING
# ============================================================================

def color_index_to_rgb(color_index: int) -> Tuple[int, int, int]:
    """
    Convert color index to RGB color tuple.

    Args:
        color_index: Color index (0-5)

    Returns:
        RGB color tuple
    """
    if 0 <= color_index < len(BUBBLE_COLORS):
        return BUBBLE_COLORS[color_index]
    else:
        return (128, 128, 128)  # Default gray

def encode_color_planes(grid: Dict[Tuple[int, int], int]) -> np.ndarray:
    """
    Encode grid colors as one-hot color planes.

    Args:
        grid: Grid snapshot {(row, col): color_index}

    Returns:
        Numpy array of shape (BUBBLE_COLORS_COUNT, GRID_ROWS * GRID_COLS).
        Cells outside the board are skipped.
    """
    color_planes = np.zeros((BUBBLE_COLORS_COUNT, GRID_ROWS * GRID_COLS), dtype=np.float32)

    for (row, col), color_idx in grid.items():
        if not (0 <= row < GRID_ROWS and 0 <= col < GRID_COLS):
            continue
        if 0 <= color_idx < BUBBLE_COLORS_COUNT:
            idx = row * GRID_COLS + col
            color_planes[color_idx, idx] = 1.0

    return color_planes
