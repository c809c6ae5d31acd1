"""
Food placement for the snake engine.
"""

import random
from typing import Iterable, Optional, Tuple

from .constants import GRID_SIZE
from .game_state import Position

# Rejection-sampling attempts before falling back to an explicit free-cell scan
MAX_FOOD_ATTEMPTS = 1000


class BoardSaturatedError(RuntimeError):
    """Raised when the snake occupies every cell and no food can be placed."""


def place_food(
    snake: Iterable[Tuple[int, int]],
    rng: Optional[random.Random] = None
) -> Position:
    """
    Return a random cell (x, y) not occupied by the snake.

    Cells are drawn uniformly from the whole grid and rejected while they land
    on the snake. After MAX_FOOD_ATTEMPTS rejections the choice is made
    uniformly among the remaining free cells instead, so the result stays
    uniform and the call always terminates.

    Args:
        snake: current snake segments
        rng: optional random source (defaults to the random module)

    Raises:
        BoardSaturatedError: if the snake covers the whole grid
    """
    rng = rng or random
    occupied = {Position(*segment) for segment in snake}

    if len(occupied) >= GRID_SIZE * GRID_SIZE:
        raise BoardSaturatedError(
            f"No free cell left for food on a {GRID_SIZE}x{GRID_SIZE} board."
        )

    for _ in range(MAX_FOOD_ATTEMPTS):
        cell = Position(rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE))
        if cell not in occupied:
            return cell

    free_cells = [
        Position(x, y)
        for y in range(GRID_SIZE)
        for x in range(GRID_SIZE)
        if Position(x, y) not in occupied
    ]
    return rng.choice(free_cells)
