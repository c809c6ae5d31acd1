"""
Simulation engine: advances a GameState by one tick.

The functions here are pure apart from consuming randomness for food
placement; every call returns a new GameState and never mutates its input.
"""

import random
from typing import Optional

from .constants import (
    DIRECTION_DELTAS,
    FOOD_REWARD,
    GRID_SIZE,
    INITIAL_DIRECTION,
    INITIAL_SNAKE,
    OPPOSITE_DIRECTIONS,
    VALID_MODES,
    WALLED,
)
from .food import place_food
from .game_state import GameState, Position


def create_initial_state(rng: Optional[random.Random] = None) -> GameState:
    """
    Return a fresh game: 3-segment snake heading right, score 0, new food.
    """
    snake = [Position(*p) for p in INITIAL_SNAKE]
    return GameState(
        snake=snake,
        food=place_food(snake, rng),
        direction=INITIAL_DIRECTION,
        score=0,
        game_over=False,
    )


def is_opposite(a: str, b: str) -> bool:
    return OPPOSITE_DIRECTIONS[a] == b


def resolve_direction(current: str, requested: Optional[str]) -> str:
    """
    Pick the heading for the next move. A request for the exact opposite of
    the current heading is ignored.
    """
    candidate = requested or current
    if is_opposite(candidate, current):
        return current
    return candidate


def tick(
    state: GameState,
    requested_direction: Optional[str],
    mode: str,
    rng: Optional[random.Random] = None
) -> GameState:
    """
    Execute one tick:
      1) If the game is over, return the state unchanged
      2) Resolve the direction (reversals are ignored)
      3) Advance the head one cell
      4) Apply the boundary mode (walls end the game, wrap normalises)
      5) Check self collision against the pre-move body
      6) Eat food (grow + score) or drop the tail

    Failed moves are never committed: on wall or self collision the returned
    state equals the input except for game_over.

    Raises:
        ValueError: for an unknown direction or boundary mode
        BoardSaturatedError: if growing leaves no free cell for food
    """
    if state.game_over:
        return state

    if mode not in VALID_MODES:
        raise ValueError(f"Invalid boundary mode: {mode!r}")
    if requested_direction is not None and requested_direction not in DIRECTION_DELTAS:
        raise ValueError(f"Invalid direction: {requested_direction!r}")

    direction = resolve_direction(state.direction, requested_direction)

    dx, dy = DIRECTION_DELTAS[direction]
    hx, hy = state.head
    hx += dx
    hy += dy

    if mode == WALLED:
        if hx < 0 or hx >= GRID_SIZE or hy < 0 or hy >= GRID_SIZE:
            return state.with_game_over()
    else:
        hx %= GRID_SIZE
        hy %= GRID_SIZE

    new_head = Position(hx, hy)

    # The tail has not vacated its cell yet, so it still counts
    if new_head in state.snake:
        return state.with_game_over()

    grown = (new_head,) + state.snake

    if new_head == state.food:
        return GameState(
            snake=grown,
            food=place_food(grown, rng),
            direction=direction,
            score=state.score + FOOD_REWARD,
            game_over=False,
        )

    return GameState(
        snake=grown[:-1],
        food=state.food,
        direction=direction,
        score=state.score,
        game_over=False,
    )
