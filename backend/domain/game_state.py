"""
GameState entity - an immutable snapshot of one player's game.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, NamedTuple, Tuple

from .constants import GRID_SIZE, VALID_MOVES


class Position(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of the game after a tick.

    Attributes:
        snake: tuple of Position from head at index 0 to tail at the end
        food: the single food cell, never on the snake at rest
        direction: current heading
        score: points collected so far
        game_over: terminal flag; once set the engine returns the state unchanged
    """

    snake: Tuple[Position, ...]
    food: Position
    direction: str
    score: int = 0
    game_over: bool = False

    def __post_init__(self):
        # Accept plain (x, y) tuples and lists from callers
        object.__setattr__(self, 'snake', tuple(Position(*p) for p in self.snake))
        object.__setattr__(self, 'food', Position(*self.food))
        if not self.snake:
            raise ValueError("A snake needs at least one segment.")
        if self.direction not in VALID_MOVES:
            raise ValueError(f"Invalid direction: {self.direction!r}")

    @property
    def head(self) -> Position:
        """Return the head position (first element)."""
        return self.snake[0]

    def with_game_over(self) -> "GameState":
        return replace(self, game_over=True)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the JSON shape used by the leaderboard service.
        """
        return {
            "snake": [{"x": p.x, "y": p.y} for p in self.snake],
            "food": {"x": self.food.x, "y": self.food.y},
            "direction": self.direction,
            "score": self.score,
            "gameOver": self.game_over,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        """
        Build a GameState from the service's JSON shape.

        Raises:
            ValueError: if a required field is missing or malformed
        """
        try:
            return cls(
                snake=[(int(p["x"]), int(p["y"])) for p in data["snake"]],
                food=(int(data["food"]["x"]), int(data["food"]["y"])),
                direction=data["direction"],
                score=int(data.get("score", 0)),
                game_over=bool(data.get("gameOver", False)),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed game state payload: {e}") from e

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        * = food
        o = snake body
        H = snake head
        Row 0 is printed first, matching the screen layout (up is y - 1).
        """
        board = [['.' for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]

        fx, fy = self.food
        if 0 <= fx < GRID_SIZE and 0 <= fy < GRID_SIZE:
            board[fy][fx] = '*'

        for pos_idx, (x, y) in enumerate(self.snake):
            if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
                continue
            board[y][x] = 'H' if pos_idx == 0 else 'o'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(GRID_SIZE)]
        result.append("   " + " ".join(str(i % 10) for i in range(GRID_SIZE)))
        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState head={tuple(self.head)}, length={len(self.snake)}, "
            f"food={tuple(self.food)}, direction={self.direction}, "
            f"score={self.score}, game_over={self.game_over}>"
        )
