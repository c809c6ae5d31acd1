"""
Records exchanged with the leaderboard / account service.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import VALID_MODES
from .game_state import GameState


@dataclass
class User:
    id: str
    username: str
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data['id']),
            username=data['username'],
            email=data.get('email'),
        )


@dataclass
class LeaderboardEntry:
    id: str
    username: str
    score: int
    mode: str
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            id=str(data['id']),
            username=data['username'],
            score=int(data['score']),
            mode=data.get('gameMode') or data.get('game_mode'),
            date=data.get('date') or data.get('createdAt'),
        )


@dataclass
class ActivePlayer:
    """
    A remote player shown in the watch view.

    Attributes:
        id: session identifier from the service
        username: display name
        mode: boundary mode of the player's session
        game_state: the state the spectator view is currently showing
        score: the displayed score, kept in step with game_state
    """
    id: str
    username: str
    mode: str
    game_state: GameState
    score: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivePlayer":
        mode = data['gameMode']
        if mode not in VALID_MODES:
            raise ValueError(f"Invalid game mode: {mode!r}")
        game_state = GameState.from_dict(data['gameState'])
        return cls(
            id=str(data['id']),
            username=data['username'],
            mode=mode,
            game_state=game_state,
            score=int(data.get('score', game_state.score)),
            extra={k: data[k] for k in ('userId', 'startedAt', 'lastUpdatedAt') if k in data},
        )
