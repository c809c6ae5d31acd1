"""
Loops that drive the engine: the interactive session and the watch view.
"""

from .timers import TickTimer, run_scheduler
from .session import SessionLoop, NOT_STARTED, RUNNING, PAUSED, GAME_OVER
from .feeds import StateFeed, SimulatedStateFeed
from .spectator import SpectatorLoop

__all__ = [
    'TickTimer', 'run_scheduler',
    'SessionLoop', 'NOT_STARTED', 'RUNNING', 'PAUSED', 'GAME_OVER',
    'StateFeed', 'SimulatedStateFeed',
    'SpectatorLoop',
]
