"""
Spectator loop: the watch view over other players' sessions.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

import requests
import schedule

import config
from domain.records import ActivePlayer
from services.api_client import ApiError, SnakeApiClient
from .feeds import SimulatedStateFeed, StateFeed
from .timers import TickTimer

logger = logging.getLogger(__name__)


class SpectatorLoop:
    """
    Keeps a list of remote players and advances each one every tick.

    Two timers run on the same scheduler: the tick timer advances every
    player through the feed, and a slower refresh timer reloads the
    active-player list from the service (when a client is given).

    Args:
        scheduler: scheduler that delivers both timers
        client: service client for the active-player list (optional)
        feed: produces each player's next state; defaults to a local simulation
        tick_ms: tick cadence in milliseconds
        refresh_seconds: active-player list refresh period
        on_update: called with the selected player after every tick
    """

    def __init__(
        self,
        scheduler: schedule.Scheduler,
        client: Optional[SnakeApiClient] = None,
        feed: Optional[StateFeed] = None,
        tick_ms: Optional[int] = None,
        refresh_seconds: Optional[float] = None,
        on_update: Optional[Callable[[ActivePlayer], None]] = None
    ):
        self.client = client
        self.feed = feed or SimulatedStateFeed()
        self.on_update = on_update
        self.players: Dict[str, ActivePlayer] = {}
        self.selected_id: Optional[str] = None

        tick_ms = tick_ms if tick_ms is not None else config.SPECTATOR_TICK_MS
        if refresh_seconds is None:
            refresh_seconds = config.ACTIVE_PLAYERS_REFRESH_SECONDS
        self.tick_timer = TickTimer(scheduler, tick_ms / 1000.0, self.on_tick, name="spectator")
        self.refresh_timer = TickTimer(scheduler, refresh_seconds, self.refresh_players, name="active-players")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        if self.client is not None:
            self.refresh_players()
            self.refresh_timer.start()
        self.tick_timer.start()
        logger.info(f"Watching {len(self.players)} active player(s)")

    def stop(self) -> None:
        self.tick_timer.cancel()
        self.refresh_timer.cancel()

    @property
    def running(self) -> bool:
        return self.tick_timer.active

    # -------------------------------------------------------------------------
    # Player list
    # -------------------------------------------------------------------------

    @property
    def selected_player(self) -> Optional[ActivePlayer]:
        if self.selected_id is None:
            return None
        return self.players.get(self.selected_id)

    def select_player(self, player_id: str) -> ActivePlayer:
        if player_id not in self.players:
            raise ValueError(f"Unknown player: {player_id}")
        self.selected_id = player_id
        return self.players[player_id]

    def list_players(self) -> List[ActivePlayer]:
        return list(self.players.values())

    def refresh_players(self) -> bool:
        """
        Reload the active-player list. On failure the current list is kept.

        Returns:
            True if the list was refreshed
        """
        if self.client is None:
            return False
        try:
            fetched = self.client.get_active_players()
        except (ApiError, requests.RequestException) as e:
            logger.error(f"Failed to load active players: {e}")
            return False

        self.sync_players(fetched)
        return True

    def sync_players(self, fetched: Iterable[ActivePlayer]) -> None:
        """
        Merge a fresh player list into the view.

        New players start from the state the service reported, players that
        left are dropped, and players already on screen keep their locally
        advanced state.
        """
        merged: Dict[str, ActivePlayer] = {}
        for player in fetched:
            existing = self.players.get(player.id)
            if existing is not None:
                existing.username = player.username
                merged[player.id] = existing
            else:
                merged[player.id] = player
        self.players = merged

        if self.selected_id not in self.players:
            self.selected_id = next(iter(self.players), None)

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def on_tick(self) -> None:
        for player in list(self.players.values()):
            player.game_state = self.feed.next_state(player)
            player.score = player.game_state.score

        selected = self.selected_player
        if selected is not None and self.on_update is not None:
            self.on_update(selected)
