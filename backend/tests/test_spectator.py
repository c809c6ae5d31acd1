"""
Tests for the watch view: state feeds and the spectator loop.
"""

import random
import sys
import os
from unittest.mock import MagicMock, Mock

import pytest
import requests
import schedule

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, RIGHT, WRAP, WALLED  # noqa: E402
from domain.engine import create_initial_state  # noqa: E402
from domain.game_state import GameState  # noqa: E402
from domain.records import ActivePlayer  # noqa: E402
from loops.feeds import SimulatedStateFeed, StateFeed  # noqa: E402
from loops.spectator import SpectatorLoop  # noqa: E402
from services.api_client import ApiError, SnakeApiClient  # noqa: E402


def make_player(player_id, mode=WRAP, state=None, username=None):
    state = state or GameState(
        snake=[(5, 5), (4, 5), (3, 5)], food=(15, 15), direction=RIGHT, score=0
    )
    return ActivePlayer(
        id=player_id,
        username=username or f"player{player_id}",
        mode=mode,
        game_state=state,
        score=state.score,
    )


def still_input():
    source = Mock()
    source.get_move.return_value = None
    return source


class TestSimulatedStateFeed:
    """Tests for the local simulation of remote players."""

    def test_advances_one_tick(self):
        """Without synthetic input the snake keeps its heading."""
        feed = SimulatedStateFeed(input_source=still_input(), rng=random.Random(0))

        state = feed.next_state(make_player("1"))

        assert state.head == (6, 5)
        assert state.direction == RIGHT

    def test_synthetic_direction_replaces_plain_tick(self):
        """A synthetic turn is applied as the single move of that tick."""
        source = Mock()
        source.get_move.return_value = UP
        feed = SimulatedStateFeed(input_source=source, rng=random.Random(0))

        state = feed.next_state(make_player("1"))

        assert state.head == (5, 4)
        assert state.direction == UP

    def test_game_over_restarts_player(self):
        """A game that ends is replaced by a fresh one."""
        crashing = GameState(snake=[(19, 5), (18, 5)], food=(0, 0), direction=RIGHT, score=50)
        feed = SimulatedStateFeed(input_source=still_input(), rng=random.Random(0))

        state = feed.next_state(make_player("1", mode=WALLED, state=crashing))

        assert state.game_over is False
        assert state.score == 0
        assert state.snake == ((10, 10), (9, 10), (8, 10))
        assert state.direction == RIGHT
        assert state.food not in state.snake

    def test_terminal_seed_state_restarts(self):
        """A player reported as already finished is restarted."""
        finished = GameState(snake=[(1, 1)], food=(2, 2), direction=UP, score=10, game_over=True)
        feed = SimulatedStateFeed(input_source=still_input(), rng=random.Random(0))

        state = feed.next_state(make_player("1", state=finished))

        assert state.game_over is False
        assert state.score == 0

    def test_base_feed_is_abstract(self):
        """StateFeed must be subclassed."""
        with pytest.raises(NotImplementedError):
            StateFeed().next_state(make_player("1"))


class TestSpectatorPlayerList:
    """Tests for merging and selecting players."""

    def test_first_player_auto_selected(self):
        """The first listed player is selected when nothing is."""
        loop = SpectatorLoop(schedule.Scheduler())

        loop.sync_players([make_player("a"), make_player("b")])

        assert loop.selected_id == "a"
        assert [p.id for p in loop.list_players()] == ["a", "b"]

    def test_existing_players_keep_local_state(self):
        """A refresh does not overwrite a player's simulated state."""
        loop = SpectatorLoop(schedule.Scheduler(), feed=SimulatedStateFeed(still_input()))
        loop.sync_players([make_player("a")])
        loop.on_tick()
        advanced = loop.players["a"].game_state

        loop.sync_players([make_player("a", username="renamed"), make_player("b")])

        assert loop.players["a"].game_state is advanced
        assert loop.players["a"].username == "renamed"
        assert "b" in loop.players

    def test_departed_players_dropped_and_selection_moves(self):
        """Players that left disappear and the selection falls back."""
        loop = SpectatorLoop(schedule.Scheduler())
        loop.sync_players([make_player("a"), make_player("b")])

        loop.sync_players([make_player("b")])

        assert list(loop.players) == ["b"]
        assert loop.selected_id == "b"

    def test_empty_list_clears_selection(self):
        """With no players nothing is selected."""
        loop = SpectatorLoop(schedule.Scheduler())
        loop.sync_players([make_player("a")])

        loop.sync_players([])

        assert loop.selected_player is None

    def test_select_player(self):
        """select_player() switches the watched player."""
        loop = SpectatorLoop(schedule.Scheduler())
        loop.sync_players([make_player("a"), make_player("b")])

        assert loop.select_player("b").id == "b"
        assert loop.selected_player.id == "b"

    def test_select_unknown_player_raises(self):
        """Selecting a missing player is an error."""
        loop = SpectatorLoop(schedule.Scheduler())

        with pytest.raises(ValueError):
            loop.select_player("nope")

    def test_refresh_uses_client(self):
        """refresh_players() loads the list from the service."""
        client = Mock()
        client.get_active_players.return_value = [make_player("a")]
        loop = SpectatorLoop(schedule.Scheduler(), client=client)

        assert loop.refresh_players() is True
        assert list(loop.players) == ["a"]

    @pytest.mark.parametrize("error", [ApiError("boom", 500), requests.Timeout("slow")])
    def test_refresh_failure_keeps_list(self, error):
        """A failed refresh is logged and the current list is kept."""
        client = Mock()
        client.get_active_players.side_effect = error
        loop = SpectatorLoop(schedule.Scheduler(), client=client)
        loop.sync_players([make_player("a")])

        assert loop.refresh_players() is False
        assert list(loop.players) == ["a"]

    def test_refresh_without_client(self):
        """Without a client there is nothing to refresh."""
        loop = SpectatorLoop(schedule.Scheduler())

        assert loop.refresh_players() is False

    def test_unknown_mode_from_service_does_not_stop_ticks(self):
        """A listed player with an unknown mode is dropped before it is simulated."""
        state = GameState(snake=[(5, 5), (4, 5)], food=(15, 15), direction=RIGHT).to_dict()
        response = Mock(status_code=200, ok=True)
        response.json.return_value = {'players': [
            {'id': 'bad', 'username': 'odd', 'gameMode': 'classic', 'gameState': state},
            {'id': 'good', 'username': 'ok', 'gameMode': WRAP, 'gameState': state},
        ]}
        session = MagicMock()
        session.request.return_value = response
        client = SnakeApiClient(base_url="http://api.test/api/v1", session=session)
        loop = SpectatorLoop(schedule.Scheduler(), client=client,
                             feed=SimulatedStateFeed(input_source=still_input(), rng=random.Random(0)))

        assert loop.refresh_players() is True
        loop.on_tick()

        assert list(loop.players) == ['good']
        assert loop.players['good'].game_state.head == (6, 5)


class TestSpectatorTicks:
    """Tests for the spectator tick and timers."""

    def test_tick_advances_every_player(self):
        """Each tick advances every player independently."""
        loop = SpectatorLoop(schedule.Scheduler(), feed=SimulatedStateFeed(still_input()))
        loop.sync_players([
            make_player("a"),
            make_player("b", state=GameState(snake=[(2, 2)], food=(9, 9), direction=UP)),
        ])

        loop.on_tick()

        assert loop.players["a"].game_state.head == (6, 5)
        assert loop.players["b"].game_state.head == (2, 1)

    def test_score_follows_state(self):
        """The displayed score tracks the simulated state."""
        eating = GameState(snake=[(5, 5), (4, 5)], food=(6, 5), direction=RIGHT, score=20)
        loop = SpectatorLoop(
            schedule.Scheduler(),
            feed=SimulatedStateFeed(still_input(), rng=random.Random(0)),
        )
        loop.sync_players([make_player("a", state=eating)])

        loop.on_tick()

        assert loop.players["a"].game_state.score == 30
        assert loop.players["a"].score == 30

    def test_on_update_gets_selected_player(self):
        """The update callback receives the selected player after a tick."""
        on_update = Mock()
        loop = SpectatorLoop(schedule.Scheduler(), feed=SimulatedStateFeed(still_input()), on_update=on_update)
        loop.sync_players([make_player("a"), make_player("b")])
        loop.select_player("b")

        loop.on_tick()

        on_update.assert_called_once_with(loop.players["b"])

    def test_start_and_stop_timers(self):
        """start() schedules tick and refresh; stop() cancels both."""
        scheduler = schedule.Scheduler()
        client = Mock()
        client.get_active_players.return_value = [make_player("a")]
        loop = SpectatorLoop(scheduler, client=client, tick_ms=200, refresh_seconds=3)

        loop.start()

        assert loop.running is True
        assert len(scheduler.jobs) == 2
        client.get_active_players.assert_called_once()

        loop.stop()
        scheduler.run_all()

        assert loop.running is False
        assert scheduler.jobs == []

    def test_start_without_client_only_ticks(self):
        """Offline the loop runs only the tick timer."""
        scheduler = schedule.Scheduler()
        loop = SpectatorLoop(scheduler)

        loop.start()

        assert len(scheduler.jobs) == 1

    def test_loops_indefinitely_over_game_overs(self):
        """Across many ticks the watched games never stay over."""
        rng = random.Random(9)
        loop = SpectatorLoop(schedule.Scheduler(), feed=SimulatedStateFeed(rng=rng))
        loop.sync_players([
            make_player(str(i), mode=WALLED, state=create_initial_state(rng)) for i in range(3)
        ])

        for _ in range(500):
            loop.on_tick()
            assert all(not p.game_state.game_over for p in loop.list_players())
