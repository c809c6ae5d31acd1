import argparse
import logging
import random
import sys
from typing import List, Optional

import requests
import schedule

import config
from domain.constants import DOWN, LEFT, RIGHT, UP, VALID_MODES, WALLED, WRAP
from domain.engine import create_initial_state
from domain.game_state import GameState
from domain.records import ActivePlayer
from loops.feeds import SimulatedStateFeed
from loops.session import GAME_OVER, SessionLoop
from loops.spectator import SpectatorLoop
from loops.timers import TickTimer, run_scheduler
from players.random_player import RandomPlayer
from services.api_client import ALL_MODES, ApiError, SnakeApiClient

logger = logging.getLogger(__name__)

# Key presses the autopilot sends to the session, one per direction
AUTOPILOT_KEYS = {UP: 'ArrowUp', DOWN: 'ArrowDown', LEFT: 'ArrowLeft', RIGHT: 'ArrowRight'}


def print_state(state: GameState, title: str = "") -> None:
    header = f"{title} " if title else ""
    print(f"\n{header}score={state.score} direction={state.direction}"
          f"{' GAME OVER' if state.game_over else ''}")
    print(state.print_board())


def _login_from_env(client: SnakeApiClient) -> bool:
    if not (config.SNAKE_USERNAME and config.SNAKE_PASSWORD):
        logger.warning("SNAKE_USERNAME/SNAKE_PASSWORD not set; scores will not be reported.")
        return False
    try:
        client.login(config.SNAKE_USERNAME, config.SNAKE_PASSWORD)
        return True
    except (ApiError, requests.RequestException) as e:
        logger.error(f"Login failed: {e}")
        return False


# -------------------------------
# Play
# -------------------------------

def run_session(
    mode: str,
    max_ticks: int,
    tick_ms: int,
    turn_probability: float = 0.2,
    seed: Optional[int] = None,
    client: Optional[SnakeApiClient] = None,
    quiet: bool = False
) -> GameState:
    """
    Play one session with an autopilot pressing random keys between ticks.

    Returns:
        The state the session ended in (terminal, or the last one before max_ticks)
    """
    rng = random.Random(seed)
    scheduler = schedule.Scheduler()
    ticks = {'count': 0}

    def on_update(state: GameState) -> None:
        ticks['count'] += 1
        if not quiet:
            print_state(state, title=f"[tick {ticks['count']}]")

    session = SessionLoop(scheduler, client=client, mode=mode, tick_ms=tick_ms, rng=rng, on_update=on_update)

    autopilot = RandomPlayer(turn_probability=turn_probability, rng=rng)

    def press_random_key() -> None:
        direction = autopilot.get_move(session.state)
        if direction is not None:
            session.handle_key(AUTOPILOT_KEYS[direction])

    # Keys arrive on their own cadence, independent of the tick timer
    pilot = TickTimer(scheduler, tick_ms / 2000.0, press_random_key, name="autopilot")

    session.start()
    pilot.start()
    try:
        run_scheduler(scheduler, lambda: session.status != GAME_OVER and ticks['count'] <= max_ticks)
    finally:
        pilot.cancel()
        session.stop()

    return session.state


# -------------------------------
# Watch
# -------------------------------

def demo_players(count: int, mode: Optional[str], rng: random.Random) -> List[ActivePlayer]:
    """Create locally simulated players for an offline watch view."""
    players = []
    for i in range(count):
        state = create_initial_state(rng)
        players.append(ActivePlayer(
            id=str(i),
            username=f"demo{i}",
            mode=mode or rng.choice(sorted(VALID_MODES)),
            game_state=state,
            score=state.score,
        ))
    return players


def run_watch(
    seconds: float,
    offline: int = 0,
    seed: Optional[int] = None,
    client: Optional[SnakeApiClient] = None,
    quiet: bool = False
) -> SpectatorLoop:
    rng = random.Random(seed)
    scheduler = schedule.Scheduler()

    def on_update(player: ActivePlayer) -> None:
        if not quiet:
            print_state(player.game_state, title=f"[{player.username} {player.mode}]")

    feed = SimulatedStateFeed(rng=rng)
    spectator = SpectatorLoop(
        scheduler,
        client=None if offline else client,
        feed=feed,
        on_update=on_update,
    )
    if offline:
        spectator.sync_players(demo_players(offline, None, rng))

    # Stop after the requested duration
    stopper = {'done': False}

    def finish() -> None:
        stopper['done'] = True
        spectator.stop()

    deadline = TickTimer(scheduler, seconds, finish, name="deadline")

    spectator.start()
    deadline.start()
    try:
        run_scheduler(scheduler, lambda: not stopper['done'])
    finally:
        deadline.cancel()
        spectator.stop()

    if not spectator.players:
        print("No active players at the moment")
    return spectator


# -------------------------------
# Leaderboard
# -------------------------------

def print_leaderboard(client: SnakeApiClient, limit: int, mode_filter: str) -> None:
    entries = client.get_leaderboard(limit=limit, mode_filter=mode_filter)
    if not entries:
        print("No entries found")
        return
    for rank, entry in enumerate(entries, start=1):
        print(f"#{rank:<3} {entry.username:<20} {entry.score:>6}  {entry.mode or '':<12} {entry.date or ''}")


# -------------------------------
# Main Entry Point
# -------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Snake game engine: play, watch and leaderboard.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser("play", help="Run an autopilot session")
    play.add_argument("--mode", choices=[WRAP, WALLED], default=WRAP,
                      help="Boundary mode: pass-through wraps around, walls end the game")
    play.add_argument("--max-ticks", type=int, default=500, help="Stop after this many ticks")
    play.add_argument("--tick-ms", type=int, default=config.SESSION_TICK_MS, help="Tick cadence in ms")
    play.add_argument("--seed", type=int, default=None, help="Random seed")
    play.add_argument("--report", action="store_true",
                      help="Log in with SNAKE_USERNAME/SNAKE_PASSWORD and report the final score")
    play.add_argument("--quiet", action="store_true", help="Only print the final board")

    watch = subparsers.add_parser("watch", help="Watch active players")
    watch.add_argument("--offline", type=int, default=0,
                       help="Simulate N local demo players instead of calling the service")
    watch.add_argument("--seconds", type=float, default=10.0, help="How long to watch")
    watch.add_argument("--seed", type=int, default=None, help="Random seed")
    watch.add_argument("--quiet", action="store_true", help="Do not print boards")

    board = subparsers.add_parser("leaderboard", help="Show the leaderboard")
    board.add_argument("--limit", type=int, default=20, help="Number of entries")
    board.add_argument("--mode", choices=[ALL_MODES, WRAP, WALLED], default=ALL_MODES,
                       help="Filter by boundary mode")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    args = build_parser().parse_args(argv)
    client = SnakeApiClient()

    if args.command == "play":
        if args.report:
            _login_from_env(client)
        final_state = run_session(
            mode=args.mode,
            max_ticks=args.max_ticks,
            tick_ms=args.tick_ms,
            seed=args.seed,
            client=client,
            quiet=args.quiet,
        )
        print_state(final_state, title="Final")
        return 0

    if args.command == "watch":
        run_watch(seconds=args.seconds, offline=args.offline, seed=args.seed, client=client, quiet=args.quiet)
        return 0

    if args.command == "leaderboard":
        try:
            print_leaderboard(client, args.limit, args.mode)
        except (ApiError, requests.RequestException) as e:
            logger.error(f"Failed to load leaderboard: {e}")
            return 1
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
