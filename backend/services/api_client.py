"""
HTTP client for the account / leaderboard service.

One client instance is one authenticated context: it carries the bearer
token for a single player session and is handed explicitly to the loops
that need it.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

import config
from domain.constants import VALID_MODES
from domain.records import ActivePlayer, LeaderboardEntry, User

logger = logging.getLogger(__name__)

ALL_MODES = "all"


class ApiError(Exception):
    """Raised when the service answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthenticatedError(ApiError):
    """Raised for calls that need a logged-in user when there is none."""


def _error_message(response: requests.Response) -> str:
    """
    Pull a human-readable message out of an error response.

    The service nests it as detail.error.message, or puts a plain string
    in detail.
    """
    try:
        body = response.json()
    except ValueError:
        return "Request failed"

    detail = body.get('detail') if isinstance(body, dict) else None
    if isinstance(detail, dict):
        error = detail.get('error')
        if isinstance(error, dict) and error.get('message'):
            return error['message']
    if isinstance(detail, str) and detail:
        return detail
    return "Request failed"


class SnakeApiClient:
    """
    Client for the external account/leaderboard service.

    Args:
        base_url: API root, e.g. http://localhost:8000/api/v1
        timeout: per-request timeout in seconds
        session: optional requests.Session (one is created if omitted)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = (base_url or config.SNAKE_API_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.token: Optional[str] = None
        self.user: Optional[User] = None

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        return self.session.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            timeout=self.timeout,
            **kwargs
        )

    def _raise_for_error(self, response: requests.Response) -> None:
        if response.ok:
            return
        message = _error_message(response)
        if response.status_code == 401:
            raise UnauthenticatedError(message, response.status_code)
        raise ApiError(message, response.status_code)

    def _store_auth(self, data: Dict[str, Any]) -> User:
        self.token = data['token']
        self.user = User.from_dict(data['user'])
        return self.user

    def clear_token(self) -> None:
        self.token = None
        self.user = None

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str) -> User:
        response = self._request('POST', '/auth/login', json={
            'username': username,
            'password': password,
        })
        self._raise_for_error(response)
        user = self._store_auth(response.json())
        logger.info(f"Logged in as {user.username}")
        return user

    def signup(self, username: str, email: str, password: str) -> User:
        response = self._request('POST', '/auth/signup', json={
            'username': username,
            'email': email,
            'password': password,
        })
        self._raise_for_error(response)
        user = self._store_auth(response.json())
        logger.info(f"Signed up as {user.username}")
        return user

    def logout(self) -> None:
        """Log out; the token is only dropped if the service accepts the call."""
        response = self._request('POST', '/auth/logout')
        if response.ok:
            self.clear_token()

    def get_current_user(self) -> Optional[User]:
        """
        Return the logged-in user, or None. Any failure clears the token.
        """
        if not self.token:
            return None

        try:
            response = self._request('GET', '/auth/me')
        except requests.RequestException as e:
            logger.warning(f"Could not fetch current user: {e}")
            self.clear_token()
            return None

        if not response.ok:
            self.clear_token()
            return None

        self.user = User.from_dict(response.json())
        return self.user

    # -------------------------------------------------------------------------
    # Leaderboard
    # -------------------------------------------------------------------------

    def get_leaderboard(self, limit: int = 10, mode_filter: str = ALL_MODES) -> List[LeaderboardEntry]:
        """
        Fetch the top leaderboard entries, highest score first.

        Args:
            limit: maximum number of entries
            mode_filter: "all" or one boundary mode
        """
        if mode_filter != ALL_MODES and mode_filter not in VALID_MODES:
            raise ValueError(f"Invalid mode filter: {mode_filter!r}")

        params: Dict[str, Any] = {'limit': limit}
        if mode_filter != ALL_MODES:
            params['gameMode'] = mode_filter

        response = self._request('GET', '/leaderboard', params=params)
        if not response.ok:
            raise ApiError("Failed to fetch leaderboard", response.status_code)

        entries = [LeaderboardEntry.from_dict(e) for e in response.json().get('entries', [])]
        return sorted(entries, key=lambda e: e.score, reverse=True)

    def report_score(self, score: int, mode: str) -> LeaderboardEntry:
        """
        Submit a final score for the logged-in user.

        Raises:
            UnauthenticatedError: if no user is logged in
            ApiError: if the service rejects the submission
            ValueError: for a negative score or unknown mode
        """
        if score < 0:
            raise ValueError(f"Score must be non-negative, got {score}")
        if mode not in VALID_MODES:
            raise ValueError(f"Invalid boundary mode: {mode!r}")
        if not self.is_authenticated:
            raise UnauthenticatedError("Not authenticated")

        response = self._request('POST', '/leaderboard', json={
            'score': score,
            'game_mode': mode,
        })
        self._raise_for_error(response)
        return LeaderboardEntry.from_dict(response.json())

    # -------------------------------------------------------------------------
    # Watch
    # -------------------------------------------------------------------------

    def get_active_players(self) -> List[ActivePlayer]:
        """
        Fetch the players currently in a game, with their last known state.
        Entries with an unreadable game state are skipped.
        """
        response = self._request('GET', '/watch/active')
        if not response.ok:
            raise ApiError("Failed to fetch active players", response.status_code)

        players = []
        for data in response.json().get('players', []):
            try:
                players.append(ActivePlayer.from_dict(data))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping active player with invalid payload: {e}")
        return players
