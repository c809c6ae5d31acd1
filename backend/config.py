"""
Runtime settings for the snake backend.

Values come from the environment (a local .env file is honoured):
- SNAKE_API_URL: base URL of the account/leaderboard service
- SESSION_TICK_MS: session loop cadence in milliseconds
- SPECTATOR_TICK_MS: spectator loop cadence in milliseconds
- ACTIVE_PLAYERS_REFRESH_SECONDS: how often the watch view reloads its player list
- SPECTATOR_TURN_PROBABILITY: chance per tick of a synthetic turn in the watch view
- API_TIMEOUT_SECONDS: HTTP timeout for service calls
- LOG_LEVEL: logging level name for the entry points
- SNAKE_USERNAME / SNAKE_PASSWORD: optional credentials used by the CLI to report scores
"""

import os
from dotenv import load_dotenv

load_dotenv()

SNAKE_API_URL = os.getenv('SNAKE_API_URL', 'http://localhost:8000/api/v1')

SESSION_TICK_MS = int(os.getenv('SESSION_TICK_MS', '150'))
SPECTATOR_TICK_MS = int(os.getenv('SPECTATOR_TICK_MS', '200'))
ACTIVE_PLAYERS_REFRESH_SECONDS = float(os.getenv('ACTIVE_PLAYERS_REFRESH_SECONDS', '3'))
SPECTATOR_TURN_PROBABILITY = float(os.getenv('SPECTATOR_TURN_PROBABILITY', '0.1'))

API_TIMEOUT_SECONDS = float(os.getenv('API_TIMEOUT_SECONDS', '10'))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

SNAKE_USERNAME = os.getenv('SNAKE_USERNAME')
SNAKE_PASSWORD = os.getenv('SNAKE_PASSWORD')
