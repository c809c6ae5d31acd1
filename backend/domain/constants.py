"""
Game constants for the snake engine.
"""

# Movement directions
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

OPPOSITE_DIRECTIONS = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Unit step per direction. y grows downwards, so UP => y - 1
DIRECTION_DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Boundary modes (wire names used by the leaderboard service)
WRAP = "pass-through"
WALLED = "walls"
VALID_MODES = {WRAP, WALLED}

# Game settings
GRID_SIZE = 20
FOOD_REWARD = 10
INITIAL_SNAKE = [(10, 10), (9, 10), (8, 10)]
INITIAL_DIRECTION = RIGHT
