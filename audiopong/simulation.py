"""
Fixed-tick physics for ball, paddles and scoring
"""
import random
from typing import Optional

from .normalize import paddle_y
from .state import GameConfig, GameState, Vector

# Distance of each paddle's outer face from its court edge
PADDLE_INSET = 40


def reset_ball(config: GameConfig, state: GameState, direction: int, rng: random.Random) -> None:
    """Put the ball back at centre, heading along direction (+1 right, -1 left)"""
    speed = config.ball_speed
    state.ball_pos = Vector(config.court_width / 2, config.court_height / 2)
    state.ball_vel = Vector(speed * direction, speed * rng.uniform(-0.3, 0.3))


def reset_match(config: GameConfig, state: GameState, rng: random.Random) -> None:
    state.hearts_left = config.hearts_per_player
    state.hearts_right = config.hearts_per_player
    state.left_paddle_y = config.court_height / 2
    state.right_paddle_y = config.court_height / 2
    reset_ball(config, state, 1 if rng.random() < 0.5 else -1, rng)
    state.running = False


def _bounce_walls(config: GameConfig, state: GameState) -> None:
    r = config.ball_radius
    if state.ball_pos.y <= r:
        state.ball_pos.y = r
        state.ball_vel.y = abs(state.ball_vel.y)
    elif state.ball_pos.y >= config.court_height - r:
        state.ball_pos.y = config.court_height - r
        state.ball_vel.y = -abs(state.ball_vel.y)


def _bounce_paddles(config: GameConfig, state: GameState) -> None:
    r = config.ball_radius
    w = config.paddle_width
    half = config.paddle_height / 2
    accel = config.ball_accel_on_bounce
    ball = state.ball_pos
    left_x = PADDLE_INSET
    right_x = config.court_width - PADDLE_INSET

    if left_x - r <= ball.x <= left_x + w + r and abs(ball.y - state.left_paddle_y) <= half:
        ball.x = left_x + w + 1
        state.ball_vel.x = abs(state.ball_vel.x) * accel
        state.ball_vel.y *= accel

    if right_x - w - r <= ball.x <= right_x + r and abs(ball.y - state.right_paddle_y) <= half:
        ball.x = right_x - w - 1
        state.ball_vel.x = -abs(state.ball_vel.x) * accel
        state.ball_vel.y *= accel


def _score(config: GameConfig, state: GameState, rng: random.Random) -> Optional[str]:
    if state.ball_pos.x < 0:
        state.hearts_left = max(0, state.hearts_left - 1)
        if state.hearts_left == 0:
            state.running = False
        reset_ball(config, state, -1, rng)
        return "right"
    if state.ball_pos.x > config.court_width:
        state.hearts_right = max(0, state.hearts_right - 1)
        if state.hearts_right == 0:
            state.running = False
        reset_ball(config, state, 1, rng)
        return "left"
    return None


def advance(config: GameConfig, state: GameState, dt: float, rng: random.Random) -> Optional[str]:
    """
    Step a running match by dt seconds.

    Volumes must already be refreshed for this tick. Paddles follow the
    normalized volumes directly, then the ball is integrated, bounced off
    walls and paddles, and checked for a goal.

    Returns:
        The side that scored this tick, or None
    """
    state.left_paddle_y = paddle_y(state.left_volume, config.court_height, config.paddle_height)
    state.right_paddle_y = paddle_y(state.right_volume, config.court_height, config.paddle_height)

    state.ball_pos.x += state.ball_vel.x * dt
    state.ball_pos.y += state.ball_vel.y * dt

    _bounce_walls(config, state)
    _bounce_paddles(config, state)
    return _score(config, state, rng)
