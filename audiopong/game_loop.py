"""
Fixed-rate simulation loop, run as a background task of the aiohttp app
"""
import asyncio
import logging
import os
import time

from .broadcast import deliver
from .game import Game

logger = logging.getLogger("audio_pong")

TICK_HZ = float(os.environ.get("AUDIOPONG_TICK_HZ", "60"))


async def run_tick_loop(game: Game, tick_hz: float = TICK_HZ) -> None:
    """
    Tick forever at tick_hz.

    dt is the measured wall-clock time since the previous tick. When a tick
    overruns, the next one is scheduled from now instead of catching up.
    """
    interval = 1.0 / tick_hz
    last_tick = time.perf_counter()
    next_tick = last_tick + interval
    while True:
        now = time.perf_counter()
        if now < next_tick:
            await asyncio.sleep(next_tick - now)
            now = time.perf_counter()
        dt = now - last_tick
        last_tick = now
        try:
            await deliver(game, game.tick(dt))
        except Exception:
            logger.exception("Tick failed")
        next_tick += interval
        now = time.perf_counter()
        if now >= next_tick:
            next_tick = now
