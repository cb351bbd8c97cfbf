#!/usr/bin/env python3
"""
AudioPong - Entry Point
Authoritative game server: websocket channel + control API + tick loop
"""
import asyncio
import contextlib
import logging
import os
from typing import Optional

from aiohttp import web

from audiopong.api import (
    STATIC_DIR, game_key, index, ws_game,
    api_config_get, api_config_update,
    api_game_start, api_game_pause, api_game_reset,
)
from audiopong.game import Game
from audiopong.game_loop import TICK_HZ, run_tick_loop

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("audio_pong")

tick_task_key = web.AppKey("tick_task", asyncio.Task)


async def start_tick_loop(app: web.Application) -> None:
    app[tick_task_key] = asyncio.create_task(run_tick_loop(app[game_key], TICK_HZ))


async def stop_tick_loop(app: web.Application) -> None:
    task = app.get(tick_task_key)
    if task:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


def create_app(game: Optional[Game] = None, run_loop: bool = True) -> web.Application:
    """Create and configure the aiohttp application"""
    app = web.Application()
    app[game_key] = game or Game()

    # Game channel (the browser clients connect to the page origin)
    app.router.add_get("/", index)
    app.router.add_get("/ws", ws_game)

    # Control plane
    app.router.add_get("/api/config", api_config_get)
    app.router.add_post("/api/config", api_config_update)
    app.router.add_post("/api/game/start", api_game_start)
    app.router.add_post("/api/game/pause", api_game_pause)
    app.router.add_post("/api/game/reset", api_game_reset)

    # Static files
    if STATIC_DIR.is_dir():
        app.router.add_static('/static', STATIC_DIR, name='static')

    if run_loop:
        app.on_startup.append(start_tick_loop)
        app.on_cleanup.append(stop_tick_loop)

    logger.info("🏓 AudioPong server ready • %g Hz tick", TICK_HZ)
    return app


def main():
    app = create_app()
    port = int(os.environ.get("PORT", 3000))
    host = os.environ.get("SERVER_HOST", "0.0.0.0")

    logger.info(f"🚀 Starting server on {host}:{port}")
    web.run_app(app, host=host, port=port)


if __name__ == "__main__":
    main()
