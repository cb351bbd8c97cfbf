"""
HTTP control plane and websocket game channel
"""
import logging
import os
from pathlib import Path

from aiohttp import web, WSMsgType

from .broadcast import deliver
from .game import Game
from .messages import MalformedMessage, parse_message

logger = logging.getLogger("audio_pong")

STATIC_DIR = Path(os.getenv('AUDIOPONG_STATIC_DIR', './public'))

game_key = web.AppKey("game", Game)

# ============================================================
# WEBSOCKET GAME CHANNEL
# ============================================================

async def ws_game(request: web.Request) -> web.WebSocketResponse:
    """One connection per player, board, calibration view or spectator"""
    game = request.app[game_key]
    ws = web.WebSocketResponse()
    await ws.prepare(request)

    session, outbox = game.connect(ws)
    client_id = session.client_id
    try:
        await deliver(game, outbox)
        async for msg in ws:
            if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                try:
                    message = parse_message(msg.data)
                except MalformedMessage as e:
                    logger.debug(f"Dropped message from {client_id}: {e}")
                    continue
                await deliver(game, game.handle(client_id, message))
            elif msg.type == WSMsgType.ERROR:
                logger.debug(f"WebSocket error for {client_id}: {ws.exception()}")
                break
    finally:
        await deliver(game, game.disconnect(client_id))

    return ws


async def index(request: web.Request) -> web.StreamResponse:
    """Board page, or the game channel when the request is a websocket upgrade"""
    if request.headers.get("Upgrade", "").lower() == "websocket":
        return await ws_game(request)
    index_file = STATIC_DIR / 'index.html'
    if not index_file.is_file():
        raise web.HTTPNotFound()
    return web.FileResponse(index_file)

# ============================================================
# CONFIGURATION
# ============================================================

async def api_config_get(request: web.Request) -> web.Response:
    return web.json_response(request.app[game_key].config.to_dict())


async def api_config_update(request: web.Request) -> web.Response:
    """Merge a partial config; invalid fields are dropped, never rejected"""
    game = request.app[game_key]
    try:
        data = await request.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        data = {}
    config = game.update_config(data)
    logger.info("⚙️ Config updated: %s", config.to_dict())
    return web.json_response(config.to_dict())

# ============================================================
# MATCH CONTROL
# ============================================================

async def api_game_start(request: web.Request) -> web.Response:
    return web.json_response({"running": request.app[game_key].start()})


async def api_game_pause(request: web.Request) -> web.Response:
    return web.json_response({"running": request.app[game_key].pause()})


async def api_game_reset(request: web.Request) -> web.Response:
    request.app[game_key].reset()
    return web.json_response({"ok": True})
