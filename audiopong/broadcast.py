"""
Snapshot fan-out to websocket clients
"""
import json
import logging
from typing import Any, Dict, Iterable

from .game import Game, Outbox

logger = logging.getLogger("audio_pong")


async def _send(ws: Any, text: str) -> bool:
    if ws.closed:
        return False
    try:
        await ws.send_str(text)
    except Exception as e:
        logger.debug(f"Failed to send to WebSocket: {e}")
        return False
    return True


async def broadcast(sockets: Iterable[Any], message: Dict[str, Any]) -> int:
    """Serialize once and send the same text to every open socket"""
    text = json.dumps(message)
    delivered = 0
    for ws in list(sockets):
        if await _send(ws, text):
            delivered += 1
    return delivered


async def send_to(ws: Any, message: Dict[str, Any]) -> bool:
    return await _send(ws, json.dumps(message))


async def deliver(game: Game, outbox: Outbox) -> None:
    """Route envelopes from the game to their sockets"""
    for envelope in outbox:
        if envelope.target is None:
            await broadcast(game.sessions.open_sockets(), envelope.message)
            continue
        session = game.sessions.get(envelope.target)
        if session is not None:
            await send_to(session.ws, envelope.message)
