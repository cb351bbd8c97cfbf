"""
Websocket message shapes

Inbound frames are decoded into one of four message classes; anything else
raises MalformedMessage. Outbound messages are plain dicts ready for json.
"""
import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .state import ROLES, SIDES, GameConfig, GameState


class MalformedMessage(ValueError):
    """Inbound frame that is not one of the known client messages"""


@dataclass(frozen=True)
class Hello:
    role: str = "spectator"
    name: Optional[str] = None


@dataclass(frozen=True)
class VolumeRaw:
    value: float


@dataclass(frozen=True)
class MaxRef:
    value: float


@dataclass(frozen=True)
class SetMaxRef:
    side: str
    value: float


ClientMessage = Union[Hello, VolumeRaw, MaxRef, SetMaxRef]


def _number(data: Dict[str, Any]) -> float:
    value = data.get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedMessage("value must be a number")
    try:
        number = float(value)
    except OverflowError as e:
        raise MalformedMessage("value out of range") from e
    if not math.isfinite(number):
        raise MalformedMessage("value must be finite")
    return number


def _hello(data: Dict[str, Any]) -> Hello:
    role = data.get("role")
    if role is None:
        role = "spectator"
    if role not in ROLES:
        raise MalformedMessage(f"unknown role {role!r}")
    name = data.get("name")
    if name is not None and not isinstance(name, str):
        raise MalformedMessage("name must be a string")
    return Hello(role=role, name=name)


def _set_max_ref(data: Dict[str, Any]) -> SetMaxRef:
    side = data.get("side")
    if side not in SIDES:
        raise MalformedMessage(f"unknown side {side!r}")
    return SetMaxRef(side=side, value=_number(data))


PARSERS = {
    "hello": _hello,
    "volumeRaw": lambda data: VolumeRaw(_number(data)),
    "maxRef": lambda data: MaxRef(_number(data)),
    "setMaxRef": _set_max_ref,
}


def parse_message(text: Union[str, bytes]) -> ClientMessage:
    """Decode one websocket frame; binary frames must hold UTF-8 json"""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise MalformedMessage(f"invalid json: {e}") from e
    if not isinstance(data, dict):
        raise MalformedMessage("message must be an object")
    msg_type = data.get("type")
    parser = PARSERS.get(msg_type) if isinstance(msg_type, str) else None
    if parser is None:
        raise MalformedMessage(f"unknown message type {msg_type!r}")
    return parser(data)


def state_message(state: GameState, config: GameConfig) -> Dict[str, Any]:
    return {"type": "state", "state": state.to_dict(), "config": config.to_dict()}


def assign_message(side: str) -> Dict[str, Any]:
    return {"type": "assign", "side": side}
