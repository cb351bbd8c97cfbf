"""
Session registry: connected sockets, their roles and the left/right slots
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .state import SIDES, PlayerState

logger = logging.getLogger("audio_pong")

# (client_id, side) where side is "left", "right" or "spectator"
Notice = Tuple[str, str]


@dataclass
class Session:
    client_id: str
    ws: Any
    player: PlayerState
    role: str = "spectator"

    @property
    def is_open(self) -> bool:
        return not self.ws.closed


class SessionRegistry:
    """
    Tracks every connected socket in registration order.

    A slot is a relation side -> client_id. Only sessions with role
    "player" hold slots, and never both at once. Methods return the
    assignment notices the caller must unicast.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._slots: Dict[str, Optional[str]] = {side: None for side in SIDES}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, client_id: str) -> Optional[Session]:
        return self._sessions.get(client_id)

    def open_sockets(self) -> List[Any]:
        return [s.ws for s in self._sessions.values() if s.is_open]

    @property
    def left_id(self) -> Optional[str]:
        return self._slots["left"]

    @property
    def right_id(self) -> Optional[str]:
        return self._slots["right"]

    def holder(self, side: str) -> Optional[Session]:
        client_id = self._slots[side]
        return self._sessions.get(client_id) if client_id else None

    def side_of(self, client_id: str) -> Optional[str]:
        for side, holder_id in self._slots.items():
            if holder_id == client_id:
                return side
        return None

    def is_connected(self, side: str) -> bool:
        session = self.holder(side)
        return bool(session and session.role == "player" and session.is_open)

    def connect(self, ws: Any, paddle_y: float = 0.0) -> Session:
        client_id = "client_" + secrets.token_hex(5)
        while client_id in self._sessions:
            client_id = "client_" + secrets.token_hex(5)
        session = Session(
            client_id=client_id,
            ws=ws,
            player=PlayerState(id=client_id, paddle_y=paddle_y),
        )
        self._sessions[client_id] = session
        return session

    def declare_role(self, client_id: str, role: str) -> List[Notice]:
        """
        Record a socket's declared role and settle its slot.

        A player keeps a slot it already holds, otherwise claims left, then
        right. With both slots taken it is told "spectator" but keeps the
        player role, so it stays eligible for backfill.
        """
        session = self._sessions.get(client_id)
        if session is None:
            return []
        session.role = role

        if role != "player":
            released = self._release(client_id)
            return self._backfill() if released else []

        side = self.side_of(client_id)
        if side is None:
            for candidate in SIDES:
                if self._slots[candidate] is None:
                    self._slots[candidate] = client_id
                    side = candidate
                    break
        return [(client_id, side or "spectator")]

    def disconnect(self, client_id: str) -> List[Notice]:
        session = self._sessions.pop(client_id, None)
        if session is None:
            return []
        self._release(client_id)
        return self._backfill()

    def _release(self, client_id: str) -> bool:
        released = False
        for side in SIDES:
            if self._slots[side] == client_id:
                self._slots[side] = None
                released = True
        return released

    def _backfill(self) -> List[Notice]:
        # Left first, then right; first player-role session not holding the other slot.
        notices: List[Notice] = []
        for side in SIDES:
            if self._slots[side] is not None:
                continue
            for session in self._sessions.values():
                if session.role == "player" and self.side_of(session.client_id) is None:
                    self._slots[side] = session.client_id
                    notices.append((session.client_id, side))
                    logger.info("🔁 %s backfilled %s slot", session.client_id, side)
                    break
        return notices
