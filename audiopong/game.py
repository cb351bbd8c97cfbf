"""
The authoritative game: one owner for config, match state and sessions

Every mutation goes through a Game method. Methods are synchronous and
return an outbox of envelopes for the transport layer to deliver, so a
state snapshot is always taken between mutations, never during one.
"""
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .messages import (
    ClientMessage, Hello, MaxRef, SetMaxRef, VolumeRaw,
    assign_message, state_message,
)
from .normalize import DEFAULT_CEILING, clamp_ceiling, clamp_raw, normalize
from .sessions import Notice, Session, SessionRegistry
from .simulation import advance, reset_match
from .state import SIDES, GameConfig, GameState

logger = logging.getLogger("audio_pong")


@dataclass
class Envelope:
    """Outbound message; target None means every open socket"""
    target: Optional[str]
    message: Dict[str, Any]


Outbox = List[Envelope]


class Game:
    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or GameConfig()
        self.state = GameState.initial(self.config)
        self.sessions = SessionRegistry()
        self.rng = rng or random.Random()
        self._handlers = {
            Hello: self._on_hello,
            VolumeRaw: self._on_volume_raw,
            MaxRef: self._on_max_ref,
            SetMaxRef: self._on_set_max_ref,
        }

    # ------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        return state_message(self.state, self.config)

    def _broadcast_state(self) -> Envelope:
        return Envelope(None, self.snapshot())

    # ------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------

    def connect(self, ws: Any) -> Tuple[Session, Outbox]:
        session = self.sessions.connect(ws, paddle_y=self.config.court_height / 2)
        logger.info("🔌 %s connected (total: %d)", session.client_id, len(self.sessions))
        return session, [Envelope(session.client_id, assign_message("spectator"))]

    def disconnect(self, client_id: str) -> Outbox:
        held = self.sessions.side_of(client_id)
        notices = self.sessions.disconnect(client_id)
        logger.info("🔌 %s disconnected (remaining: %d)", client_id, len(self.sessions))
        return self._apply_notices(notices, released=held)

    def _apply_notices(self, notices: List[Notice], released: Optional[str] = None) -> Outbox:
        # A released side nobody backfilled falls back to silence
        if released is not None and not any(s == released for _, s in notices):
            self._refresh_side(released)
        outbox: Outbox = []
        for client_id, side in notices:
            if side in SIDES:
                self._refresh_side(side)
                logger.info("🎮 %s assigned %s", client_id, side)
            outbox.append(Envelope(client_id, assign_message(side)))
        return outbox

    # ------------------------------------------------------------
    # Inbound messages
    # ------------------------------------------------------------

    def handle(self, client_id: str, message: ClientMessage) -> Outbox:
        session = self.sessions.get(client_id)
        if session is None:
            return []
        return self._handlers[type(message)](session, message)

    def _on_hello(self, session: Session, message: Hello) -> Outbox:
        session.player.name = message.name
        held = self.sessions.side_of(session.client_id)
        notices = self.sessions.declare_role(session.client_id, message.role)
        if self.sessions.side_of(session.client_id) == held:
            held = None
        return self._apply_notices(notices, released=held)

    def _on_volume_raw(self, session: Session, message: VolumeRaw) -> Outbox:
        session.player.volume_raw = clamp_raw(message.value)
        side = self.sessions.side_of(session.client_id)
        if side is not None:
            self._refresh_side(side)
        return []

    def _on_max_ref(self, session: Session, message: MaxRef) -> Outbox:
        session.player.max_ref = clamp_ceiling(message.value)
        side = self.sessions.side_of(session.client_id)
        if side is not None:
            self._refresh_side(side)
        return [self._broadcast_state()]

    def _on_set_max_ref(self, session: Session, message: SetMaxRef) -> Outbox:
        holder = self.sessions.holder(message.side)
        if holder is not None:
            holder.player.max_ref = clamp_ceiling(message.value)
            self._refresh_side(message.side)
        return [self._broadcast_state()]

    def _side_inputs(self, side: str) -> Tuple[float, float]:
        holder = self.sessions.holder(side)
        if holder is None:
            return 0.0, DEFAULT_CEILING
        return holder.player.volume_raw, holder.player.max_ref

    def _refresh_side(self, side: str) -> None:
        raw, ceiling = self._side_inputs(side)
        self.state.set_side(side, raw, ceiling, normalize(raw, ceiling))

    # ------------------------------------------------------------
    # Simulation tick
    # ------------------------------------------------------------

    def tick(self, dt: float) -> Outbox:
        state = self.state
        state.left_connected = self.sessions.is_connected("left")
        state.right_connected = self.sessions.is_connected("right")

        if state.running:
            for side in SIDES:
                self._refresh_side(side)
            scorer = advance(self.config, state, dt, self.rng)
            for side in SIDES:
                holder = self.sessions.holder(side)
                if holder is not None:
                    holder.player.paddle_y = getattr(state, f"{side}_paddle_y")
            if scorer is not None:
                logger.info(
                    "🏓 %s scored (hearts %d-%d)",
                    scorer, state.hearts_left, state.hearts_right,
                )
                if not state.running:
                    logger.info("🏁 Match over, %s wins", scorer)

        return [self._broadcast_state()]

    # ------------------------------------------------------------
    # Control plane
    # ------------------------------------------------------------

    def start(self) -> bool:
        if not self.state.running:
            self.state.running = True
            logger.info("▶️ Match started")
        return self.state.running

    def pause(self) -> bool:
        self.state.running = False
        return self.state.running

    def reset(self) -> None:
        reset_match(self.config, self.state, self.rng)
        logger.info("🔄 Match reset")

    def update_config(self, payload: Dict[str, Any]) -> GameConfig:
        self.config = self.config.merged(payload)
        limit = self.config.hearts_per_player
        self.state.hearts_left = min(self.state.hearts_left, limit)
        self.state.hearts_right = min(self.state.hearts_right, limit)
        return self.config
