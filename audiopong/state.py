"""
In-memory game state: config, authoritative match state and per-socket players
"""
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .normalize import DEFAULT_CEILING

ROLES = ("player", "board", "calibrate", "spectator")
SIDES = ("left", "right")

# wire key -> (attribute, lower bound inclusive, upper cap)
CONFIG_BOUNDS = {
    "courtWidth": ("court_width", 200, 4000),
    "courtHeight": ("court_height", 200, 3000),
    "paddleWidth": ("paddle_width", 4, 100),
    "paddleHeight": ("paddle_height", 20, 600),
    "ballSpeed": ("ball_speed", 50, 2000),
    "ballAccelOnBounce": ("ball_accel_on_bounce", 1, 1.5),
    "heartsPerPlayer": ("hearts_per_player", 1, 20),
    "ballRadius": ("ball_radius", 2, 40),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sanitize_config(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keep only config fields that pass their type and range checks

    Fields below their lower bound (or not numbers at all) are dropped,
    fields above the upper bound are capped. Returns attribute names.
    """
    output: Dict[str, Any] = {}
    for key, (attr, lower, upper) in CONFIG_BOUNDS.items():
        value = payload.get(key)
        if not _is_number(value):
            continue
        try:
            number = float(value)
        except OverflowError:
            # integers too large for a float
            number = value = math.inf if value > 0 else -math.inf
        if math.isnan(number) or number < lower:
            continue
        if attr == "hearts_per_player":
            if math.isinf(number):
                output[attr] = upper
            else:
                output[attr] = min(int(math.floor(value)), upper)
        else:
            output[attr] = min(value, upper)
    return output


@dataclass
class GameConfig:
    court_width: float = 1000
    court_height: float = 600
    paddle_width: float = 16
    paddle_height: float = 120
    ball_speed: float = 380
    ball_accel_on_bounce: float = 1.05
    hearts_per_player: int = 5
    ball_radius: float = 8

    def merged(self, payload: Dict[str, Any]) -> "GameConfig":
        """Return a copy with the sanitized fields of a partial update applied"""
        return replace(self, **sanitize_config(payload))

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, (attr, _, _) in CONFIG_BOUNDS.items()}


@dataclass
class Vector:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class GameState:
    ball_pos: Vector
    ball_vel: Vector
    left_paddle_y: float
    right_paddle_y: float
    hearts_left: int
    hearts_right: int
    running: bool = False
    left_volume: float = 0.0
    right_volume: float = 0.0
    left_max_ref: float = DEFAULT_CEILING
    right_max_ref: float = DEFAULT_CEILING
    left_volume_raw: float = 0.0
    right_volume_raw: float = 0.0
    left_connected: bool = False
    right_connected: bool = False

    @classmethod
    def initial(cls, config: GameConfig) -> "GameState":
        return cls(
            ball_pos=Vector(config.court_width / 2, config.court_height / 2),
            ball_vel=Vector(config.ball_speed, config.ball_speed * 0.3),
            left_paddle_y=config.court_height / 2,
            right_paddle_y=config.court_height / 2,
            hearts_left=config.hearts_per_player,
            hearts_right=config.hearts_per_player,
        )

    def set_side(self, side: str, raw: float, ceiling: float, volume: float) -> None:
        """Write one side's raw sample, ceiling and normalized volume together"""
        setattr(self, f"{side}_volume_raw", raw)
        setattr(self, f"{side}_max_ref", ceiling)
        setattr(self, f"{side}_volume", volume)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ballPos": self.ball_pos.to_dict(),
            "ballVel": self.ball_vel.to_dict(),
            "leftPaddleY": self.left_paddle_y,
            "rightPaddleY": self.right_paddle_y,
            "heartsLeft": self.hearts_left,
            "heartsRight": self.hearts_right,
            "running": self.running,
            "leftVolume": self.left_volume,
            "rightVolume": self.right_volume,
            "leftMaxRef": self.left_max_ref,
            "rightMaxRef": self.right_max_ref,
            "leftVolumeRaw": self.left_volume_raw,
            "rightVolumeRaw": self.right_volume_raw,
            "leftConnected": self.left_connected,
            "rightConnected": self.right_connected,
        }


@dataclass
class PlayerState:
    id: str
    name: Optional[str] = None
    volume_raw: float = 0.0
    max_ref: float = DEFAULT_CEILING
    paddle_y: float = 0.0
