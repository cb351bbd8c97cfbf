"""
Loudness normalization: raw microphone RMS -> [0, 1] paddle control
"""

DEFAULT_CEILING = 0.6
MAX_RAW = 1.5
MIN_CEILING = 0.02
MAX_CEILING = 1.5


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_raw(value: float) -> float:
    """Clip spikes above 1.5 and negative noise"""
    return clamp(value, 0.0, MAX_RAW)


def clamp_ceiling(value: float) -> float:
    """Keep the reference ceiling away from zero"""
    return clamp(value, MIN_CEILING, MAX_CEILING)


def normalize(raw: float, ceiling: float) -> float:
    """
    Convert a raw loudness sample into a control value in [0, 1]

    Args:
        raw: Raw RMS sample, already clamped to [0, 1.5]
        ceiling: Reference ceiling, already clamped to [0.02, 1.5]

    Returns:
        raw / ceiling clamped to [0, 1]
    """
    return clamp(raw / ceiling, 0.0, 1.0)


def paddle_y(volume: float, court_height: float, paddle_height: float) -> float:
    """Paddle centre Y for a normalized volume. Louder is higher (smaller Y)."""
    return (1 - volume) * (court_height - paddle_height) + paddle_height / 2
