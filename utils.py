# utils.py

import random

from engine import ReplacementPolicy

MIN_FRAMES = 1
MAX_FRAMES = 10
DEFAULT_FRAMES = 3

DEFAULT_REFERENCE = "7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 1, 5, 2, 6, 7, 1, 8, 9, 4, 1, 5, 3, 2"

# (label, reference string, frame count)
PRESETS = [
    ("Preset 1", "1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5", 3),
    ("Preset 2", DEFAULT_REFERENCE, 4),
]

POLICY_COLORS = {
    ReplacementPolicy.FIFO: "#3b82f6",     # blue
    ReplacementPolicy.LRU: "#8b5cf6",      # violet
    ReplacementPolicy.OPTIMAL: "#10b981",  # emerald
    ReplacementPolicy.CLOCK: "#f59e0b",    # amber
}


def get_color(status, active=True):
    """Return a cell color for a HIT/FAULT step (None for an empty frame)."""
    if status is None:
        return "#1e293b"
    if not active:
        return "#334155"
    return "#22c55e" if status == "HIT" else "#f43f5e"


def get_policy_color(policy):
    return POLICY_COLORS.get(policy, "#cbd5e1")


def clamp_frame_count(value):
    """Clamp user input to [MIN_FRAMES, MAX_FRAMES]; junk falls back to MIN_FRAMES."""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return MIN_FRAMES
    return max(MIN_FRAMES, min(MAX_FRAMES, value))


def generate_reference_string(rng=None):
    """Random reference string of 20-29 pages drawn from 0-9."""
    rng = rng or random
    length = 20 + rng.randint(0, 9)
    return ", ".join(str(rng.randint(0, 9)) for _ in range(length))
