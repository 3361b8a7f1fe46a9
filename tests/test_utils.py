"""Tests for the presentation helpers."""

import random

import pytest

from engine import ReplacementPolicy, parse_reference_string
from utils import (
    MAX_FRAMES,
    MIN_FRAMES,
    PRESETS,
    clamp_frame_count,
    generate_reference_string,
    get_color,
    get_policy_color,
)


class TestClampFrameCount:
    """The UI clamps frame counts before they reach the engine."""

    @pytest.mark.parametrize("value, expected", [
        (0, MIN_FRAMES),
        (-5, MIN_FRAMES),
        (3, 3),
        (15, MAX_FRAMES),
        ("4", 4),
        ("abc", MIN_FRAMES),
        (None, MIN_FRAMES),
    ])
    def test_clamp(self, value, expected) -> None:
        assert clamp_frame_count(value) == expected


class TestGenerateReferenceString:
    """Random reference strings parse back into 20-29 pages from 0-9."""

    def test_length_and_range(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            pages = parse_reference_string(generate_reference_string(rng))
            assert 20 <= len(pages) <= 29
            assert all(0 <= p <= 9 for p in pages)

    def test_seeded_generator_is_reproducible(self) -> None:
        first = generate_reference_string(random.Random(42))
        second = generate_reference_string(random.Random(42))
        assert first == second


class TestColors:

    def test_policy_colors_are_distinct(self) -> None:
        colors = {get_policy_color(p) for p in ReplacementPolicy.ALL}
        assert len(colors) == len(ReplacementPolicy.ALL)

    def test_unknown_policy_color(self) -> None:
        assert get_policy_color("MRU") == "#cbd5e1"

    def test_status_colors(self) -> None:
        assert get_color("HIT") != get_color("FAULT")
        assert get_color(None) not in (get_color("HIT"), get_color("FAULT"))
        assert get_color("FAULT", active=False) == get_color("HIT", active=False)


def test_presets_are_valid() -> None:
    for label, reference, frames in PRESETS:
        assert parse_reference_string(reference)
        assert MIN_FRAMES <= frames <= MAX_FRAMES
