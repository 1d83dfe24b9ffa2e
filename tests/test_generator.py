"""Tests for the pattern generator.

Validates the seeded permutation (bit-exact mulberry32 stream), the ring
layout, per-character darkness sampling and the golden reference pattern.
"""

from __future__ import annotations

import math
from collections import Counter

import pytest

from eightsix.configs.loader import GeneratorConfig
from eightsix.pattern.generator import (
    DOT_COUNT,
    RING_COUNTS,
    Dot,
    coerce_seed,
    generate_dots,
    generate_from_config,
    mulberry32,
    ring_positions,
    seeded_permutation,
)
from eightsix.utils.color import token_darkness

# First ten entries of the spatial map for seed 12345
GOLDEN_PERMUTATION_PREFIX = [58, 11, 14, 55, 44, 59, 56, 39, 68, 22]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def golden_dots() -> list[Dot]:
    return generate_dots("eightsix", 0.045, 0.85, 12345)


# ---------------------------------------------------------------------------
# PRNG and permutation
# ---------------------------------------------------------------------------


class TestMulberry32:
    def test_first_draw_seed_zero(self) -> None:
        rand = mulberry32(0)
        assert rand() == 1144304738 / 2**32

    def test_first_draws_seed_12345(self) -> None:
        rand = mulberry32(12345)
        assert rand() == 4207900869 / 2**32
        assert rand() == 1317490944 / 2**32
        assert rand() == 2079646450 / 2**32

    def test_values_in_unit_interval(self) -> None:
        rand = mulberry32(987654321)
        for _ in range(1000):
            v = rand()
            assert 0.0 <= v < 1.0

    @pytest.mark.parametrize("seed, expected", [
        (-1, 0xFFFFFFFF),
        (2**32 + 5, 5),
        (12345.9, 12345),
        (-0.5, 0xFFFFFFFF),
        (-1.5, 0xFFFFFFFE),
        (float("nan"), 0),
        (0, 0),
    ])
    def test_coerce_seed(self, seed: float, expected: int) -> None:
        assert coerce_seed(seed) == expected


class TestSeededPermutation:
    def test_golden_prefix(self) -> None:
        assert seeded_permutation(DOT_COUNT, 12345)[:10] == GOLDEN_PERMUTATION_PREFIX

    def test_is_permutation(self) -> None:
        perm = seeded_permutation(DOT_COUNT, 42)
        assert sorted(perm) == list(range(DOT_COUNT))

    def test_congruent_seeds_equal(self) -> None:
        assert seeded_permutation(DOT_COUNT, -1) == seeded_permutation(DOT_COUNT, 2**32 - 1)
        assert seeded_permutation(DOT_COUNT, 12345) == seeded_permutation(DOT_COUNT, 12345 + 2**32)

    def test_negative_fractional_seeds_floor(self) -> None:
        assert seeded_permutation(DOT_COUNT, -0.5) == seeded_permutation(DOT_COUNT, -1)
        assert seeded_permutation(DOT_COUNT, -1.5) == seeded_permutation(DOT_COUNT, -2)
        assert seeded_permutation(DOT_COUNT, 1.5) == seeded_permutation(DOT_COUNT, 1)

    def test_different_seeds_differ(self) -> None:
        assert seeded_permutation(DOT_COUNT, 1) != seeded_permutation(DOT_COUNT, 2)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class TestRingLayout:
    def test_ring_counts_sum(self) -> None:
        assert sum(RING_COUNTS) == DOT_COUNT

    def test_center_first(self) -> None:
        assert ring_positions(0.85)[0] == (0.0, 0.0)

    def test_ring_one_first_dot_rotated_half_slot(self) -> None:
        x, y = ring_positions(0.85)[1]
        theta = -math.pi / 2 + math.pi / 6
        assert x == pytest.approx(0.17 * math.cos(theta))
        assert y == pytest.approx(0.17 * math.sin(theta))

    def test_ring_two_starts_at_top(self) -> None:
        x, y = ring_positions(0.85)[7]
        assert x == pytest.approx(0.0, abs=1e-12)
        assert y == pytest.approx(-0.34)

    @pytest.mark.parametrize("scale", [0.5, 0.85, 1.2, 3.0])
    def test_distances_within_scale(self, scale: float) -> None:
        distances = [math.hypot(x, y) for x, y in ring_positions(scale)]
        assert all(0.0 <= d <= scale * (1 + 1e-12) for d in distances)
        assert sum(1 for d in distances if d == 0.0) == 1

    def test_ring_radii(self) -> None:
        positions = ring_positions(1.0)
        start = 0
        for ring_index, count in enumerate(RING_COUNTS):
            for x, y in positions[start:start + count]:
                assert math.hypot(x, y) == pytest.approx(ring_index / 5)
            start += count


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerateDots:
    def test_count_and_indices(self, golden_dots: list[Dot]) -> None:
        assert len(golden_dots) == DOT_COUNT
        assert [d.index for d in golden_dots] == list(range(DOT_COUNT))

    def test_deterministic(self) -> None:
        assert generate_dots("Hello", 0.05, 1.0, 7) == generate_dots("Hello", 0.05, 1.0, 7)

    def test_seed_equivalence(self) -> None:
        assert generate_dots("Hello", 0.05, 1.0, -7) == generate_dots("Hello", 0.05, 1.0, 2**32 - 7)

    def test_shared_radius(self, golden_dots: list[Dot]) -> None:
        assert {d.r for d in golden_dots} == {0.045}

    def test_empty_text_default_darkness(self) -> None:
        dots = generate_dots("", 0.045, 0.85, 99)
        assert {d.value for d in dots} == {0.6}
        assert {d.color for d in dots} == {"#666666"}

    def test_darkness_range(self) -> None:
        dots = generate_dots("The quick brown fox jumps over 13 lazy dogs!", 0.045, 0.85, 3)
        assert all(0.6 <= d.value <= 1.0 for d in dots)

    def test_single_character(self) -> None:
        dots = generate_dots("A", 0.045, 0.85, 12345)
        expected = 0.6 + ((ord("A") * 37) % 51) / 50 * 0.4
        assert {d.value for d in dots} == {expected}

    def test_characters_sampled_evenly(self) -> None:
        # Every residue class of the 86 mapped indices is hit, whatever the seed
        dots = generate_dots("abc", 0.045, 0.85, 2024)
        counts = Counter(d.value for d in dots)
        expected = {
            token_darkness(ord("a")): 29,
            token_darkness(ord("b")): 29,
            token_darkness(ord("c")): 28,
        }
        assert counts == expected

    def test_astral_character_counts_two_units(self) -> None:
        dots = generate_dots("\U0001F600", 0.045, 0.85, 12345)
        counts = Counter(d.value for d in dots)
        assert counts == {token_darkness(0xD83D): 43, token_darkness(0xDE00): 43}

    def test_zero_radius_scale(self) -> None:
        dots = generate_dots("x", 0.0, 0.0, 1)
        assert len(dots) == DOT_COUNT
        assert all(d.x == 0.0 and d.y == 0.0 for d in dots)

    def test_dots_are_frozen(self, golden_dots: list[Dot]) -> None:
        with pytest.raises(AttributeError):
            golden_dots[0].x = 1.0  # type: ignore[misc]


class TestGoldenPattern:
    def test_center_dot_single_character(self) -> None:
        center = generate_dots("A", 0.045, 0.85, 12345)[0]
        assert center.index == 0
        assert (center.x, center.y) == (0.0, 0.0)
        assert center.r == 0.045
        assert center.value == pytest.approx(0.664)
        assert center.color == "#565656"

    @pytest.mark.parametrize("index, color", [
        (0, "#1b1b1b"),   # 'g'
        (1, "#373737"),   # 'h'
        (2, "#545454"),   # 'i'
        (3, "#606060"),   # 'x'
        (4, "#565656"),   # 't'
        (5, "#373737"),   # 'h'
        (6, "#494949"),   # 'e'
        (85, "#565656"),  # 't'
    ])
    def test_golden_colors(self, golden_dots: list[Dot], index: int, color: str) -> None:
        assert golden_dots[index].color == color

    def test_golden_geometry(self, golden_dots: list[Dot]) -> None:
        assert golden_dots[1].x == pytest.approx(0.085)
        assert golden_dots[1].y == pytest.approx(-0.17 * math.sqrt(3) / 2)
        assert math.hypot(golden_dots[85].x, golden_dots[85].y) == pytest.approx(0.85)


class TestGenerateFromConfig:
    def test_matches_direct_call(self) -> None:
        cfg = GeneratorConfig(text="86", dot_size=60, spread=1.1, padding=50, seed=5)
        assert generate_from_config(cfg) == generate_dots("86", 0.06, 1.1, 5)

    def test_padding_does_not_change_dots(self) -> None:
        cfg = GeneratorConfig(text="86", padding=0)
        assert generate_from_config(cfg) == generate_from_config(cfg.replace(padding=100))
