"""
Tests for the weighted selector.

Tests:
- Pool expansion
- Deterministic draws with a seeded or scripted generator
- Smallest/largest unlocked scans
- Locked/unlocked partition
"""

import random

from ..engine_core.state import Gift
from ..engine_core.selector import (
    build_pool,
    select_weighted,
    select_uniform,
    smallest_unlocked_index,
    largest_unlocked_index,
    split_locked,
)


class ScriptedRng:
    """Stands in for random.Random; randrange returns a fixed pool index."""

    def __init__(self, index: int):
        self.index = index

    def randrange(self, *args, **kwargs):
        return self.index


class TestBuildPool:
    """Tests for weight-expanded pools."""

    def test_candidates_repeat_by_weight(self):
        pool = build_pool(["a", "b"], lambda c: {"a": 1, "b": 3}[c])
        assert pool == ["a", "b", "b", "b"]

    def test_weight_floor_is_one(self):
        """Zero or negative weights still leave the candidate drawable."""
        pool = build_pool(["a", "b"], lambda c: 0 if c == "a" else -2)
        assert pool == ["a", "b"]


class TestSelectWeighted:
    """Tests for weighted selection."""

    def test_empty_candidates_returns_none(self, rng):
        assert select_weighted([], lambda c: 1, rng) is None
        assert select_uniform([], rng) is None

    def test_draw_is_uniform_over_pool(self):
        weights = {"a": 1, "b": 3}
        assert select_weighted(["a", "b"], weights.get, ScriptedRng(0)) == "a"
        for index in (1, 2, 3):
            assert select_weighted(["a", "b"], weights.get, ScriptedRng(index)) == "b"

    def test_same_seed_same_draws(self):
        candidates = list(range(10))
        first = random.Random(99)
        second = random.Random(99)

        draws_a = [select_weighted(candidates, lambda c: c + 1, first) for _ in range(20)]
        draws_b = [select_weighted(candidates, lambda c: c + 1, second) for _ in range(20)]

        assert draws_a == draws_b

    def test_heavier_candidate_drawn_more_often(self):
        rng = random.Random(5)
        draws = [select_weighted(["light", "heavy"], lambda c: 1 if c == "light" else 9, rng)
                 for _ in range(500)]
        assert draws.count("heavy") > draws.count("light")

    def test_single_candidate_always_chosen(self, rng):
        for _ in range(10):
            assert select_uniform(["only"], rng) == "only"


class TestUnlockedScans:
    """Tests for insertion-order gift size."""

    def test_smallest_skips_locked(self):
        gifts = [Gift("a", locked=True), Gift("b"), Gift("c")]
        assert smallest_unlocked_index(gifts) == 1

    def test_largest_skips_locked(self):
        gifts = [Gift("a"), Gift("b"), Gift("c", locked=True)]
        assert largest_unlocked_index(gifts) == 1

    def test_no_unlocked_gift(self):
        gifts = [Gift("a", locked=True)]
        assert smallest_unlocked_index(gifts) == -1
        assert largest_unlocked_index(gifts) == -1
        assert smallest_unlocked_index([]) == -1

    def test_split_keeps_relative_order(self):
        gifts = [Gift("a"), Gift("b", locked=True), Gift("c"), Gift("d", locked=True)]
        locked, unlocked = split_locked(gifts)
        assert [g.id for g in locked] == ["b", "d"]
        assert [g.id for g in unlocked] == ["a", "c"]
