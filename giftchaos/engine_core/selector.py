"""
Weighted Selector - The single source of "who gets chosen".

Every random pick in the engine goes through select_weighted with
an injectable random.Random, so a seeded generator reproduces a game.
"""

from __future__ import annotations
from typing import Callable, Sequence, TypeVar
import random

from .state import Gift

T = TypeVar("T")

_default_rng = random.Random()


def get_rng(rng: random.Random | None) -> random.Random:
    """Use the caller's generator, or the module-level one."""
    return rng if rng is not None else _default_rng


def build_pool(candidates: Sequence[T], weight_fn: Callable[[T], int]) -> list[T]:
    """Repeat each candidate max(1, weight) times."""
    pool: list[T] = []
    for candidate in candidates:
        pool.extend([candidate] * max(1, int(weight_fn(candidate))))
    return pool


def select_weighted(
    candidates: Sequence[T],
    weight_fn: Callable[[T], int],
    rng: random.Random | None = None,
) -> T | None:
    """
    Draw one candidate uniformly from the weight-expanded pool.

    Returns None if there are no candidates.
    """
    if not candidates:
        return None
    pool = build_pool(candidates, weight_fn)
    return pool[get_rng(rng).randrange(len(pool))]


def select_uniform(candidates: Sequence[T], rng: random.Random | None = None) -> T | None:
    """Equal-weight pick; same pool semantics with every weight at 1."""
    return select_weighted(candidates, lambda _: 1, rng)


def smallest_unlocked_index(gifts: Sequence[Gift]) -> int:
    """Index of the first unlocked gift in insertion order, or -1."""
    for idx, gift in enumerate(gifts):
        if not gift.locked:
            return idx
    return -1


def largest_unlocked_index(gifts: Sequence[Gift]) -> int:
    """Index of the last unlocked gift in insertion order, or -1."""
    for idx in range(len(gifts) - 1, -1, -1):
        if not gifts[idx].locked:
            return idx
    return -1


def split_locked(gifts: Sequence[Gift]) -> tuple[list[Gift], list[Gift]]:
    """Partition into (locked, unlocked), each keeping its relative order."""
    locked = [g for g in gifts if g.locked]
    unlocked = [g for g in gifts if not g.locked]
    return locked, unlocked
