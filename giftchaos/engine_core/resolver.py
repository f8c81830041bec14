"""
Action Resolver - Applies a rolled face to the roster and pile.

resolve_warmup / resolve_endgame are pure transforms:
(face, roster, pile, actor_index, targets) -> Resolution.
Inputs are never mutated. Randomness is drawn once, here or in
targets.preselect_targets, never incrementally.

Every branch emits at least one log entry. A branch whose action has
nothing to act on raises NoEligibleTarget; the dispatcher turns that
into a no-op entry and returns the roster unchanged.

Locked gifts never move and never unlock. Branches only ever pick
from a player's unlocked gifts.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import random

from .state import Gift, Player, LogEntry, Narrative, Direction, clone_roster, new_id
from .selector import (
    select_weighted,
    select_uniform,
    smallest_unlocked_index,
    largest_unlocked_index,
    split_locked,
)
from .targets import (
    TargetSelection,
    Seat,
    tribute_candidates,
    steal_candidates,
    flip_candidates,
    trash_candidates,
    santa_candidates,
    seats,
    by_gift_count,
    by_unlocked_count,
    pick_direction,
)
from .errors import NoEligibleTarget

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Result of resolving one face."""
    roster: list[Player]
    pile: int
    log_entries: list[LogEntry] = field(default_factory=list)
    narrative: Narrative | None = None

    @property
    def is_noop(self) -> bool:
        return self.narrative is None


@dataclass
class _Context:
    """Working copy a branch mutates freely."""
    players: list[Player]
    pile: int
    actor_index: int
    targets: TargetSelection
    rng: random.Random | None

    @property
    def actor(self) -> Player:
        return self.players[self.actor_index]

    def done(self, log_key: str, narrative_key: str, **params) -> Resolution:
        return Resolution(
            roster=self.players,
            pile=self.pile,
            log_entries=[LogEntry(key=log_key, params=dict(params))],
            narrative=Narrative(key=narrative_key, params=dict(params)),
        )


Handler = Callable[[_Context], Resolution]


def _pick_target(
    preselected: int | None,
    candidates: list[Seat],
    weight_fn: Callable[[Seat], int],
    rng: random.Random | None,
) -> Seat | None:
    """
    Use the caller's pre-selected seat if it is a valid candidate,
    otherwise draw one. A pre-selected seat that is not a candidate
    yields None rather than a silent re-draw.
    """
    if preselected is not None:
        for seat in candidates:
            if seat[0] == preselected:
                return seat
        return None
    return select_weighted(candidates, weight_fn, rng)


def _take_gift(player: Player, index: int) -> Gift:
    return player.gifts.pop(index)


def _remove_gift(player: Player, gift: Gift) -> None:
    player.gifts = [g for g in player.gifts if g.id != gift.id]


def _swap_unlocked(a: Player, b: Player) -> None:
    """Exchange the unlocked partitions; locked gifts stay with their owner."""
    a_locked, a_unlocked = split_locked(a.gifts)
    b_locked, b_unlocked = split_locked(b.gifts)
    a.gifts = a_locked + b_unlocked
    b.gifts = b_locked + a_unlocked


def _pass_along(
    players: list[Player],
    pick_index: Callable[[list[Gift]], int],
    step: int,
) -> int:
    """
    Every player simultaneously hands one gift to the seat `step` away.

    The gifts to move are chosen from a snapshot first, so a gift
    received in this pass is never sent on again. Returns the number
    of gifts moved.
    """
    outgoing: list[Gift | None] = []
    for player in players:
        idx = pick_index(player.gifts)
        outgoing.append(player.gifts[idx] if idx != -1 else None)

    for idx, gift in enumerate(outgoing):
        if gift is not None:
            _remove_gift(players[idx], gift)
    for idx, gift in enumerate(outgoing):
        if gift is not None:
            players[(idx + step) % len(players)].gifts.append(gift)

    return sum(1 for gift in outgoing if gift is not None)


# =============================================================================
# Warm-up
# =============================================================================

def _double_grab(ctx: _Context) -> Resolution:
    return _grab(ctx, 2, "log.warmup.1", "narr.warmup.1")


def _single_grab(ctx: _Context) -> Resolution:
    return _grab(ctx, 1, "log.warmup.2", "narr.warmup.2")


def _grab(ctx: _Context, wanted: int, log_key: str, narrative_key: str) -> Resolution:
    taken = min(wanted, ctx.pile)
    ctx.actor.gifts.extend(Gift(id=new_id()) for _ in range(taken))
    ctx.pile -= taken
    return ctx.done(log_key, narrative_key, actor=ctx.actor.name, count=taken)


def _forced_tribute(ctx: _Context) -> Resolution:
    actor = ctx.actor
    give_idx = smallest_unlocked_index(actor.gifts)
    if give_idx == -1:
        raise NoEligibleTarget("log.warmup.nothingToGive", {"actor": actor.name})

    target = _pick_target(
        ctx.targets.give_to,
        tribute_candidates(ctx.players, ctx.actor_index),
        by_gift_count,
        ctx.rng,
    )
    if target is None:
        raise NoEligibleTarget("log.warmup.nothingToGive", {"actor": actor.name})

    _, recipient = target
    recipient.gifts.append(_take_gift(actor, give_idx))
    return ctx.done("log.warmup.gave", "narr.warmup.3", actor=actor.name, target=recipient.name)


def _grinch_tax(ctx: _Context) -> Resolution:
    target = _pick_target(
        ctx.targets.steal_from,
        steal_candidates(ctx.players, ctx.actor_index),
        by_gift_count,
        ctx.rng,
    )
    if target is None:
        raise NoEligibleTarget("log.warmup.noUnlockedSteal")

    _, victim = target
    ctx.actor.gifts.append(_take_gift(victim, smallest_unlocked_index(victim.gifts)))
    return ctx.done("log.warmup.steal", "narr.warmup.4", actor=ctx.actor.name, target=victim.name)


def _tiny_toss_right(ctx: _Context) -> Resolution:
    moved = _pass_along(ctx.players, smallest_unlocked_index, step=1)
    if moved == 0:
        raise NoEligibleTarget("log.warmup.nothingToPass")
    return ctx.done("log.warmup.tiny", "narr.warmup.5", count=moved)


def _mega_move_left(ctx: _Context) -> Resolution:
    moved = _pass_along(ctx.players, largest_unlocked_index, step=-1)
    if moved == 0:
        raise NoEligibleTarget("log.warmup.nothingToPass")
    return ctx.done("log.warmup.mega", "narr.warmup.6", count=moved)


_WARMUP_HANDLERS: dict[int, Handler] = {
    1: _double_grab,
    2: _single_grab,
    3: _forced_tribute,
    4: _grinch_tax,
    5: _tiny_toss_right,
    6: _mega_move_left,
}


# =============================================================================
# Endgame
# =============================================================================

def _ice_lock(ctx: _Context) -> Resolution:
    actor = ctx.actor
    pick = select_uniform(actor.unlocked, ctx.rng)
    if pick is None:
        raise NoEligibleTarget("log.endgame.noFreeze", {"actor": actor.name})

    actor.gifts = [g.lock() if g.id == pick.id else g for g in actor.gifts]
    return ctx.done("log.endgame.freeze", "narr.endgame.1", actor=actor.name)


def _full_flip(ctx: _Context) -> Resolution:
    actor = ctx.actor
    target = _pick_target(
        ctx.targets.flip,
        flip_candidates(ctx.players, ctx.actor_index),
        by_unlocked_count,
        ctx.rng,
    )
    if target is None:
        raise NoEligibleTarget("log.endgame.noSwap", {"actor": actor.name})

    _, other = target
    _swap_unlocked(actor, other)
    return ctx.done("log.endgame.flip", "narr.endgame.2", actor=actor.name, target=other.name)


def _trash_trade(ctx: _Context) -> Resolution:
    actor = ctx.actor
    if not actor.has_unlocked:
        raise NoEligibleTarget("log.endgame.trash.missing")

    candidates = trash_candidates(ctx.players, ctx.actor_index)
    if not candidates:
        raise NoEligibleTarget("log.endgame.trash.notEnough")

    target = _pick_target(ctx.targets.trash, candidates, by_unlocked_count, ctx.rng)
    if target is None:
        raise NoEligibleTarget("log.endgame.trash.failed")

    _, other = target
    if not other.has_unlocked:
        # Nothing to trade back: the actor hands one over regardless
        gift = select_uniform(actor.unlocked, ctx.rng)
        _remove_gift(actor, gift)
        other.gifts.append(gift)
        return ctx.done(
            "log.endgame.trash.handover", "narr.endgame.3",
            actor=actor.name, target=other.name,
        )

    _swap_unlocked(actor, other)
    return ctx.done("log.endgame.trash.swap", "narr.endgame.3", actor=actor.name, target=other.name)


def _joker_pair(ctx: _Context) -> tuple[Seat, Seat] | None:
    everyone = seats(ctx.players)
    preset = ctx.targets.joker_pair
    if preset is not None:
        first_idx, second_idx = preset
        if first_idx == second_idx:
            return None
        first = next((s for s in everyone if s[0] == first_idx), None)
        second = next((s for s in everyone if s[0] == second_idx), None)
        if first is None or second is None:
            return None
        return first, second

    first = select_weighted(everyone, by_gift_count, ctx.rng)
    remaining = [s for s in everyone if s[0] != first[0]]
    second = select_weighted(remaining, by_gift_count, ctx.rng)
    if second is None:
        return None
    return first, second


def _joker_swap(ctx: _Context) -> Resolution:
    if len(ctx.players) < 2:
        raise NoEligibleTarget("log.endgame.joker.notEnough")

    pair = _joker_pair(ctx)
    if pair is None:
        raise NoEligibleTarget("log.endgame.joker.failed")

    (_, a), (_, b) = pair
    a_pick = select_uniform(a.unlocked, ctx.rng)
    b_pick = select_uniform(b.unlocked, ctx.rng)
    if a_pick is None and b_pick is None:
        raise NoEligibleTarget("log.endgame.joker.missing", {"a": a.name, "b": b.name})

    # Two independent picks; a side with nothing unlocked only receives
    if a_pick is not None:
        _remove_gift(a, a_pick)
    if b_pick is not None:
        _remove_gift(b, b_pick)
    if a_pick is not None:
        b.gifts.append(a_pick)
    if b_pick is not None:
        a.gifts.append(b_pick)

    return ctx.done("log.endgame.joker.swap", "narr.endgame.4", a=a.name, b=b.name)


def _santas_hand(ctx: _Context) -> Resolution:
    actor = ctx.actor
    give_idx = smallest_unlocked_index(actor.gifts)
    target = _pick_target(
        ctx.targets.santa,
        santa_candidates(ctx.players, ctx.actor_index),
        by_gift_count,
        ctx.rng,
    )
    if target is None or give_idx == -1:
        raise NoEligibleTarget("log.endgame.santa.none", {"actor": actor.name})

    _, recipient = target
    recipient.gifts.append(_take_gift(actor, give_idx))
    return ctx.done(
        "log.endgame.santa.gave", "narr.endgame.5",
        actor=actor.name, target=recipient.name,
    )


def _twist_of_fate(ctx: _Context) -> Resolution:
    if not any(p.has_unlocked for p in ctx.players):
        raise NoEligibleTarget("log.endgame.noTwist")

    direction = ctx.targets.direction or pick_direction(ctx.rng)
    count = len(ctx.players)
    partitions = [split_locked(p.gifts) for p in ctx.players]

    # Right: every unlocked pool moves one seat up, so seat i receives from i-1
    offset = -1 if direction == Direction.RIGHT else 1
    for idx, player in enumerate(ctx.players):
        locked, _ = partitions[idx]
        _, incoming = partitions[(idx + offset) % count]
        player.gifts = locked + incoming

    return ctx.done("log.endgame.twist", "narr.endgame.6", dir=direction.value)


_ENDGAME_HANDLERS: dict[int, Handler] = {
    1: _ice_lock,
    2: _full_flip,
    3: _trash_trade,
    4: _joker_swap,
    5: _santas_hand,
    6: _twist_of_fate,
}


# =============================================================================
# Entry points
# =============================================================================

def _resolve(
    handlers: dict[int, Handler],
    face: int,
    roster: list[Player],
    pile: int,
    actor_index: int,
    targets: TargetSelection | None,
    rng: random.Random | None,
) -> Resolution:
    handler = handlers.get(face)
    if handler is None:
        raise ValueError(f"Face must be 1-6, got {face}")
    if not 0 <= actor_index < len(roster):
        raise ValueError(f"Actor index {actor_index} out of range")

    ctx = _Context(
        players=clone_roster(roster),
        pile=pile,
        actor_index=actor_index,
        targets=targets or TargetSelection(),
        rng=rng,
    )
    try:
        return handler(ctx)
    except NoEligibleTarget as e:
        logger.debug("Face %d resolved as no-op: %s", face, e.key)
        return Resolution(
            roster=clone_roster(roster),
            pile=pile,
            log_entries=[LogEntry(key=e.key, params=e.params)],
        )


def resolve_warmup(
    face: int,
    roster: list[Player],
    pile: int,
    actor_index: int,
    targets: TargetSelection | None = None,
    rng: random.Random | None = None,
) -> Resolution:
    """
    Resolve a warm-up face.

    1 Double Grab, 2 Single Grab, 3 Forced Tribute, 4 Grinch Tax,
    5 Tiny Toss Right, 6 Mega Move Left.
    """
    return _resolve(_WARMUP_HANDLERS, face, roster, pile, actor_index, targets, rng)


def resolve_endgame(
    face: int,
    roster: list[Player],
    pile: int,
    actor_index: int,
    targets: TargetSelection | None = None,
    rng: random.Random | None = None,
) -> Resolution:
    """
    Resolve an endgame face.

    1 Ice Lock, 2 Full Flip, 3 Trash Trade, 4 Joker Swap,
    5 Santa's Hand, 6 Twist of Fate.
    """
    return _resolve(_ENDGAME_HANDLERS, face, roster, pile, actor_index, targets, rng)
