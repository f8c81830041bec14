"""
Target Pre-selection - The draw half of the two-phase reveal.

Faces that need a player-visible "who is it" moment draw their
targets here, once and eagerly. A presentation layer may then animate
over Reveal.items and stop on Reveal.final_index; the resolver is
later called with the same TargetSelection, so what animates and what
happens can never diverge.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from .state import GamePhase, Direction, Player
from .selector import select_weighted, select_uniform

# (index, player) pairs keep seat indices through filtering
Seat = tuple[int, Player]


@dataclass
class Reveal:
    """Names to cycle through in a cosmetic reveal, and where to stop."""
    label_key: str
    items: list[str] = field(default_factory=list)
    final_index: int = 0


@dataclass
class TargetSelection:
    """
    Pre-selected targets for a single roll.

    Only the field for the rolled face is set. Indices are seats in
    the roster the selection was drawn against.
    """
    give_to: int | None = None
    steal_from: int | None = None
    flip: int | None = None
    trash: int | None = None
    joker_pair: tuple[int, int] | None = None
    santa: int | None = None
    direction: Direction | None = None
    reveal: Reveal | None = None


def seats(roster: list[Player]) -> list[Seat]:
    return list(enumerate(roster))


def other_seats(roster: list[Player], actor_index: int) -> list[Seat]:
    return [(idx, p) for idx, p in enumerate(roster) if idx != actor_index]


def tribute_candidates(roster: list[Player], actor_index: int) -> list[Seat]:
    """Forced Tribute: any other player may receive."""
    return other_seats(roster, actor_index)


def steal_candidates(roster: list[Player], actor_index: int) -> list[Seat]:
    """Grinch Tax: other players holding an unlocked gift."""
    return [(idx, p) for idx, p in other_seats(roster, actor_index) if p.has_unlocked]


def flip_candidates(roster: list[Player], actor_index: int) -> list[Seat]:
    """Full Flip: other players holding an unlocked gift."""
    return steal_candidates(roster, actor_index)


def trash_candidates(roster: list[Player], actor_index: int) -> list[Seat]:
    """Trash Trade: any other player."""
    return other_seats(roster, actor_index)


def santa_candidates(roster: list[Player], actor_index: int) -> list[Seat]:
    """Santa's Hand: any other player."""
    return other_seats(roster, actor_index)


def joker_pairs(roster: list[Player]) -> list[tuple[Seat, Seat]]:
    """Unordered seat pairs where at least one side can donate."""
    pairs = []
    for i in range(len(roster)):
        for j in range(i + 1, len(roster)):
            if roster[i].has_unlocked or roster[j].has_unlocked:
                pairs.append(((i, roster[i]), (j, roster[j])))
    return pairs


def by_gift_count(seat: Seat) -> int:
    return seat[1].gift_count + 1


def by_unlocked_count(seat: Seat) -> int:
    return seat[1].unlocked_count + 1


def by_pair_unlocked(pair: tuple[Seat, Seat]) -> int:
    return (pair[0][1].unlocked_count + 1) * (pair[1][1].unlocked_count + 1)


def _reveal(candidates: list[Seat], chosen: Seat) -> Reveal:
    return Reveal(
        label_key="ui.reveal.player",
        items=[p.name for _, p in candidates],
        final_index=candidates.index(chosen),
    )


def pick_direction(rng: random.Random | None = None) -> Direction:
    return select_uniform([Direction.LEFT, Direction.RIGHT], rng)


def preselect_targets(
    phase: GamePhase,
    face: int,
    roster: list[Player],
    actor_index: int,
    rng: random.Random | None = None,
) -> TargetSelection:
    """
    Draw the targets a face needs, using the same weighting the
    resolver would use on its own.

    Faces without a target step return an empty selection, as do
    faces whose candidate list is empty (the resolver then logs the
    no-op).
    """
    selection = TargetSelection()

    if phase == GamePhase.WARMUP:
        if face == 3:
            candidates = tribute_candidates(roster, actor_index)
            chosen = select_weighted(candidates, by_gift_count, rng)
            if chosen:
                selection.give_to = chosen[0]
                selection.reveal = _reveal(candidates, chosen)
        elif face == 4:
            candidates = steal_candidates(roster, actor_index)
            chosen = select_weighted(candidates, by_gift_count, rng)
            if chosen:
                selection.steal_from = chosen[0]
                selection.reveal = _reveal(candidates, chosen)
        return selection

    if phase != GamePhase.ENDGAME:
        return selection

    if face == 2:
        candidates = flip_candidates(roster, actor_index)
        chosen = select_weighted(candidates, by_unlocked_count, rng)
        if chosen:
            selection.flip = chosen[0]
            selection.reveal = _reveal(candidates, chosen)
    elif face == 3:
        candidates = trash_candidates(roster, actor_index)
        chosen = select_weighted(candidates, by_unlocked_count, rng)
        if chosen:
            selection.trash = chosen[0]
            selection.reveal = _reveal(candidates, chosen)
    elif face == 4:
        pairs = joker_pairs(roster)
        pair = select_weighted(pairs, by_pair_unlocked, rng)
        if pair:
            selection.joker_pair = (pair[0][0], pair[1][0])
            selection.reveal = Reveal(
                label_key="ui.reveal.players",
                items=[f"{a.name} ↔ {b.name}" for (_, a), (_, b) in pairs],
                final_index=pairs.index(pair),
            )
    elif face == 5:
        candidates = santa_candidates(roster, actor_index)
        chosen = select_weighted(candidates, by_gift_count, rng)
        if chosen:
            selection.santa = chosen[0]
            selection.reveal = _reveal(candidates, chosen)
    elif face == 6:
        selection.direction = pick_direction(rng)
        selection.reveal = Reveal(
            label_key="ui.reveal.direction",
            items=[Direction.LEFT.value, Direction.RIGHT.value],
            final_index=0 if selection.direction == Direction.LEFT else 1,
        )

    return selection
