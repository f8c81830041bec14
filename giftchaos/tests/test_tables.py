"""
Tests for the action tables.

Tests:
- Eligibility predicates per face
- Face weighting for the die draw
- Table keys and constants
"""

import pytest

from ..engine_core.state import GamePhase
from ..engine_core.tables import (
    FACES,
    WARMUP_TABLE,
    ENDGAME_TABLE,
    available_faces,
    is_face_available,
    face_weight,
    get_phase_table,
    default_pile_size,
)
from .conftest import make_player


class TestWarmupEligibility:
    """Tests for warm-up face availability."""

    def test_fresh_table_only_grabs(self):
        """Nobody holds anything yet: only the pile faces can come up."""
        roster = [make_player("Ada"), make_player("Bo")]
        assert available_faces(GamePhase.WARMUP, 0, roster, pile=4) == [1, 2]

    def test_double_grab_needs_two_in_pile(self):
        roster = [make_player("Ada", 1), make_player("Bo")]
        faces = available_faces(GamePhase.WARMUP, 0, roster, pile=1)
        assert 1 not in faces
        assert 2 in faces

    def test_empty_pile_blocks_grabs(self):
        roster = [make_player("Ada", 1), make_player("Bo", 1)]
        faces = available_faces(GamePhase.WARMUP, 0, roster, pile=0)
        assert faces == [3, 4, 5, 6]

    def test_tribute_needs_actor_gifts(self):
        roster = [make_player("Ada"), make_player("Bo", 2)]
        assert not is_face_available(GamePhase.WARMUP, 3, 0, roster, 0)
        assert is_face_available(GamePhase.WARMUP, 3, 1, roster, 0)

    def test_grinch_needs_someone_else_unlocked(self):
        roster = [make_player("Ada", 2), make_player("Bo", 0, locked=1)]
        assert not is_face_available(GamePhase.WARMUP, 4, 0, roster, 0)
        assert is_face_available(GamePhase.WARMUP, 4, 1, roster, 0)

    def test_unknown_face_not_available(self):
        roster = [make_player("Ada", 2), make_player("Bo", 2)]
        assert not is_face_available(GamePhase.WARMUP, 7, 0, roster, 3)


class TestEndgameEligibility:
    """Tests for endgame face availability."""

    def test_everyone_unlocked(self):
        roster = [make_player("Ada", 2), make_player("Bo", 2)]
        assert available_faces(GamePhase.ENDGAME, 0, roster, 0) == list(FACES)

    def test_actor_fully_frozen(self):
        """Actor with only locked gifts cannot freeze, trade or give."""
        roster = [make_player("Ada", 0, locked=2), make_player("Bo", 2), make_player("Cy", 1)]
        faces = available_faces(GamePhase.ENDGAME, 0, roster, 0)
        assert faces == [2, 4, 6]

    def test_joker_needs_two_unlocked_holders(self):
        roster = [make_player("Ada", 2), make_player("Bo", 0, locked=1)]
        assert not is_face_available(GamePhase.ENDGAME, 4, 0, roster, 0)

    def test_frozen_table_has_no_faces(self):
        roster = [make_player("Ada", 0, locked=2), make_player("Bo", 0, locked=2)]
        assert available_faces(GamePhase.ENDGAME, 0, roster, 0) == []


class TestFaceWeight:
    """Tests for die face weighting."""

    def test_empty_handed_double_grab_favoured(self):
        actor = make_player("Ada")
        assert face_weight(GamePhase.WARMUP, 1, actor, pile=5) == 4
        assert face_weight(GamePhase.WARMUP, 2, actor, pile=5) == 2

    def test_grab_weights_with_gifts(self):
        actor = make_player("Ada", 1)
        assert face_weight(GamePhase.WARMUP, 1, actor, pile=5) == 2
        assert face_weight(GamePhase.WARMUP, 1, actor, pile=0) == 1

    def test_other_warmup_faces_weight_one(self):
        actor = make_player("Ada")
        for face in (3, 4, 5, 6):
            assert face_weight(GamePhase.WARMUP, face, actor, pile=5) == 1

    def test_twist_favoured_when_empty_handed(self):
        assert face_weight(GamePhase.ENDGAME, 6, make_player("Ada"), 0) == 3
        assert face_weight(GamePhase.ENDGAME, 6, make_player("Ada", 1), 0) == 1
        assert face_weight(GamePhase.ENDGAME, 1, make_player("Ada"), 0) == 1


class TestTables:
    """Tests for table structure."""

    def test_six_faces_per_phase(self):
        assert sorted(WARMUP_TABLE) == list(FACES)
        assert sorted(ENDGAME_TABLE) == list(FACES)

    def test_localization_keys(self):
        action = get_phase_table(GamePhase.ENDGAME)[4]
        assert action.name == "joker_swap"
        assert action.title_key == "actions.endgame.4.title"
        assert action.description_key == "actions.endgame.4.desc"

    @pytest.mark.parametrize("phase", [GamePhase.SETUP, GamePhase.ENDED])
    def test_no_table_outside_rolling_phases(self, phase):
        with pytest.raises(ValueError):
            get_phase_table(phase)

    def test_default_pile_is_two_per_player(self):
        assert default_pile_size(3) == 6
        assert default_pile_size(0) == 0
