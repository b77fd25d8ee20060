"""
Unit tests for single elimination bracket generation.
"""
import math
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from knockout.builder import (
    build_bracket,
    calculate_bracket_size,
    calculate_byes,
    check_invariants,
    get_round_name,
    round_names,
)
from knockout.errors import BadPlayerId, DuplicatePlayer, InvalidRosterSize, InvariantViolation
from knockout.models import (
    COMPLETED, PENDING, READY, ByeSlot, PlayerSlot, WinnerOfSlot,
)


def roster(n):
    return [f"P{i}" for i in range(1, n + 1)]


class TestBracketHelpers:
    """Tests for bracket helper functions."""

    def test_get_round_name_final(self):
        """Test round name for 2 teams (Final)."""
        assert get_round_name(2) == "Final"

    def test_get_round_name_semifinal(self):
        assert get_round_name(4) == "Semifinal"

    def test_get_round_name_quarterfinal(self):
        assert get_round_name(8) == "Quarterfinal"

    def test_get_round_name_round_of_16(self):
        assert get_round_name(16) == "Round of 16"

    def test_calculate_bracket_size_exact_power(self):
        """Test bracket size for exact power of 2."""
        assert calculate_bracket_size(2) == 2
        assert calculate_bracket_size(4) == 4
        assert calculate_bracket_size(8) == 8

    def test_calculate_bracket_size_not_power(self):
        """Test bracket size rounds up to next power of 2."""
        assert calculate_bracket_size(3) == 4
        assert calculate_bracket_size(5) == 8
        assert calculate_bracket_size(7) == 8
        assert calculate_bracket_size(9) == 16

    def test_calculate_bracket_size_zero(self):
        assert calculate_bracket_size(0) == 0

    def test_calculate_byes(self):
        assert calculate_byes(8) == 0
        assert calculate_byes(5) == 3  # 8 - 5
        assert calculate_byes(3) == 1  # 4 - 3

    def test_round_names_for_eight(self):
        bracket = build_bracket(roster(8))
        assert round_names(bracket) == ["Quarterfinal", "Semifinal", "Final"]


class TestBuildBracketShape:
    """Structural properties for every small roster size."""

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8])
    def test_round_count(self, n):
        """Rounds = log2 of the bracket size."""
        bracket = build_bracket(roster(n))
        assert len(bracket.rounds) == int(math.log2(calculate_bracket_size(n)))

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8])
    def test_total_matches(self, n):
        bracket = build_bracket(roster(n))
        assert len(list(bracket.all_matches())) == calculate_bracket_size(n) - 1

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8])
    def test_round_sizes_halve(self, n):
        bracket = build_bracket(roster(n))
        assert len(bracket.rounds[0]) == calculate_bracket_size(n) // 2
        for earlier, later in zip(bracket.rounds, bracket.rounds[1:]):
            assert len(later) * 2 == len(earlier)
        assert len(bracket.rounds[-1]) == 1

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8])
    def test_first_round_bye_count(self, n):
        bracket = build_bracket(roster(n))
        byes = sum(1 for m in bracket.rounds[0] for s in m.slots if isinstance(s, ByeSlot))
        assert byes == calculate_bracket_size(n) - n

    @pytest.mark.parametrize("n", [3, 5, 8])
    def test_later_rounds_reference_previous_pairs(self, n):
        """Match k of round r is fed by matches 2k and 2k+1 of round r-1."""
        bracket = build_bracket(roster(n))
        for round_index in range(1, len(bracket.rounds)):
            previous = bracket.rounds[round_index - 1]
            for order, match in enumerate(bracket.rounds[round_index]):
                assert match.left == WinnerOfSlot(previous[2 * order].id)
                assert match.right == WinnerOfSlot(previous[2 * order + 1].id)

    def test_seeding_is_as_listed(self):
        """Consecutive roster entries meet in round 0, byes pad the end."""
        bracket = build_bracket(["a", "b", "c", "d", "e"])
        first = bracket.rounds[0]
        assert (first[0].left, first[0].right) == (PlayerSlot("a"), PlayerSlot("b"))
        assert (first[1].left, first[1].right) == (PlayerSlot("c"), PlayerSlot("d"))
        assert (first[2].left, first[2].right) == (PlayerSlot("e"), ByeSlot())
        assert (first[3].left, first[3].right) == (ByeSlot(), ByeSlot())

    def test_match_ids(self):
        bracket = build_bracket(roster(4))
        assert [m.id for m in bracket.all_matches()] == ["R1-M1", "R1-M2", "R2-M1"]


class TestBuildBracketStatuses:
    """Initial statuses after the first settle."""

    def test_two_players_single_ready_match(self):
        bracket = build_bracket(["a", "b"])
        assert len(bracket) == 1
        assert bracket.final.status == READY
        assert not any(isinstance(s, ByeSlot) for s in bracket.final.slots)

    def test_three_players_one_bye_completed(self):
        """The bye match is decided; the final waits for the other semifinal."""
        bracket = build_bracket(["a", "b", "c"])
        first = bracket.rounds[0]
        assert first[1].status == COMPLETED
        assert first[1].winner_id == "c"
        assert first[0].status == READY
        assert first[0].winner_id is None
        assert bracket.final.status == PENDING
        assert bracket.final.winner_id is None

    def test_all_winners_start_empty_without_byes(self):
        bracket = build_bracket(roster(8))
        assert all(m.winner_id is None for m in bracket.all_matches())
        assert [m.status for m in bracket.rounds[0]] == [READY] * 4

    def test_five_players_bye_propagates_past_double_bye(self):
        """P5 meets a bye, then a double-bye match, and waits in the final."""
        bracket = build_bracket(roster(5))
        assert bracket.get_match("R1-M3").winner_id == "P5"
        assert bracket.get_match("R1-M4").winner_id is None
        assert bracket.get_match("R1-M4").status == COMPLETED
        assert bracket.get_match("R2-M2").winner_id == "P5"
        assert bracket.final.status == PENDING


class TestBuildBracketValidation:
    """Roster validation."""

    def test_empty_roster_rejected(self):
        with pytest.raises(InvalidRosterSize):
            build_bracket([])

    def test_single_player_rejected(self):
        with pytest.raises(InvalidRosterSize):
            build_bracket(["solo"])

    def test_duplicate_player_rejected(self):
        with pytest.raises(DuplicatePlayer):
            build_bracket(["a", "b", "a"])

    @pytest.mark.parametrize("bad_id", [["x"], {"id": 1}, None, True, 1.5])
    def test_bad_player_id_rejected(self, bad_id):
        with pytest.raises(BadPlayerId):
            build_bracket(["a", bad_id])

    def test_integer_ids_accepted(self):
        assert build_bracket([1, 2, 3]).player_ids == [1, 2, 3]

    def test_accepts_any_iterable(self):
        bracket = build_bracket(iter(["a", "b", "c", "d"]))
        assert bracket.player_ids == ["a", "b", "c", "d"]


class TestCheckInvariants:
    """Structure checks on a tampered bracket."""

    def test_valid_bracket_passes(self):
        check_invariants(build_bracket(roster(6)))

    def test_player_slot_in_later_round(self):
        bracket = build_bracket(roster(4))
        bracket.final.left = PlayerSlot("P1")
        with pytest.raises(InvariantViolation):
            check_invariants(bracket)

    def test_winner_reference_in_first_round(self):
        bracket = build_bracket(roster(4))
        bracket.rounds[0][0].right = WinnerOfSlot("R1-M2")
        with pytest.raises(InvariantViolation):
            check_invariants(bracket)

    def test_wrong_feeder(self):
        bracket = build_bracket(roster(8))
        bracket.get_match("R2-M1").right = WinnerOfSlot("R1-M4")
        with pytest.raises(InvariantViolation):
            check_invariants(bracket)

    def test_round_not_halving(self):
        bracket = build_bracket(roster(4))
        bracket.rounds[0].pop()
        with pytest.raises(InvariantViolation):
            check_invariants(bracket)
