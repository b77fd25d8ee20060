"""
Single elimination bracket generation.
"""
import math
from typing import List, Sequence

from .errors import BadPlayerId, DuplicatePlayer, InvalidRosterSize, InvariantViolation
from .models import (
    Bracket, ByeSlot, Match, PlayerSlot, WinnerOfSlot, is_valid_player_id, match_code,
)
from .registry import settle


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of teams."""
    if teams_in_round == 2:
        return "Final"
    elif teams_in_round == 4:
        return "Semifinal"
    elif teams_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {teams_in_round}"


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_teams <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_teams))


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(num_teams)
    return bracket_size - num_teams


def round_names(bracket: Bracket) -> List[str]:
    """Display names for each round, first round first."""
    names = []
    teams_in_round = bracket.size
    for _ in bracket.rounds:
        names.append(get_round_name(teams_in_round))
        teams_in_round //= 2
    return names


def build_bracket(player_ids: Sequence) -> Bracket:
    """
    Build a bracket from an ordered roster of player ids.

    Seeding is as listed: consecutive entrants meet in round 0 and the
    roster is padded with byes at the end up to the next power of two.
    Shuffle the roster beforehand for a random draw.

    The returned bracket has statuses computed and byes already advanced.
    """
    player_ids = list(player_ids)
    if len(player_ids) < 2:
        raise InvalidRosterSize(f"At least 2 players are required, got {len(player_ids)}",
                                count=len(player_ids))
    seen = set()
    for player_id in player_ids:
        if not is_valid_player_id(player_id):
            raise BadPlayerId(f"Invalid player id {player_id!r}", player_id=repr(player_id))
        if player_id in seen:
            raise DuplicatePlayer(f"Player {player_id} appears more than once", player_id=player_id)
        seen.add(player_id)

    bracket_size = calculate_bracket_size(len(player_ids))
    slots = [PlayerSlot(player_id) for player_id in player_ids]
    slots += [ByeSlot() for _ in range(calculate_byes(len(player_ids)))]

    first_round = []
    for order in range(bracket_size // 2):
        first_round.append(Match(
            id=match_code(0, order),
            round=0,
            order=order,
            left=slots[2 * order],
            right=slots[2 * order + 1],
        ))

    rounds = [first_round]
    while len(rounds[-1]) > 1:
        previous = rounds[-1]
        round_index = len(rounds)
        round_matches = []
        for order in range(len(previous) // 2):
            round_matches.append(Match(
                id=match_code(round_index, order),
                round=round_index,
                order=order,
                left=WinnerOfSlot(previous[2 * order].id),
                right=WinnerOfSlot(previous[2 * order + 1].id),
            ))
        rounds.append(round_matches)

    bracket = Bracket(rounds)
    check_invariants(bracket)
    settle(bracket)
    return bracket


def check_invariants(bracket: Bracket) -> None:
    """Raise InvariantViolation if the bracket's structure is broken."""
    if not bracket.rounds or not bracket.rounds[0]:
        raise InvariantViolation("Bracket has no matches")
    size = bracket.size
    if size < 2 or size & (size - 1):
        raise InvariantViolation(f"Bracket size {size} is not a power of two")
    if len(bracket) != size - 1:
        raise InvariantViolation(f"Expected {size - 1} matches, found {len(bracket)}")

    for round_index, round_matches in enumerate(bracket.rounds):
        if round_index > 0 and len(round_matches) * 2 != len(bracket.rounds[round_index - 1]):
            raise InvariantViolation(f"Round {round_index} does not halve the previous round")
        for order, match in enumerate(round_matches):
            if match.round != round_index or match.order != order:
                raise InvariantViolation(f"Match {match.id} is out of place")
            for slot in match.slots:
                if round_index == 0:
                    if not isinstance(slot, (PlayerSlot, ByeSlot)):
                        raise InvariantViolation(f"Round 0 match {match.id} has slot {slot!r}")
                    continue
                if not isinstance(slot, WinnerOfSlot):
                    raise InvariantViolation(f"Match {match.id} has slot {slot!r}, expected a winner reference")
                if not bracket.has_match(slot.match_id):
                    raise InvariantViolation(f"Match {match.id} references unknown match {slot.match_id}")
                source = bracket.get_match(slot.match_id)
                if source.round != round_index - 1:
                    raise InvariantViolation(f"Match {match.id} references {source.id} outside round {round_index}")
            if round_index > 0:
                expected = (bracket.rounds[round_index - 1][2 * order].id,
                            bracket.rounds[round_index - 1][2 * order + 1].id)
                if (match.left.match_id, match.right.match_id) != expected:
                    raise InvariantViolation(f"Match {match.id} is not fed by {expected[0]} and {expected[1]}")
