"""
Slot resolution: turns a slot into the player, bye or "not decided yet"
it currently stands for. Pure; never mutates the bracket.
"""
from typing import Tuple

from .errors import InvariantViolation
from .models import (
    BYE, UNRESOLVED, Bracket, ByeSlot, PlayerSlot, ResolvedValue, WinnerOfSlot,
)


def resolve(slot, bracket: Bracket) -> ResolvedValue:
    """
    Resolve a slot against the current bracket.

    A WinnerOfSlot resolves to its match's winner once recorded. A match
    fed by two byes has no winner and passes a bye on to the next round;
    anything else still undecided is UNRESOLVED.
    """
    if isinstance(slot, PlayerSlot):
        return ResolvedValue.player(slot.player_id)
    elif isinstance(slot, ByeSlot):
        return BYE
    elif isinstance(slot, WinnerOfSlot):
        source = bracket.get_match(slot.match_id)
        if source.winner_id is not None:
            return ResolvedValue.player(source.winner_id)
        if is_double_bye(source, bracket):
            return BYE
        return UNRESOLVED
    raise InvariantViolation(f"Unknown slot type: {slot!r}")


def resolve_opponents(bracket: Bracket, match_id: str) -> Tuple[ResolvedValue, ResolvedValue]:
    """Currently resolved (left, right) of a match, for display and play."""
    match = bracket.get_match(match_id)
    return resolve(match.left, bracket), resolve(match.right, bracket)


def resolved_player_ids(match, bracket: Bracket) -> list:
    """Concrete player ids currently sitting in the match."""
    ids = []
    for slot in match.slots:
        value = resolve(slot, bracket)
        if value.is_player:
            ids.append(value.player_id)
    return ids


def is_double_bye(match, bracket: Bracket) -> bool:
    return resolve(match.left, bracket).is_bye and resolve(match.right, bracket).is_bye
