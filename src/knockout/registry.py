"""
Recording and clearing match winners.

All bracket mutation goes through here. Every operation validates before
it touches the bracket, so a rejected call leaves the bracket unchanged.
"""
import logging

from .byes import advance_byes
from .errors import InvalidTransition, InvalidWinner
from .models import IN_PROGRESS, READY, Bracket, Match
from .resolver import resolve, resolved_player_ids
from .status import refresh_statuses

logger = logging.getLogger(__name__)


def settle(bracket: Bracket) -> Bracket:
    """Recompute statuses and advance byes until nothing changes."""
    refresh_statuses(bracket)
    advance_byes(bracket)
    refresh_statuses(bracket)
    return bracket


def set_winner(bracket: Bracket, match_id: str, player_id) -> Match:
    """Record `player_id` as the winner of a ready or in-progress match."""
    match = bracket.get_match(match_id)
    if match.status not in (READY, IN_PROGRESS):
        raise InvalidWinner(f"Match {match_id} is {match.status}, not ready",
                            match_id=match_id, status=match.status)
    if player_id not in resolved_player_ids(match, bracket):
        raise InvalidWinner(f"{player_id} is not playing in match {match_id}",
                            match_id=match_id, player_id=player_id)

    match.winner_id = player_id
    logger.debug("Match %s won by %s", match_id, player_id)
    settle(bracket)
    return match


def clear_winner(bracket: Bracket, match_id: str) -> Match:
    """
    Remove a recorded winner.

    Downstream winners that were decided between players who no longer
    reach their match are cleared as well. A walkover past a bye is not
    a result and cannot be cleared.
    """
    match = bracket.get_match(match_id)
    if match.winner_id is None:
        return match
    if any(resolve(slot, bracket).is_bye for slot in match.slots):
        return match

    match.winner_id = None
    logger.debug("Match %s winner cleared", match_id)
    for cleared in invalidate_downstream(bracket):
        logger.debug("Match %s winner cleared after upstream change", cleared.id)
    settle(bracket)
    return match


def invalidate_downstream(bracket: Bracket) -> list:
    """
    Clear winners that no longer stand: the winner must still be one of the
    match's resolved players, and neither side may be undecided.
    """
    cleared = []
    for match in bracket.all_matches():
        if match.winner_id is None:
            continue
        undecided = any(resolve(slot, bracket).is_unresolved for slot in match.slots)
        if undecided or match.winner_id not in resolved_player_ids(match, bracket):
            match.winner_id = None
            cleared.append(match)
    return cleared


def mark_in_progress(bracket: Bracket, match_id: str) -> Match:
    """Flag a ready match as started by the game module."""
    match = bracket.get_match(match_id)
    if match.status != READY:
        raise InvalidTransition(f"Match {match_id} is {match.status}, not ready",
                                match_id=match_id, status=match.status)
    match.started = True
    match.status = IN_PROGRESS
    return match
