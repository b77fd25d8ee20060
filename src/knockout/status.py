"""
Status recomputation for every match in a bracket.
"""
from .models import COMPLETED, IN_PROGRESS, PENDING, READY, Bracket
from .resolver import resolve


def compute_status(match, bracket: Bracket) -> str:
    """
    Status rules, in priority order:
    1. winner recorded -> completed
    2. both sides are byes -> completed (nobody advances, a bye does)
    3. both sides are players -> in_progress if started, else ready
    4. otherwise -> pending
    """
    if match.winner_id is not None:
        return COMPLETED
    left = resolve(match.left, bracket)
    right = resolve(match.right, bracket)
    if left.is_bye and right.is_bye:
        return COMPLETED
    if left.is_player and right.is_player:
        return IN_PROGRESS if match.started else READY
    return PENDING


def refresh_statuses(bracket: Bracket) -> Bracket:
    """Recompute every match status from winners and resolved slots. Idempotent."""
    for match in bracket.all_matches():
        status = compute_status(match, bracket)
        if status == PENDING:
            # Opponents are gone; a later pairing starts fresh.
            match.started = False
        match.status = status
    return bracket
