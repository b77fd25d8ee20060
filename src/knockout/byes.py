"""
Automatic advancement past byes.
"""
import logging

from .errors import InvariantViolation
from .models import COMPLETED, Bracket
from .resolver import resolve

logger = logging.getLogger(__name__)


def advance_byes(bracket: Bracket) -> int:
    """
    Complete every match where one side is a bye and the other a player.

    Scans all undecided matches, repeating until a scan changes nothing.
    Only an explicit bye triggers advancement; an undecided side
    (UNRESOLVED) never does, so a finalist cannot walk over an opponent
    who simply hasn't been decided yet.

    Returns the number of scans performed.
    """
    limit = max(len(bracket), 1)
    scans = 0
    changed = True
    while changed:
        if scans >= limit:
            raise InvariantViolation(f"Bye propagation did not settle within {limit} scans")
        scans += 1
        changed = False
        for match in bracket.all_matches():
            if match.winner_id is not None:
                continue
            left = resolve(match.left, bracket)
            right = resolve(match.right, bracket)
            if left.is_bye and right.is_player:
                winner = right.player_id
            elif right.is_bye and left.is_player:
                winner = left.player_id
            else:
                continue
            match.winner_id = winner
            match.status = COMPLETED
            changed = True
            logger.debug("Match %s: %s advances on a bye", match.id, winner)
    return scans
