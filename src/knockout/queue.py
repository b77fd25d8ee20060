"""
Matches that can be played right now.
"""
from typing import List

from .models import READY, Bracket, Match


def ready_matches(bracket: Bracket) -> List[Match]:
    """All ready matches ordered by (round, order). Recomputed on every call."""
    return [match for match in bracket.all_matches() if match.status == READY]
