"""
Single elimination bracket engine.
"""
from .builder import build_bracket, calculate_bracket_size, calculate_byes, get_round_name
from .byes import advance_byes
from .errors import (
    BadPlayerId, BracketError, InvalidRosterSize, InvalidTransition, InvalidWinner, InvariantViolation,
    MatchNotFound,
)
from .models import (
    BYE, COMPLETED, IN_PROGRESS, PENDING, READY, UNRESOLVED, Bracket, ByeSlot, Match, Player,
    PlayerSlot, ResolvedValue, WinnerOfSlot,
)
from .queue import ready_matches
from .registry import clear_winner, mark_in_progress, set_winner, settle
from .resolver import resolve, resolve_opponents
from .snapshot import bracket_from_dict, bracket_to_dict
from .status import refresh_statuses
from .tournament import Tournament
