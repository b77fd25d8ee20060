"""
Tournament lifecycle around a bracket.

A tournament collects participants while in registration, is seeded into
a bracket when started, takes match results while ongoing, and finishes
when the final has a winner.

Statuses: registration -> ongoing -> finished, or canceled at any point
before finishing. Clearing the final's result reopens a finished
tournament.
"""
import logging
import random
import re
from datetime import datetime
from typing import Dict, List, Optional

from .builder import build_bracket
from .errors import (
    BadMaxPlayers, BadPlayerId, BadScores, BadTitle, DrawNotAllowed, NotInRegistration, TournamentFull,
    TournamentNotOngoing,
)
from .models import Bracket, Player, is_valid_player_id
from .queue import ready_matches
from .registry import clear_winner, mark_in_progress, set_winner
from .resolver import resolve_opponents
from .snapshot import bracket_from_dict, bracket_to_dict

logger = logging.getLogger(__name__)

REGISTRATION = 'registration'
ONGOING = 'ongoing'
FINISHED = 'finished'
CANCELED = 'canceled'

DEFAULT_MAX_PLAYERS = 8


def slugify(name: str) -> str:
    """Convert tournament name to filesystem-safe slug."""
    slug = name.lower().strip()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'[\s-]+', '-', slug)
    slug = slug.strip('-')
    return slug or 'tournament'


def _now() -> str:
    return datetime.now().isoformat()


class Tournament:
    def __init__(self, title, description=None, max_players=DEFAULT_MAX_PLAYERS, slug=None):
        if not isinstance(title, str) or not title.strip():
            raise BadTitle()
        try:
            max_players = int(max_players)
        except (TypeError, ValueError):
            raise BadMaxPlayers(max_players=max_players)
        if max_players < 2:
            raise BadMaxPlayers(max_players=max_players)
        self.title = title.strip()
        self.slug = slug or slugify(self.title)
        self.description = str(description) if description else None
        self.max_players = max_players
        self.status = REGISTRATION
        self.participants: List[Player] = []
        self.bracket: Optional[Bracket] = None
        self.results: Dict[str, Dict] = {}
        self.created_at = _now()
        self.started_at = None
        self.ended_at = None

    def __repr__(self):
        return f"Tournament(slug={self.slug}, status={self.status}, players={len(self.participants)})"

    # Registration

    def join(self, player: Player) -> bool:
        """Add a participant. Returns False if they had already joined."""
        if self.status != REGISTRATION:
            raise NotInRegistration()
        if not is_valid_player_id(player.id):
            raise BadPlayerId(f"Invalid player id {player.id!r}", player_id=repr(player.id))
        if any(p.id == player.id for p in self.participants):
            return False
        if len(self.participants) >= self.max_players:
            raise TournamentFull()
        self.participants.append(player)
        return True

    def get_player(self, player_id) -> Optional[Player]:
        for player in self.participants:
            if player.id == player_id:
                return player
        return None

    # Seeding

    def _seed(self, shuffle: bool, rng: Optional[random.Random]):
        ids = [p.id for p in self.participants]
        if shuffle:
            (rng or random.Random()).shuffle(ids)
        self.bracket = build_bracket(ids)
        self.results = {}

    def start(self, shuffle=False, rng=None) -> Bracket:
        """Seed the bracket from the participants, in join order unless shuffled."""
        if self.status != REGISTRATION:
            raise NotInRegistration()
        self._seed(shuffle, rng)
        self.status = ONGOING
        self.started_at = _now()
        logger.info("Tournament %s started with %d players", self.slug, len(self.participants))
        return self.bracket

    def reseed(self, shuffle=False, rng=None) -> Bracket:
        """Throw the bracket away and seed a new one. All results are dropped."""
        self._require_ongoing()
        self._seed(shuffle, rng)
        logger.info("Tournament %s reseeded", self.slug)
        return self.bracket

    def cancel(self):
        if self.status == FINISHED:
            raise TournamentNotOngoing("A finished tournament cannot be canceled")
        self.status = CANCELED
        self.ended_at = _now()
        logger.info("Tournament %s canceled", self.slug)

    # Play

    def _require_ongoing(self):
        if self.status != ONGOING or self.bracket is None:
            raise TournamentNotOngoing()

    def ready_matches(self):
        if self.bracket is None:
            return []
        return ready_matches(self.bracket)

    def start_match(self, match_id: str) -> tuple:
        """Mark a match as being played. Returns the two player ids."""
        self._require_ongoing()
        match = mark_in_progress(self.bracket, match_id)
        left, right = resolve_opponents(self.bracket, match.id)
        return left.player_id, right.player_id

    def set_winner(self, match_id: str, player_id):
        """Record a winner without a score."""
        self._require_ongoing()
        match = set_winner(self.bracket, match_id, player_id)
        self._store_result(match, None, None)
        self._check_finished()
        return match

    def record_result(self, match_id: str, score_left, score_right):
        """Record a final score. The higher score wins; draws are rejected."""
        self._require_ongoing()
        for score in (score_left, score_right):
            if isinstance(score, bool) or not isinstance(score, int) or score < 0:
                raise BadScores(score_left=score_left, score_right=score_right)
        if score_left == score_right:
            raise DrawNotAllowed(score_left=score_left, score_right=score_right)

        left, right = resolve_opponents(self.bracket, match_id)
        winner = left.player_id if score_left > score_right else right.player_id
        match = set_winner(self.bracket, match_id, winner)
        self._store_result(match, score_left, score_right)
        self._check_finished()
        return match

    def clear_result(self, match_id: str):
        if self.status not in (ONGOING, FINISHED) or self.bracket is None:
            raise TournamentNotOngoing()
        match = clear_winner(self.bracket, match_id)
        # Drop results whose match no longer has that winner
        for key in list(self.results):
            if self.bracket.get_match(key).winner_id != self.results[key]['winner']:
                del self.results[key]
        if self.status == FINISHED and self.bracket.champion is None:
            self.status = ONGOING
            self.ended_at = None
            logger.info("Tournament %s reopened", self.slug)
        return match

    def _store_result(self, match, score_left, score_right):
        left, right = resolve_opponents(self.bracket, match.id)
        loser = right.player_id if match.winner_id == left.player_id else left.player_id
        self.results[match.id] = {
            'score_left': score_left,
            'score_right': score_right,
            'winner': match.winner_id,
            'loser': loser,
        }

    def _check_finished(self):
        if self.bracket is not None and self.bracket.champion is not None:
            self.status = FINISHED
            self.ended_at = _now()
            logger.info("Tournament %s won by %s", self.slug, self.bracket.champion)

    @property
    def champion(self):
        return self.bracket.champion if self.bracket else None

    # Serialization

    def to_dict(self, include_resolved=False) -> Dict:
        return {
            'slug': self.slug,
            'title': self.title,
            'description': self.description,
            'max_players': self.max_players,
            'status': self.status,
            'participants': [p.to_dict() for p in self.participants],
            'bracket': bracket_to_dict(self.bracket, include_resolved) if self.bracket else None,
            'results': self.results,
            'created_at': self.created_at,
            'started_at': self.started_at,
            'ended_at': self.ended_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tournament':
        tournament = cls(
            title=data['title'],
            description=data.get('description'),
            max_players=data.get('max_players', DEFAULT_MAX_PLAYERS),
            slug=data.get('slug'),
        )
        tournament.status = data.get('status', REGISTRATION)
        tournament.participants = [Player.from_dict(p) for p in data.get('participants') or []]
        if data.get('bracket'):
            tournament.bracket = bracket_from_dict(data['bracket'])
        tournament.results = dict(data.get('results') or {})
        tournament.created_at = data.get('created_at', tournament.created_at)
        tournament.started_at = data.get('started_at')
        tournament.ended_at = data.get('ended_at')
        return tournament
