"""
Data model for single elimination brackets.

Matches are addressed by id through the bracket's index; slots never hold
references to other Match objects.
"""
from typing import Dict, Iterator, List, Optional

from .errors import MatchNotFound

# Match statuses (derived, see status.refresh_statuses)
PENDING = 'pending'
READY = 'ready'
IN_PROGRESS = 'in_progress'
COMPLETED = 'completed'


def is_valid_player_id(player_id) -> bool:
    """Player ids are strings or integers (bools excluded)."""
    return isinstance(player_id, str) or (isinstance(player_id, int) and not isinstance(player_id, bool))


class Player:
    """Roster entry. The bracket itself only ever stores the id."""

    def __init__(self, id, alias=None, avatar=None):
        self.id = id
        self.alias = alias if alias else str(id)
        self.avatar = avatar

    def to_dict(self):
        return {'id': self.id, 'alias': self.alias, 'avatar': self.avatar}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return cls(id=data)
        return cls(id=data['id'], alias=data.get('alias'), avatar=data.get('avatar'))

    def __eq__(self, other):
        return isinstance(other, Player) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Player(id={self.id}, alias={self.alias})"


class PlayerSlot:
    kind = 'player'

    def __init__(self, player_id):
        self.player_id = player_id

    def __eq__(self, other):
        return isinstance(other, PlayerSlot) and self.player_id == other.player_id

    def __hash__(self):
        return hash((self.kind, self.player_id))

    def __repr__(self):
        return f"PlayerSlot({self.player_id!r})"


class WinnerOfSlot:
    """Whoever wins match `match_id`. Only legal from round 1 on."""
    kind = 'winner_of'

    def __init__(self, match_id):
        self.match_id = match_id

    def __eq__(self, other):
        return isinstance(other, WinnerOfSlot) and self.match_id == other.match_id

    def __hash__(self):
        return hash((self.kind, self.match_id))

    def __repr__(self):
        return f"WinnerOfSlot({self.match_id!r})"


class ByeSlot:
    """Round 0 padding."""
    kind = 'bye'

    def __eq__(self, other):
        return isinstance(other, ByeSlot)

    def __hash__(self):
        return hash(self.kind)

    def __repr__(self):
        return "ByeSlot()"


class ResolvedValue:
    """What a slot currently stands for: a player, a bye, or nothing yet."""
    PLAYER = 'player'
    BYE = 'bye'
    UNRESOLVED = 'unresolved'

    def __init__(self, kind, player_id=None):
        self.kind = kind
        self.player_id = player_id

    @classmethod
    def player(cls, player_id):
        return cls(cls.PLAYER, player_id)

    @property
    def is_player(self):
        return self.kind == self.PLAYER

    @property
    def is_bye(self):
        return self.kind == self.BYE

    @property
    def is_unresolved(self):
        return self.kind == self.UNRESOLVED

    def __eq__(self, other):
        return (isinstance(other, ResolvedValue)
                and self.kind == other.kind and self.player_id == other.player_id)

    def __hash__(self):
        return hash((self.kind, self.player_id))

    def __repr__(self):
        if self.is_player:
            return f"Resolved(player={self.player_id!r})"
        return f"Resolved({self.kind})"


BYE = ResolvedValue(ResolvedValue.BYE)
UNRESOLVED = ResolvedValue(ResolvedValue.UNRESOLVED)


def match_code(round_index: int, order: int) -> str:
    """Stable id for the match at (round, order), e.g. R1-M3."""
    return f"R{round_index + 1}-M{order + 1}"


class Match:
    def __init__(self, id, round, order, left, right, winner_id=None, status=PENDING, started=False):
        self.id = id
        self.round = round
        self.order = order
        self.left = left
        self.right = right
        self.winner_id = winner_id
        self.status = status
        # Set by mark_in_progress; keeps the status sticky at in_progress
        self.started = started

    @property
    def slots(self):
        return (self.left, self.right)

    def state(self):
        """Comparable tuple of everything that can change on a match."""
        return (self.id, self.round, self.order, self.left, self.right,
                self.winner_id, self.status, self.started)

    def __repr__(self):
        return (f"Match(id={self.id}, left={self.left}, right={self.right}, "
                f"winner_id={self.winner_id}, status={self.status})")


class Bracket:
    """Rounds of matches plus an id index built once at construction."""

    def __init__(self, rounds: List[List[Match]]):
        self.rounds = rounds
        self._index: Dict[str, Match] = {}
        for match in self.all_matches():
            self._index[match.id] = match

    def all_matches(self) -> Iterator[Match]:
        """All matches ordered by (round, order)."""
        for round_matches in self.rounds:
            for match in round_matches:
                yield match

    def get_match(self, match_id: str) -> Match:
        match = self._index.get(match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found", match_id=match_id)
        return match

    def has_match(self, match_id: str) -> bool:
        return match_id in self._index

    @property
    def size(self) -> int:
        return 2 * len(self.rounds[0]) if self.rounds else 0

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    @property
    def final(self) -> Optional[Match]:
        return self.rounds[-1][0] if self.rounds else None

    @property
    def champion(self):
        final = self.final
        return final.winner_id if final else None

    @property
    def player_ids(self) -> list:
        """Entrants in seeding order."""
        ids = []
        for match in self.rounds[0] if self.rounds else []:
            for slot in match.slots:
                if isinstance(slot, PlayerSlot):
                    ids.append(slot.player_id)
        return ids

    def state(self):
        return [match.state() for match in self.all_matches()]

    def __len__(self):
        return len(self._index)

    def __repr__(self):
        return f"Bracket(size={self.size}, rounds={self.total_rounds}, matches={len(self)})"
