"""
Conversion between a Bracket and plain nested dicts/lists.

The plain form is what gets written to YAML or returned as JSON:

    {'rounds': [[{'id': 'R1-M1', 'round': 0, 'order': 0,
                  'left': {'type': 'player', 'player_id': 'alice'},
                  'right': {'type': 'bye'},
                  'winner_id': 'alice', 'started': False,
                  'status': 'completed'}, ...], ...]}

Statuses are written for readers but ignored on load: they are always
recomputed from winners and slots.
"""
from typing import Dict

from .builder import check_invariants, round_names
from .errors import SnapshotError
from .models import Bracket, ByeSlot, Match, PlayerSlot, WinnerOfSlot
from .registry import invalidate_downstream, settle
from .resolver import resolve


def slot_to_dict(slot) -> Dict:
    if isinstance(slot, PlayerSlot):
        return {'type': 'player', 'player_id': slot.player_id}
    elif isinstance(slot, WinnerOfSlot):
        return {'type': 'winner_of', 'match_id': slot.match_id}
    elif isinstance(slot, ByeSlot):
        return {'type': 'bye'}
    raise SnapshotError(f"Cannot serialize slot {slot!r}")


def slot_from_dict(data):
    if not isinstance(data, dict):
        raise SnapshotError(f"Slot must be a mapping, got {data!r}")
    slot_type = data.get('type')
    try:
        if slot_type == 'player':
            return PlayerSlot(data['player_id'])
        elif slot_type == 'winner_of':
            return WinnerOfSlot(data['match_id'])
        elif slot_type == 'bye':
            return ByeSlot()
    except KeyError as e:
        raise SnapshotError(f"Slot {data!r} is missing {e}")
    raise SnapshotError(f"Unknown slot type: {slot_type!r}")


def resolved_to_dict(value) -> Dict:
    if value.is_player:
        return {'type': 'player', 'player_id': value.player_id}
    return {'type': value.kind}


def match_to_dict(match: Match, bracket: Bracket = None) -> Dict:
    data = {
        'id': match.id,
        'round': match.round,
        'order': match.order,
        'left': slot_to_dict(match.left),
        'right': slot_to_dict(match.right),
        'winner_id': match.winner_id,
        'started': match.started,
        'status': match.status,
    }
    if bracket is not None:
        data['resolved'] = {
            'left': resolved_to_dict(resolve(match.left, bracket)),
            'right': resolved_to_dict(resolve(match.right, bracket)),
        }
    return data


def bracket_to_dict(bracket: Bracket, include_resolved: bool = False) -> Dict:
    """Plain structure for the bracket. Resolved opponents are added for display."""
    source = bracket if include_resolved else None
    data = {
        'rounds': [[match_to_dict(match, source) for match in round_matches]
                   for round_matches in bracket.rounds],
    }
    if include_resolved:
        data['round_names'] = round_names(bracket)
        data['champion'] = bracket.champion
    return data


def bracket_from_dict(data: Dict) -> Bracket:
    """
    Rebuild a bracket from its plain structure.

    Structure is checked, winners that don't belong to their match are
    dropped, then statuses and byes are recomputed.
    """
    if not isinstance(data, dict) or not isinstance(data.get('rounds'), list):
        raise SnapshotError("Snapshot must contain a list of rounds")

    rounds = []
    for round_index, round_data in enumerate(data['rounds']):
        if not isinstance(round_data, list):
            raise SnapshotError(f"Round {round_index} must be a list of matches")
        round_matches = []
        for order, match_data in enumerate(round_data):
            if not isinstance(match_data, dict) or 'id' not in match_data:
                raise SnapshotError(f"Match {order} of round {round_index} is malformed")
            round_matches.append(Match(
                id=match_data['id'],
                round=match_data.get('round', round_index),
                order=match_data.get('order', order),
                left=slot_from_dict(match_data.get('left')),
                right=slot_from_dict(match_data.get('right')),
                winner_id=match_data.get('winner_id'),
                started=bool(match_data.get('started', False)),
            ))
        rounds.append(round_matches)

    bracket = Bracket(rounds)
    check_invariants(bracket)
    invalidate_downstream(bracket)
    settle(bracket)
    return bracket
