"""
Flask web application for knockout tournaments.
"""
import os
import logging
from flask import Flask, request, jsonify
from knockout.errors import BracketError
from knockout.models import Player
from knockout.resolver import resolve_opponents
from knockout.snapshot import match_to_dict
from knockout.store import TournamentStore

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKET_DATA_DIR', os.path.join(BASE_DIR, 'data'))
LOCK_TIMEOUT = float(os.environ.get('BRACKET_LOCK_TIMEOUT', '10'))

if not app.debug:
    app.logger.setLevel(logging.INFO)


def get_store() -> TournamentStore:
    """Store for the configured data directory."""
    return TournamentStore(DATA_DIR, lock_timeout=LOCK_TIMEOUT)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _player_view(tournament, value) -> dict:
    """Resolved slot with the player's alias and avatar when it is a player."""
    if not value.is_player:
        return {'type': value.kind}
    player = tournament.get_player(value.player_id)
    return {
        'type': 'player',
        'player_id': value.player_id,
        'alias': player.alias if player else str(value.player_id),
        'avatar': player.avatar if player else None,
    }


def _match_view(tournament, match) -> dict:
    left, right = resolve_opponents(tournament.bracket, match.id)
    data = match_to_dict(match)
    data['opponents'] = {
        'left': _player_view(tournament, left),
        'right': _player_view(tournament, right),
    }
    data['result'] = tournament.results.get(match.id)
    return data


def _summary(tournament) -> dict:
    return {
        'slug': tournament.slug,
        'title': tournament.title,
        'description': tournament.description,
        'status': tournament.status,
        'max_players': tournament.max_players,
        'players': len(tournament.participants),
        'champion': tournament.champion,
        'created_at': tournament.created_at,
    }


@app.errorhandler(BracketError)
def handle_bracket_error(error):
    if error.status >= 500:
        app.logger.error(f'{error.code}: {error}')
    return jsonify(error.to_dict()), error.status


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    """List all tournaments, newest first."""
    tournaments = get_store().list()
    return jsonify({'tournaments': [_summary(t) for t in tournaments]})


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    """Create a new tournament in registration."""
    data = _json_body()
    tournament = get_store().create(
        data.get('title', ''),
        data.get('description'),
        data.get('max_players', 8),
    )
    app.logger.info(f'Tournament "{tournament.title}" created as {tournament.slug}')
    return jsonify(_summary(tournament)), 201


@app.route('/api/tournaments/<slug>', methods=['GET'])
def api_get_tournament(slug):
    """Tournament details including the bracket with resolved opponents."""
    tournament = get_store().load(slug)
    return jsonify(tournament.to_dict(include_resolved=True))


@app.route('/api/tournaments/<slug>/join', methods=['POST'])
def api_join_tournament(slug):
    data = _json_body()
    if data.get('id') in (None, ''):
        return jsonify({'error': 'Missing player id'}), 400
    player = Player(id=data['id'], alias=data.get('alias'), avatar=data.get('avatar'))
    with get_store().transaction(slug) as tournament:
        joined = tournament.join(player)
    return jsonify({
        'success': True,
        'joined': joined,
        'participants': [p.to_dict() for p in tournament.participants],
    })


@app.route('/api/tournaments/<slug>/start', methods=['POST'])
def api_start_tournament(slug):
    """Seed the bracket and open play."""
    data = _json_body()
    with get_store().transaction(slug) as tournament:
        tournament.start(shuffle=data.get('shuffle') is True)
    app.logger.info(f'Tournament {slug} started')
    return jsonify(tournament.to_dict(include_resolved=True))


@app.route('/api/tournaments/<slug>/reseed', methods=['POST'])
def api_reseed_tournament(slug):
    """Discard the bracket and all results, and seed again."""
    data = _json_body()
    with get_store().transaction(slug) as tournament:
        tournament.reseed(shuffle=data.get('shuffle') is True)
    app.logger.info(f'Tournament {slug} reseeded')
    return jsonify(tournament.to_dict(include_resolved=True))


@app.route('/api/tournaments/<slug>/cancel', methods=['POST'])
def api_cancel_tournament(slug):
    with get_store().transaction(slug) as tournament:
        tournament.cancel()
    return jsonify({'success': True, 'status': tournament.status})


@app.route('/api/tournaments/<slug>/ready', methods=['GET'])
def api_ready_matches(slug):
    """Matches that can be started right now."""
    tournament = get_store().load(slug)
    return jsonify({'matches': [_match_view(tournament, m) for m in tournament.ready_matches()]})


@app.route('/api/tournaments/<slug>/matches/<match_id>', methods=['GET'])
def api_get_match(slug, match_id):
    tournament = get_store().load(slug)
    if tournament.bracket is None:
        return jsonify({'error': 'Tournament has not started'}), 409
    match = tournament.bracket.get_match(match_id)
    return jsonify(_match_view(tournament, match))


@app.route('/api/tournaments/<slug>/matches/<match_id>/start', methods=['POST'])
def api_start_match(slug, match_id):
    """Mark a match in progress and hand back the two players to play it."""
    with get_store().transaction(slug) as tournament:
        left, right = tournament.start_match(match_id)
    return jsonify({
        'success': True,
        'match_id': match_id,
        'players': [left, right],
    })


@app.route('/api/tournaments/<slug>/matches/<match_id>/result', methods=['POST'])
def api_record_result(slug, match_id):
    """Record a result, either as a score or as a winner id."""
    data = _json_body()
    has_scores = 'score_left' in data or 'score_right' in data
    if not has_scores and data.get('winner') in (None, ''):
        return jsonify({'error': 'Provide score_left and score_right, or winner'}), 400

    with get_store().transaction(slug) as tournament:
        if has_scores:
            match = tournament.record_result(match_id, data.get('score_left'), data.get('score_right'))
        else:
            match = tournament.set_winner(match_id, data['winner'])
        view = _match_view(tournament, match)

    if tournament.champion is not None:
        app.logger.info(f'Tournament {slug} finished, champion {tournament.champion}')
    return jsonify({
        'success': True,
        'match': view,
        'champion': tournament.champion,
        'status': tournament.status,
    })


@app.route('/api/tournaments/<slug>/matches/<match_id>/clear', methods=['POST'])
def api_clear_result(slug, match_id):
    """Clear a match result. Later results that depended on it are cleared too."""
    with get_store().transaction(slug) as tournament:
        tournament.clear_result(match_id)
    return jsonify({
        'success': True,
        'status': tournament.status,
        'bracket': tournament.to_dict(include_resolved=True)['bracket'],
    })


if __name__ == '__main__':
    app.run(debug=True)
