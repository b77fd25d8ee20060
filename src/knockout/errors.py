"""
Error catalog for the bracket engine and tournament layer.

Every error carries:
- code: internal string code (e.g. "MATCH_NOT_FOUND")
- status: HTTP status the web layer answers with
- message: human readable message
"""


class BracketError(Exception):
    """Base class for all engine errors."""
    code = 'BRACKET_ERROR'
    status = 400
    message = 'Bracket error'

    def __init__(self, message=None, **details):
        super().__init__(message or self.message)
        self.details = details

    def to_dict(self):
        data = {'error': str(self), 'code': self.code}
        if self.details:
            data['details'] = self.details
        return data


class InvalidRosterSize(BracketError):
    code = 'INVALID_ROSTER_SIZE'
    message = 'At least 2 players are required to build a bracket'


class DuplicatePlayer(BracketError):
    code = 'DUPLICATE_PLAYER'
    message = 'Player ids in a roster must be distinct'


class BadPlayerId(BracketError):
    code = 'BAD_PLAYER_ID'
    message = 'Player id must be a string or an integer'


class MatchNotFound(BracketError):
    code = 'MATCH_NOT_FOUND'
    status = 404
    message = 'Match not found'


class InvalidWinner(BracketError):
    code = 'INVALID_WINNER'
    status = 409
    message = 'Winner must be one of the two resolved opponents of a ready match'


class InvalidTransition(BracketError):
    code = 'INVALID_TRANSITION'
    status = 409
    message = 'Only a ready match can be marked in progress'


class InvariantViolation(BracketError):
    """Bracket structure is broken. Indicates a construction bug."""
    code = 'INVARIANT_VIOLATION'
    status = 500
    message = 'Bracket invariant violated'


class SnapshotError(BracketError):
    code = 'BAD_SNAPSHOT'
    message = 'Malformed bracket snapshot'


# Tournament layer

class TournamentNotFound(BracketError):
    code = 'TOURNAMENT_NOT_FOUND'
    status = 404
    message = 'Tournament not found'


class BadTitle(BracketError):
    code = 'BAD_TITLE'
    message = 'Tournament should have a title'


class NotInRegistration(BracketError):
    code = 'NOT_IN_REGISTRATION'
    message = 'Tournament not in registration'


class TournamentFull(BracketError):
    code = 'TOURNAMENT_FULL'
    message = 'Tournament already full'


class TournamentNotOngoing(BracketError):
    code = 'NOT_ONGOING'
    status = 409
    message = 'Tournament is not ongoing'


class BadScores(BracketError):
    code = 'BAD_SCORES'
    message = 'Scores must be non-negative integers'


class DrawNotAllowed(BracketError):
    code = 'DRAW_NOT_ALLOWED'
    message = 'Draws are not allowed'


class BadMaxPlayers(BracketError):
    code = 'BAD_MAX_PLAYERS'
    message = 'max_players must be an integer of at least 2'
