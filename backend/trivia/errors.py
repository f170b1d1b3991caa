"""Error taxonomy for room and game operations.

Services raise these; the app factory registers a single handler that turns
any of them into a JSON body ``{"error": ..., "kind": ...}`` with the
matching status code.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException


class GameError(Exception):
    status_code = 400
    kind = 'error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message, 'kind': self.kind}


class ValidationError(GameError):
    """A required field is missing, blank or malformed."""
    status_code = 400
    kind = 'validation'


class NotFoundError(GameError):
    status_code = 404
    kind = 'not_found'


class AuthorizationError(GameError):
    """A non-host attempted a host-only transition."""
    status_code = 403
    kind = 'authorization'


class InvalidStateError(GameError):
    """The operation is not valid in the room's current phase."""
    status_code = 409
    kind = 'invalid_state'


class ExhaustedError(GameError):
    status_code = 404
    kind = 'exhausted'


class StoreError(GameError):
    status_code = 500
    kind = 'store'


def register_error_handlers(flask_app) -> None:
    @flask_app.errorhandler(GameError)
    def handle_game_error(exc: GameError):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({'error': exc.description}), exc.code
