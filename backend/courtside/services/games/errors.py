"""Errors raised by the game engine.

Routes turn these into ``{'error': message}`` JSON bodies with the
matching status code; nothing here knows about Flask.
"""


class GameError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class ValidationError(GameError):
    status_code = 400


class AuthorizationError(GameError):
    status_code = 403


class NotFoundError(GameError):
    status_code = 404


class ConflictError(GameError):
    """Operation not allowed in the session's current status."""
    status_code = 409


class FoulLimitWarning(ConflictError):
    """Foul increment past the limit; repeat with confirmation to apply."""

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['requires_confirmation'] = True
        return payload
