"""Categorical errors raised by the room service.

Route handlers let these propagate; the app-level handler registered in
``create_app`` renders them as ``{"error": message}`` with the matching
HTTP status.
"""


class RoomError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class NotFound(RoomError):
    status_code = 404


class RuleViolation(RoomError):
    status_code = 400


class Forbidden(RoomError):
    status_code = 403
