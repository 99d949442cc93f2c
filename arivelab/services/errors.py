"""Domain errors raised by services. Routers translate them into HTTP responses."""
from fastapi import HTTPException


class ArivelabError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class Forbidden(ArivelabError):
    status_code = 403


class NotFound(ArivelabError):
    status_code = 404


class ValidationError(ArivelabError):
    status_code = 400


class Conflict(ArivelabError):
    status_code = 409


class InvalidTransition(ArivelabError):
    """The registration state machine does not allow `action` from `current_status`."""
    status_code = 409

    def __init__(self, current_status, action):
        self.current_status = current_status
        self.action = action
        status = getattr(current_status, "value", current_status)
        act = getattr(action, "value", action)
        super().__init__(f"Cannot {act} an account whose status is {status}.")


def to_http(err: ArivelabError) -> HTTPException:
    return HTTPException(status_code=err.status_code, detail=err.detail)
