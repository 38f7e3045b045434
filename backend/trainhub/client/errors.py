"""
Client error taxonomy.

    ValidationError          bad input, raised before any request is made
    TransportError           the request did not produce a usable reply
      NetworkError             server unreachable / timed out
      MalformedResponseError   non-JSON or undecodable reply
    ApplicationError         the server answered and said no ({"ok": false})
      OwnershipError           acting principal is not the creator
      NotFoundError            referenced record does not exist
      TransitionError          lifecycle move not allowed from current state
      NotSignedInError         operation needs a principal
    RenderError              a view raised while rendering (caught by Router)

Only user_message() output is shown to people.
"""
from __future__ import annotations

from ..validation import ValidationError


MESSAGES = {
    "network": "Unable to connect to server. Please check your connection.",
    "malformed": "Server returned an invalid response. Please try again.",
    "generic": "An error occurred. Please try again.",
    "signed_out": "Please sign in to continue.",
}


class ClientError(Exception):
    pass


class TransportError(ClientError):
    pass


class NetworkError(TransportError):
    pass


class MalformedResponseError(TransportError):
    pass


class ApplicationError(ClientError):
    def __init__(self, message: str, *, code: str | None = None, payload: dict | None = None):
        super().__init__(message)
        self.code = code
        self.payload = payload or {}


class OwnershipError(ApplicationError):
    pass


class NotFoundError(ApplicationError):
    pass


class TransitionError(ApplicationError):
    pass


class NotSignedInError(ApplicationError):
    def __init__(self):
        super().__init__(MESSAGES["signed_out"], code="signed_out")


class RenderError(ClientError):
    """Wraps the exception a render function raised for `path`."""

    def __init__(self, path: str, original: BaseException):
        super().__init__(str(original))
        self.path = path
        self.original = original


_CODE_CLASSES = {
    "forbidden": OwnershipError,
    "not_found": NotFoundError,
    "lifecycle": TransitionError,
}


def application_error(payload: dict, default: str = MESSAGES["generic"]) -> ApplicationError:
    """Build the ApplicationError subclass matching a server {"ok": false} reply."""
    code = payload.get("code")
    message = payload.get("error") or default
    cls = _CODE_CLASSES.get(code, ApplicationError)
    return cls(message, code=code, payload=payload)


def user_message(exc: BaseException) -> str:
    """Translate any failure into a short, non-technical message."""
    if isinstance(exc, NetworkError):
        return MESSAGES["network"]
    if isinstance(exc, MalformedResponseError):
        return MESSAGES["malformed"]
    if isinstance(exc, (ApplicationError, ValidationError)):
        message = str(exc).strip()
        if not message:
            return MESSAGES["generic"]
        return message[0].upper() + message[1:]
    return MESSAGES["generic"]


__all__ = [
    "ValidationError",
    "ClientError",
    "TransportError",
    "NetworkError",
    "MalformedResponseError",
    "ApplicationError",
    "OwnershipError",
    "NotFoundError",
    "TransitionError",
    "NotSignedInError",
    "RenderError",
    "MESSAGES",
    "application_error",
    "user_message",
]
