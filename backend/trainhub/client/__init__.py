"""
Train Hub client core.

Router, Session, Transport, the two soft-delete stores and the views,
running on asyncio against the JSON API.
"""
from .app import TrainHubApp
from .config import ClientConfig
from .errors import (
    ApplicationError,
    ClientError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    NotSignedInError,
    OwnershipError,
    RenderError,
    TransitionError,
    TransportError,
    ValidationError,
    user_message,
)
from .inventory import InventoryStore
from .router import Route, Router
from .session import Principal, Session
from .training import TrainingDocument, TrainingDraft, TrainingStore
from .transport import Transport

__all__ = [
    "TrainHubApp",
    "ClientConfig",
    "ApplicationError",
    "ClientError",
    "MalformedResponseError",
    "NetworkError",
    "NotFoundError",
    "NotSignedInError",
    "OwnershipError",
    "RenderError",
    "TransitionError",
    "TransportError",
    "ValidationError",
    "user_message",
    "InventoryStore",
    "Route",
    "Router",
    "Principal",
    "Session",
    "TrainingDocument",
    "TrainingDraft",
    "TrainingStore",
    "Transport",
]
