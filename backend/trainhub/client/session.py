# Overview: Locally persisted principal plus signup/login against the server.

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Optional

from ..validation import ValidationError, normalize_email, validate_signup
from .errors import MalformedResponseError, NotSignedInError
from .transport import Transport


logger = logging.getLogger(__name__)

STORAGE_KEY = "trainhub_current_v1"


class MemoryStorage:
    """Key/value storage that lives as long as the process."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """Key/value storage kept in a JSON file; survives restarts."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable state file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


@dataclass(frozen=True)
class Principal:
    name: str
    email: str

    @classmethod
    def from_dict(cls, data: Any) -> "Principal":
        if not isinstance(data, dict) or not data.get("email"):
            raise MalformedResponseError("Server returned an invalid response. Please try again.")
        return cls(name=str(data.get("name") or ""), email=str(data["email"]))


class Session:
    """
    Who is signed in on this client.

    The principal is stored under STORAGE_KEY as {"name", "email"} and is
    read back on every access, so a storage change made elsewhere (another
    Session over the same file) is seen immediately.
    """

    def __init__(self, transport: Transport, storage=None):
        self.transport = transport
        self.storage = storage if storage is not None else MemoryStorage()

    @property
    def current_user(self) -> Optional[Principal]:
        raw = self.storage.get(STORAGE_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return Principal(name=str(data.get("name") or ""), email=str(data["email"]))
        except (ValueError, TypeError, KeyError, AttributeError):
            return None

    def set_current_user(self, principal: Optional[Principal]) -> None:
        if principal is None:
            self.storage.remove(STORAGE_KEY)
        else:
            self.storage.set(STORAGE_KEY, json.dumps(asdict(principal)))

    def require_user(self) -> Principal:
        principal = self.current_user
        if principal is None:
            raise NotSignedInError()
        return principal

    def logout(self) -> None:
        self.set_current_user(None)

    async def signup(self, name: str, email: str, password: str, confirm: Optional[str] = None) -> Principal:
        name = (name or "").strip()
        email = normalize_email(email)
        validate_signup(name, email, password)
        if confirm is not None and confirm != password:
            raise ValidationError("Passwords do not match", "confirm")

        data = await self.transport.post("/signup", {"name": name, "email": email, "password": password})
        principal = Principal.from_dict(data.get("user"))
        self.set_current_user(principal)
        return principal

    async def login(self, email: str, password: str) -> Principal:
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        data = await self.transport.post("/login", {"email": email, "password": password})
        principal = Principal.from_dict(data.get("user"))
        self.set_current_user(principal)
        return principal
