from __future__ import annotations

import os
from dataclasses import dataclass, field


def _default_state_file() -> str:
    return os.path.join(os.path.expanduser("~"), ".trainhub", "state.json")


@dataclass
class ClientConfig:
    """Client settings with environment variable overrides."""
    api_base: str = "http://127.0.0.1:3000"
    state_file: str = field(default_factory=_default_state_file)
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            api_base=os.environ.get("TRAINHUB_API_BASE", "http://127.0.0.1:3000"),
            state_file=os.environ.get("TRAINHUB_STATE_FILE", _default_state_file()),
            timeout=float(os.environ.get("TRAINHUB_TIMEOUT", "30")),
        )
