"""
Explicit authentication session for the API client.

The session owns the token pair and the cached user profile; a TokenStore
decides where the tokens survive between runs.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenPair":
        """Build a pair from an auth endpoint response body."""
        try:
            return cls(access_token=payload["access_token"], refresh_token=payload["refresh_token"])
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Response does not contain a token pair: {exc}") from exc


class TokenStore:
    """Persistence for a session's state. The default keeps nothing."""

    def load(self) -> Optional[Dict[str, Any]]:
        return None

    def save(self, state: Dict[str, Any]) -> None:
        pass

    def clear(self) -> None:
        pass


class MemoryTokenStore(TokenStore):
    def __init__(self, state: Optional[Dict[str, Any]] = None):
        self.state = dict(state) if state else None

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self.state) if self.state else None

    def save(self, state: Dict[str, Any]) -> None:
        self.state = dict(state)

    def clear(self) -> None:
        self.state = None


class FileTokenStore(TokenStore):
    """Keeps the session in a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

    def save(self, state: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class AuthSession:
    """Token pair plus the profile of the logged-in user."""

    def __init__(self, store: Optional[TokenStore] = None):
        self.store = store or TokenStore()
        self.tokens: Optional[TokenPair] = None
        self.user: Optional[Dict[str, Any]] = None

        state = self.store.load()
        if state and state.get("access_token") and state.get("refresh_token"):
            self.tokens = TokenPair(state["access_token"], state["refresh_token"])
            self.user = state.get("user")

    @property
    def access_token(self) -> Optional[str]:
        return self.tokens.access_token if self.tokens else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self.tokens.refresh_token if self.tokens else None

    @property
    def is_authenticated(self) -> bool:
        return self.tokens is not None

    def set_tokens(self, tokens: TokenPair) -> None:
        self.tokens = tokens
        self._persist()

    def set_user(self, user: Optional[Dict[str, Any]]) -> None:
        self.user = user
        self._persist()

    def clear(self) -> None:
        self.tokens = None
        self.user = None
        self.store.clear()

    def _persist(self) -> None:
        if self.tokens is None:
            return
        state: Dict[str, Any] = asdict(self.tokens)
        state["user"] = self.user
        self.store.save(state)
