"""
Client-side session state.

Anonymous --login--> Authenticated(session) --logout | session_expired--> Anonymous

Each transition swaps the whole state in one assignment. Anonymous is the
initial state and can always be re-entered; tearing down an already anonymous
state is a no-op.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    token: str
    token_type: str = "Bearer"
    expires_in_seconds: int = 0

    def __post_init__(self):
        if not self.token:
            raise ValueError("Session token must not be empty")
        if self.expires_in_seconds < 0:
            raise ValueError("expires_in_seconds must be >= 0")

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.token}"


class Phase(Enum):
    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATED = "AUTHENTICATED"


@dataclass(frozen=True)
class _State:
    phase: Phase
    session: Optional[Session] = None


_ANONYMOUS = _State(Phase.ANONYMOUS)


class SessionStore:
    """Keeps the session in a JSON file so it survives restarts."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Session]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return Session(
                token=raw["token"],
                token_type=raw.get("token_type", "Bearer"),
                expires_in_seconds=int(raw.get("expires_in_seconds", 0)),
            )
        except FileNotFoundError:
            return None
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

    def save(self, session: Session):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(asdict(session)), encoding="utf-8")
        os.replace(tmp, self.path)

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class SessionState:
    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store
        self._state = _ANONYMOUS

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def session(self) -> Optional[Session]:
        return self._state.session

    @property
    def is_authenticated(self) -> bool:
        return self._state.phase is Phase.AUTHENTICATED

    def restore(self) -> bool:
        """Adopt a persisted session, if any. Returns True when one was found."""
        if self.store is None:
            return False
        session = self.store.load()
        if session is None:
            return False
        self._state = _State(Phase.AUTHENTICATED, session)
        logger.info("Restored stored session")
        return True

    def login(self, session: Session):
        if self.store is not None:
            self.store.save(session)
        self._state = _State(Phase.AUTHENTICATED, session)
        logger.info("Session started")

    def logout(self):
        self._teardown("logout")

    def session_expired(self):
        self._teardown("session expired")

    def _teardown(self, reason: str):
        was_authenticated = self.is_authenticated
        if self.store is not None:
            self.store.clear()
        self._state = _ANONYMOUS
        if was_authenticated:
            logger.info(f"Session ended ({reason})")
