"""In-memory store for single-use password recovery tokens.

Tokens live only in this process. They are lost on restart and are not
shared between server instances.
"""

import time
import uuid
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from asistencia.core import config


@dataclass(frozen=True)
class RecoveryGrant:
    user_id: int
    expires_at: float


class RecoveryTokenStore:
    """Maps opaque tokens to user ids until they are consumed or expire.

    Expiry is checked on every read, and expired entries are swept each time
    a new token is issued. ``consume`` removes the token in the same locked
    step that validates it, so two concurrent resets cannot both win.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._grants: dict[str, RecoveryGrant] = {}
        self._lock = Lock()

    def issue(self, user_id: int) -> str:
        token = str(uuid.uuid4())
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._grants[token] = RecoveryGrant(user_id=user_id, expires_at=now + self.ttl_seconds)
        return token

    def consume(self, token: str) -> RecoveryGrant | None:
        with self._lock:
            grant = self._grants.pop(token, None)
            if grant is None or grant.expires_at <= self._clock():
                return None
            return grant

    def restore(self, token: str, grant: RecoveryGrant) -> None:
        """Put back a consumed token whose reset could not be stored."""
        with self._lock:
            if grant.expires_at > self._clock():
                self._grants.setdefault(token, grant)

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired(self._clock())

    def _purge_expired(self, now: float) -> int:
        expired = [token for token, grant in self._grants.items() if grant.expires_at <= now]
        for token in expired:
            del self._grants[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._grants)


store = RecoveryTokenStore(ttl_seconds=config.RECOVERY_TOKEN_TTL_MINUTES * 60)
