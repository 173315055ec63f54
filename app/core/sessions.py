"""
Session stores mapping opaque session ids to customer ids.

The HTTP layer only talks to the SessionStore interface; the backend is
chosen by SESSION_BACKEND. Sessions older than SESSION_MAX_AGE_SECONDS are
dropped on lookup, matching the cookie lifetime.
"""

import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol, Tuple

from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.database import SessionLocal
from app.models.customer import CustomerSession


def new_session_id() -> str:
    """32 hex characters from the OS random source"""
    return secrets.token_hex(16)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SessionStore(Protocol):
    def get(self, sid: str) -> Optional[int]:
        ...

    def set(self, sid: str, customer_id: int) -> None:
        ...

    def delete(self, sid: str) -> None:
        ...


class InMemorySessionStore:
    """Process-local sessions; lost on restart."""

    def __init__(self, max_age_seconds: Optional[int] = None, clock: Callable[[], datetime] = utc_now):
        self.max_age = timedelta(seconds=max_age_seconds or settings.SESSION_MAX_AGE_SECONDS)
        self.clock = clock
        self._sessions: Dict[str, Tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def get(self, sid: str) -> Optional[int]:
        with self._lock:
            entry = self._sessions.get(sid)
            if entry is None:
                return None
            customer_id, created_at = entry
            if self.clock() - created_at > self.max_age:
                del self._sessions[sid]
                return None
            return customer_id

    def set(self, sid: str, customer_id: int) -> None:
        now = self.clock()
        with self._lock:
            expired = [k for k, (_, created_at) in self._sessions.items() if now - created_at > self.max_age]
            for k in expired:
                del self._sessions[k]
            self._sessions[sid] = (customer_id, now)

    def delete(self, sid: str) -> None:
        with self._lock:
            self._sessions.pop(sid, None)


class DatabaseSessionStore:
    """Sessions persisted in the customer_sessions table."""

    def __init__(
        self,
        session_factory: sessionmaker = SessionLocal,
        max_age_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.max_age = timedelta(seconds=max_age_seconds or settings.SESSION_MAX_AGE_SECONDS)
        self.clock = clock

    def get(self, sid: str) -> Optional[int]:
        db = self.session_factory()
        try:
            row = db.query(CustomerSession).filter(CustomerSession.sid == sid).first()
            if row is None:
                return None
            if self.clock() - _as_utc(row.created_at) > self.max_age:
                db.delete(row)
                db.commit()
                return None
            return row.customer_id
        finally:
            db.close()

    def set(self, sid: str, customer_id: int) -> None:
        db = self.session_factory()
        try:
            db.query(CustomerSession).filter(
                CustomerSession.created_at < self.clock() - self.max_age
            ).delete(synchronize_session=False)
            db.merge(CustomerSession(sid=sid, customer_id=customer_id, created_at=self.clock()))
            db.commit()
        finally:
            db.close()

    def delete(self, sid: str) -> None:
        db = self.session_factory()
        try:
            db.query(CustomerSession).filter(CustomerSession.sid == sid).delete()
            db.commit()
        finally:
            db.close()


def build_session_store(backend: str) -> SessionStore:
    if backend == "database":
        return DatabaseSessionStore()
    if backend == "memory":
        return InMemorySessionStore()
    raise ValueError(f"Unknown SESSION_BACKEND: {backend}")


session_store: SessionStore = build_session_store(settings.SESSION_BACKEND)


def get_session_store() -> SessionStore:
    """Dependency returning the application session store"""
    return session_store
