"""
Session persistence and derived authentication state.

The session is stored as one JSON record so that every read observes a
complete (access_token, refresh_token, username, expires_at) tuple.
Writes are serialized through a single lock; reads never take it.

Usage:
    store = SessionStore(InMemoryKeyValueStore())
    await store.save("tok", username="alice", expires_at=now_ms() + 3_600_000,
                     refresh_token="r1")
    state = await store.auth_state()
    state.is_authenticated  # True until expires_at
"""

import asyncio
import time
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from redditsync.errors import StorageError
from redditsync.models.session import AuthState, Session
from redditsync.observability import get_logger
from redditsync.observability.metrics import session_events_total
from redditsync.storage.kv import KeyValueStore

logger = get_logger(__name__)

SESSION_KEY = "auth_session"

AuthStateListener = Callable[[AuthState], None]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SessionStore:
    """
    Persists the current session and derives auth state from it.

    Token refresh is not performed here; the OAuth client records its
    results through `save`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], int] = now_ms,
        key: str = SESSION_KEY,
    ) -> None:
        self._store = store
        self._clock = clock
        self._key = key
        self._write_lock = asyncio.Lock()
        self._listeners: list[AuthStateListener] = []

    async def read(self) -> Session:
        """
        Return the persisted session without touching the network.

        Raises:
            StorageError: the backing store failed
        """
        raw = await self._store.get(self._key)
        if not raw:
            return Session.empty()
        try:
            return Session.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Discarding unreadable session record: {e}")
            return Session.empty()

    async def save(
        self,
        access_token: str,
        username: Optional[str],
        expires_at: int,
        refresh_token: Optional[str] = None,
    ) -> Session:
        """
        Upsert the session. A missing refresh token keeps the stored one,
        since refresh responses may omit it.
        """
        async with self._write_lock:
            current = await self.read()
            session = Session(
                access_token=access_token,
                refresh_token=refresh_token if refresh_token is not None else current.refresh_token,
                username=username,
                expires_at=expires_at,
            )
            await self._write(session)
            session_events_total.labels(event="save").inc()
            logger.info(
                "Session saved",
                extra={"username": username, "expires_at": expires_at},
            )
            self._notify(session)
            return session

    async def clear(self) -> None:
        """Remove the session; subsequent reads return the empty session."""
        async with self._write_lock:
            try:
                await self._store.delete(self._key)
            except StorageError:
                session_events_total.labels(event="storage_error").inc()
                raise
            session_events_total.labels(event="clear").inc()
            logger.info("Session cleared")
            self._notify(Session.empty())

    def now(self) -> int:
        """Store clock, epoch milliseconds."""
        return self._clock()

    def is_expired(self, session: Session) -> bool:
        """True once the clock reaches `expires_at`. No I/O."""
        return session.is_expired(self._clock())

    async def auth_state(self) -> AuthState:
        """
        Auth state derived from a single read.

        Storage failures degrade to the unauthenticated state.
        """
        try:
            session = await self.read()
        except StorageError as e:
            session_events_total.labels(event="storage_error").inc()
            logger.warning(f"Session unavailable, treating as signed out: {e}")
            return AuthState()
        return AuthState.from_session(session, self._clock())

    async def auth_header(self) -> Optional[str]:
        """`bearer <token>` for an authenticated session, else None."""
        state = await self.auth_state()
        if not state.is_authenticated:
            return None
        return f"bearer {state.access_token}"

    def subscribe(self, listener: AuthStateListener) -> Callable[[], None]:
        """
        Register a listener called with the state derived from each write.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _write(self, session: Session) -> None:
        try:
            await self._store.set(self._key, session.model_dump_json())
        except StorageError:
            session_events_total.labels(event="storage_error").inc()
            raise

    def _notify(self, session: Session) -> None:
        state = AuthState.from_session(session, self._clock())
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.warning(f"Auth state listener failed: {e}")
