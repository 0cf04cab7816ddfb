"""Process-wide store mapping opaque session ids to session records."""

import abc
import secrets
import threading
from typing import Dict, Optional

from lcp.models import SessionRecord


class SessionStore(abc.ABC):
    """Key-value contract for session records.

    Unknown ids behave exactly like ids that were never issued. Records
    are kept until deleted; there is no expiry and no size bound.
    """

    @abc.abstractmethod
    def create(self, record: SessionRecord) -> str:
        """Store a record under a fresh unguessable id and return the id."""

    @abc.abstractmethod
    def get(self, session_id: Optional[str]) -> Optional[SessionRecord]:
        """Return the record for an id, or None."""

    @abc.abstractmethod
    def update(self, session_id: str, record: SessionRecord) -> None:
        """Replace the record for an existing id; unknown ids are ignored."""

    @abc.abstractmethod
    def delete(self, session_id: Optional[str]) -> None:
        """Forget an id. Deleting an unknown id is a no-op."""

    @abc.abstractmethod
    def __len__(self) -> int:
        ...


class InMemorySessionStore(SessionStore):
    """Dict-backed store guarded by a single lock."""

    def __init__(self) -> None:
        self._records: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(32)

    def create(self, record: SessionRecord) -> str:
        with self._lock:
            session_id = self.new_session_id()
            while session_id in self._records:
                session_id = self.new_session_id()
            self._records[session_id] = record
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[SessionRecord]:
        if not session_id:
            return None
        with self._lock:
            return self._records.get(session_id)

    def update(self, session_id: str, record: SessionRecord) -> None:
        with self._lock:
            if session_id in self._records:
                self._records[session_id] = record

    def delete(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        with self._lock:
            self._records.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
