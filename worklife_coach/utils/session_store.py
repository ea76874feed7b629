"""Session store: in-process tracking of live conversation sessions.

At most one in-flight turn per session id; callers serialize turns on the
same session. The store itself does not lock.
"""

import abc
from datetime import datetime
from typing import Optional

from worklife_coach.models.conversation import Session


class SessionStore(abc.ABC):
    @abc.abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        ...

    @abc.abstractmethod
    def put(self, session: Session) -> None:
        ...

    @abc.abstractmethod
    def delete(self, session_id: str) -> None:
        ...

    @abc.abstractmethod
    def list_ids(self) -> list[str]:
        ...

    def idle_since(self, cutoff: datetime) -> list[str]:
        """Ids of sessions whose last activity is older than ``cutoff``."""
        idle = []
        for session_id in self.list_ids():
            session = self.get(session_id)
            if session is not None and session.last_activity < cutoff:
                idle.append(session_id)
        return idle


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def put(self, session: Session) -> None:
        self._sessions[session.id] = session

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def list_ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
