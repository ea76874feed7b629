"""
Unit tests for the in-memory session store.
"""

from datetime import timedelta

from worklife_coach.models.conversation import Session
from worklife_coach.utils.session_store import InMemorySessionStore


class TestInMemorySessionStore:
    def test_put_get_delete(self, fixed_now):
        store = InMemorySessionStore()
        session = Session(id="session-1", user_id="user-1", start_time=fixed_now, last_activity=fixed_now)

        store.put(session)
        assert store.get("session-1") is session
        assert len(store) == 1

        store.delete("session-1")
        assert store.get("session-1") is None
        assert store.list_ids() == []

    def test_delete_unknown_is_noop(self):
        store = InMemorySessionStore()

        store.delete("missing")

        assert len(store) == 0

    def test_idle_since(self, fixed_now):
        # Arrange
        store = InMemorySessionStore()
        store.put(Session(id="old", user_id="u", last_activity=fixed_now - timedelta(hours=2)))
        store.put(Session(id="fresh", user_id="u", last_activity=fixed_now))

        # Act
        idle = store.idle_since(fixed_now - timedelta(minutes=30))

        # Assert
        assert idle == ["old"]
