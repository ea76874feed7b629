"""
Data Store Module

The persistence boundary of the coaching core. Every call is async and may
fail; callers catch ``DataStoreError`` (and ``OSError`` from file stores) and
degrade instead of propagating. Writes for one user must be serialized by the
caller; neither store locks.

Example Usage:
    from worklife_coach.utils.data_store import InMemoryDataStore, JsonlDataStore

    store = JsonlDataStore(data_dir="data")
    await store.save_user_profile(profile)
    profile = await store.get_user_profile("user-42")
    await store.track_action_completion("user-42", "action-3")
"""

import abc
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

import jsonlines
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from worklife_coach.models.conversation import Message, ProgressRecord
from worklife_coach.models.profile import UserProfile, utc_now
from worklife_coach.utils.errors import DataIntegrityError
from worklife_coach.utils.logger import get_logger
from worklife_coach.utils.validator import RecordValidator


class DataStore(abc.ABC):
    """Contract the coaching core expects from its persistence collaborator."""

    @abc.abstractmethod
    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    @abc.abstractmethod
    async def save_user_profile(self, profile: UserProfile) -> None:
        ...

    @abc.abstractmethod
    async def get_conversation_history(self, user_id: str) -> list[Message]:
        """All messages of every session associated with the user, oldest first."""

    @abc.abstractmethod
    async def save_conversation(self, session_id: str, messages: list[Message]) -> None:
        """Replace the stored history of one session."""

    @abc.abstractmethod
    async def track_action_completion(
        self, user_id: str, action_id: str, completed_at: Optional[datetime] = None
    ) -> None:
        ...

    @abc.abstractmethod
    async def get_progress_history(self, user_id: str) -> list[ProgressRecord]:
        ...

    @abc.abstractmethod
    async def associate_session_with_user(self, session_id: str, user_id: str) -> None:
        ...


class InMemoryDataStore(DataStore):
    """Process-local store. Profiles and messages are copied in and out."""

    def __init__(self) -> None:
        self._profiles: dict[str, UserProfile] = {}
        self._conversations: dict[str, list[Message]] = {}
        self._progress: defaultdict[str, list[ProgressRecord]] = defaultdict(list)
        self._session_users: dict[str, str] = {}

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        profile = self._profiles.get(user_id)
        return profile.model_copy(deep=True) if profile else None

    async def save_user_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.user_id] = profile.model_copy(deep=True)

    async def get_conversation_history(self, user_id: str) -> list[Message]:
        messages: list[Message] = []
        for session_id, owner in self._session_users.items():
            if owner == user_id:
                messages.extend(self._conversations.get(session_id, []))
        messages.sort(key=lambda m: m.timestamp)
        return [m.model_copy(deep=True) for m in messages]

    async def save_conversation(self, session_id: str, messages: list[Message]) -> None:
        self._conversations[session_id] = [m.model_copy(deep=True) for m in messages]

    async def track_action_completion(
        self, user_id: str, action_id: str, completed_at: Optional[datetime] = None
    ) -> None:
        completed_at = completed_at or utc_now()
        self._progress[user_id].append(
            ProgressRecord(user_id=user_id, action_id=action_id, completed_at=completed_at)
        )
        profile = self._profiles.get(user_id)
        if profile is not None:
            profile.mark_action_completed(action_id, completed_at)

    async def get_progress_history(self, user_id: str) -> list[ProgressRecord]:
        return [r.model_copy() for r in self._progress.get(user_id, [])]

    async def associate_session_with_user(self, session_id: str, user_id: str) -> None:
        self._session_users[session_id] = user_id


def _retry_on_io_error(func: Callable) -> Callable:
    return retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )(func)


class JsonlDataStore(DataStore):
    """Append-only JSONL store, one file per record kind.

    Files under ``data_dir``:
        profiles.jsonl       one profile snapshot per save, latest wins per user_id
        conversations.jsonl  one history snapshot per save, latest wins per session_id
        progress.jsonl       one line per completed action
        sessions.jsonl       session -> user associations

    Profile snapshots are checked against ``user_profile_schema.json`` when
    read; a corrupt record raises ``DataIntegrityError``.
    """

    PROFILES = "profiles.jsonl"
    CONVERSATIONS = "conversations.jsonl"
    PROGRESS = "progress.jsonl"
    SESSIONS = "sessions.jsonl"

    def __init__(
        self, data_dir: str | Path = "data", validator: Optional[RecordValidator] = None
    ):
        """
        Initialize JsonlDataStore.

        Args:
            data_dir: Directory for the JSONL files (created if missing)
            validator: Schema validator for profile records
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.validator = validator or RecordValidator()
        self.logger = get_logger(
            correlation_id="jsonl-data-store", phase="persistence", component="data_store"
        )

    @_retry_on_io_error
    def _append(self, filename: str, record: dict[str, Any]) -> None:
        with jsonlines.open(self.data_dir / filename, mode="a") as writer:
            writer.write(record)

    def _read(self, filename: str) -> list[dict[str, Any]]:
        path = self.data_dir / filename
        if not path.exists():
            return []
        try:
            with jsonlines.open(path) as reader:
                return list(reader)
        except jsonlines.InvalidLineError as e:
            self.logger.error("Corrupted data file", file=filename, error=str(e))
            raise DataIntegrityError(f"Corrupted data file {path}: {e}") from e

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        latest = None
        for record in self._read(self.PROFILES):
            if record.get("user_id") == user_id:
                latest = record
        if latest is None:
            return None

        self.validator.validate(latest)
        try:
            return UserProfile.model_validate(latest)
        except ValidationError as e:
            raise DataIntegrityError(f"Invalid profile record for {user_id}: {e}") from e

    async def save_user_profile(self, profile: UserProfile) -> None:
        record = profile.model_dump(mode="json")
        self.validator.validate(record)
        self._append(self.PROFILES, record)
        self.logger.debug("Profile saved", user_id=profile.user_id)

    async def get_conversation_history(self, user_id: str) -> list[Message]:
        session_ids = {
            r["session_id"] for r in self._read(self.SESSIONS) if r.get("user_id") == user_id
        }
        histories: dict[str, list[dict]] = {}
        for record in self._read(self.CONVERSATIONS):
            if record.get("session_id") in session_ids:
                histories[record["session_id"]] = record.get("messages", [])

        messages = [Message.model_validate(m) for msgs in histories.values() for m in msgs]
        messages.sort(key=lambda m: m.timestamp)
        return messages

    async def save_conversation(self, session_id: str, messages: list[Message]) -> None:
        self._append(
            self.CONVERSATIONS,
            {
                "session_id": session_id,
                "messages": [m.model_dump(mode="json") for m in messages],
            },
        )
        self.logger.debug(
            "Conversation saved", session_id=session_id, message_count=len(messages)
        )

    async def track_action_completion(
        self, user_id: str, action_id: str, completed_at: Optional[datetime] = None
    ) -> None:
        record = ProgressRecord(
            user_id=user_id, action_id=action_id, completed_at=completed_at or utc_now()
        )
        self._append(self.PROGRESS, record.model_dump(mode="json"))

        profile = await self.get_user_profile(user_id)
        if profile is not None:
            profile.mark_action_completed(action_id, record.completed_at)
            await self.save_user_profile(profile)

    async def get_progress_history(self, user_id: str) -> list[ProgressRecord]:
        return [
            ProgressRecord.model_validate(r)
            for r in self._read(self.PROGRESS)
            if r.get("user_id") == user_id
        ]

    async def associate_session_with_user(self, session_id: str, user_id: str) -> None:
        self._append(self.SESSIONS, {"session_id": session_id, "user_id": user_id})
