"""Identifier factories.

Engines take an ``IdFactory`` (``prefix -> id``) so tests can swap the random
default for ``SequentialIdFactory`` and get stable ids.
"""

import uuid
from collections import defaultdict
from typing import Callable

IdFactory = Callable[[str], str]


def uuid_id_factory(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class SequentialIdFactory:
    """Deterministic ids: ``action-1``, ``action-2``, ``plan-1``..."""

    def __init__(self) -> None:
        self._counters: defaultdict[str, int] = defaultdict(int)

    def __call__(self, prefix: str) -> str:
        self._counters[prefix] += 1
        return f"{prefix}-{self._counters[prefix]}"
