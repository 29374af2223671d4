# src/nextup/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import InvalidTask

DEFAULT_FREE_MINUTES = 30
DEFAULT_STRESS_LEVEL = 3


class Emotion(StrEnum):
    """
    How doing the task feels.

    Tasks keep the raw tag as a plain string, so values outside this enum
    survive a save/load cycle. Ranking treats them as "no contribution".
    """

    PLEASANT = "PLEASANT"
    NEUTRAL = "NEUTRAL"
    AVERSIVE = "AVERSIVE"

    @classmethod
    def from_raw(cls, raw: str | None) -> Emotion | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


def _as_int(data: Mapping[str, Any], key: str) -> int:
    raw = data.get(key)
    if raw is None:
        return 0
    # bool is an int subclass; JSON true/false is not a minute count.
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InvalidTask(f"{key} must be an integer")
    if isinstance(raw, float) and not raw.is_integer():
        raise InvalidTask(f"{key} must be an integer")
    return int(raw)


def _as_str(data: Mapping[str, Any], key: str) -> str:
    raw = data.get(key)
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise InvalidTask(f"{key} must be a string")
    return raw


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str = ""
    emotion: str = ""
    minutes_needed: int = 0
    importance: int = 0
    # RFC 3339 with offset, e.g. "2026-10-18T09:00:00Z". None means no deadline.
    due_at: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """
        Decode a wire/persisted record.

        Missing keys take zero values. An empty id is accepted here; rejecting
        it is the store's job.
        """
        if not isinstance(data, Mapping):
            raise InvalidTask("task must be a JSON object")

        due_raw = data.get("dueAt")
        if due_raw is not None and not isinstance(due_raw, str):
            raise InvalidTask("dueAt must be a string or null")

        return cls(
            id=_as_str(data, "id"),
            title=_as_str(data, "title"),
            emotion=_as_str(data, "emotion"),
            minutes_needed=_as_int(data, "minutesNeeded"),
            importance=_as_int(data, "importance"),
            due_at=due_raw,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "emotion": self.emotion,
            "minutesNeeded": self.minutes_needed,
            "importance": self.importance,
            "dueAt": self.due_at,
        }


@dataclass(slots=True, frozen=True)
class QueryContext:
    """Situation a ranking call is evaluated against. Built per request, never stored."""

    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    free_minutes: int = DEFAULT_FREE_MINUTES
    stress_level: int = DEFAULT_STRESS_LEVEL

    @classmethod
    def build(
        cls,
        *,
        free_minutes: int | None = None,
        stress_level: int | None = None,
        now: datetime | None = None,
    ) -> QueryContext:
        # 0 means "not given", same as a missing query parameter.
        return cls(
            now=now if now is not None else datetime.now(timezone.utc),
            free_minutes=free_minutes or DEFAULT_FREE_MINUTES,
            stress_level=stress_level or DEFAULT_STRESS_LEVEL,
        )
