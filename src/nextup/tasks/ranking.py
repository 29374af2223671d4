# src/nextup/tasks/ranking.py

from __future__ import annotations

"""
Task ranking.

Every task gets four bounded sub-scores that are mixed with fixed weights:

    urgency       0.50  deadline proximity + importance
    fit           0.25  does it fit in the free minutes, and is it quick
    emotion       0.15  how it feels, given the stress level
    stress match  0.10  short tasks when stressed, substantial ones when calm

All functions here are pure. Callers pass a snapshot in; nothing touches the store.
"""

import math
import re
from collections.abc import Iterable
from datetime import datetime

from .task_models import Emotion, QueryContext, Task

URGENCY_WEIGHT = 0.50
FIT_WEIGHT = 0.25
EMOTION_WEIGHT = 0.15
STRESS_WEIGHT = 0.10

NO_DEADLINE_URGENCY_MAX = 0.8
DEADLINE_URGENCY_MAX = 1.5

# Anything past this saturates every clamp anyway; keeps float math finite.
IMPORTANCE_LIMIT = 1_000

HIGH_STRESS = 4
LOW_STRESS = 2

# (low stress / mid, high stress)
_EMOTION_BONUS: dict[Emotion, tuple[float, float]] = {
    Emotion.PLEASANT: (0.15, 0.30),
    Emotion.NEUTRAL: (0.10, 0.10),
    Emotion.AVERSIVE: (0.05, -0.10),
}

SCORE_FLOOR = EMOTION_WEIGHT * min(v for pair in _EMOTION_BONUS.values() for v in pair)
SCORE_CEILING = (
    URGENCY_WEIGHT * DEADLINE_URGENCY_MAX
    + FIT_WEIGHT * 1.0
    + EMOTION_WEIGHT * max(v for pair in _EMOTION_BONUS.values() for v in pair)
    + STRESS_WEIGHT * 1.0
)


def clamp(v: float, lo: float, hi: float) -> float:
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v


def _minutes(task: Task) -> int:
    # Zero/negative estimates are nonsense but must not reach log10().
    return max(0, task.minutes_needed)


def _importance(task: Task) -> int:
    return max(-IMPORTANCE_LIMIT, min(IMPORTANCE_LIMIT, task.importance))


_RFC3339_SHAPE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_due(raw: str | None) -> datetime | None:
    """
    Parse an RFC 3339 deadline.

    Returns None for a missing value and for anything that is not a full
    timestamp with a UTC offset; ranking then treats the task as having
    no deadline.
    """
    if not raw or not isinstance(raw, str):
        return None
    raw = raw.strip()
    # fromisoformat also takes basic and week-date ISO 8601 forms.
    if not _RFC3339_SHAPE.fullmatch(raw):
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def urgency_score(task: Task, now: datetime) -> float:
    due = parse_due(task.due_at)
    if due is None:
        return clamp(0.15 * _importance(task), 0.0, NO_DEADLINE_URGENCY_MAX)

    minutes_left = max(0.0, (due - now).total_seconds() / 60.0)
    time_pressure = 1.0 / math.log10(10.0 + minutes_left)
    importance_boost = 0.2 * (_importance(task) - 1)
    return clamp(time_pressure + importance_boost, 0.0, DEADLINE_URGENCY_MAX)


def fit_score(task: Task, free_minutes: int) -> float:
    if free_minutes <= 0:
        return 0.0

    minutes = _minutes(task)
    if minutes <= free_minutes:
        # Fits: 0.6 base plus a bonus that decays with task length.
        return clamp(0.6 + 0.4 * (1.0 / (1.0 + math.log10(1 + minutes))), 0.0, 1.0)

    # Doesn't fit: credit for the share that can be done now.
    return clamp(0.3 * (free_minutes / minutes), 0.0, 1.0)


def emotion_score(task: Task, stress_level: int) -> float:
    emotion = Emotion.from_raw(task.emotion)
    if emotion is None:
        return 0.0
    calm, stressed = _EMOTION_BONUS[emotion]
    return stressed if stress_level >= HIGH_STRESS else calm


def stress_match_score(task: Task, stress_level: int) -> float:
    minutes = _minutes(task)
    if stress_level >= HIGH_STRESS:
        return clamp(1.0 / (1.0 + math.log10(5 + minutes)), 0.0, 1.0)
    if stress_level <= LOW_STRESS:
        return clamp(math.log10(10 + minutes) / 3.0, 0.0, 1.0)
    return 0.5


def score(task: Task, ctx: QueryContext) -> float:
    return (
        URGENCY_WEIGHT * urgency_score(task, ctx.now)
        + FIT_WEIGHT * fit_score(task, ctx.free_minutes)
        + EMOTION_WEIGHT * emotion_score(task, ctx.stress_level)
        + STRESS_WEIGHT * stress_match_score(task, ctx.stress_level)
    )


def sort_key(task: Task, ctx: QueryContext) -> tuple[float, float, int, str]:
    """
    Ascending key for the listing order.

    Higher score first, then earlier deadline (none/unparseable = last),
    then fewer minutes, then id so the order is total.
    """
    due = parse_due(task.due_at)
    due_ts = due.timestamp() if due is not None else math.inf
    return (-score(task, ctx), due_ts, task.minutes_needed, task.id)


def rank_tasks(tasks: Iterable[Task], ctx: QueryContext) -> list[Task]:
    return sorted(tasks, key=lambda t: sort_key(t, ctx))


def pick_next(tasks: Iterable[Task], ctx: QueryContext) -> Task | None:
    """Best task under the same order as rank_tasks(), or None when there are no tasks."""
    return min(tasks, key=lambda t: sort_key(t, ctx), default=None)
