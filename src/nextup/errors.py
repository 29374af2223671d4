# src/nextup/errors.py

from __future__ import annotations

"""
Error taxonomy.

Only InvalidTask is surfaced to callers. Persistence errors are raised by the
file layer and swallowed (logged) by the gateway so they never reach a request.
"""


class NextupError(Exception):
    """Base class for all nextup errors."""


class InvalidTask(NextupError, ValueError):
    """Task payload cannot be accepted (empty id, wrong shape, non-integer fields)."""


class PersistenceFailure(NextupError):
    """Writing or renaming the task file failed."""


class LoadFailure(NextupError):
    """The task file exists but cannot be read or decoded."""
