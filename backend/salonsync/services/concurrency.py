# Overview: Locking and storage-failure helpers shared by the write paths.

from __future__ import annotations

import threading
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import StorageUnavailable


_registry_guard = threading.Lock()
_staff_locks: dict[int, threading.Lock] = {}


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    The per-staff lock below covers the single-process SQLite case.
    """
    return query.with_for_update()


def _lock_for_staff(staff_id: int) -> threading.Lock:
    with _registry_guard:
        lock = _staff_locks.get(staff_id)
        if lock is None:
            lock = threading.Lock()
            _staff_locks[staff_id] = lock
        return lock


@contextmanager
def staff_lock(staff_id: int):
    """Serialize read-then-write clock operations for one staff member."""
    lock = _lock_for_staff(staff_id)
    with lock:
        yield


@contextmanager
def storage_guard(operation: str):
    """
    Turn database failures into StorageUnavailable.

    The session is rolled back and the failure logged; nothing is retried.
    Typed service errors raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error("Storage failure during %s: %s", operation, exc)
        raise StorageUnavailable(f"Storage unavailable during {operation}") from exc
