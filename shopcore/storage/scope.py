"""
shopcore/storage/scope.py
-------------------------
Durable key-value scopes the stores persist into.

Each key holds a JSON-safe list. A missing key reads as an empty list.

Backend failures never escape a scope: the first failed read or write
is logged and the scope drops into in-memory mode for the rest of its
life, so every store operation still succeeds for the session.
"""
from __future__ import annotations

import copy
import logging

from flask import session


log = logging.getLogger(__name__)


class DurableScope:
    """Base scope. Subclasses implement `_read` / `_write`."""

    def __init__(self):
        self._fallback: dict = {}
        self.degraded = False

    # ── Backend hooks ─────────────────────────────────────────────

    def _read(self, key: str):
        raise NotImplementedError

    def _write(self, key: str, value: list) -> None:
        raise NotImplementedError

    # ── Public API ────────────────────────────────────────────────

    def load(self, key: str) -> list:
        """Return a copy of the list stored under `key` ([] when absent)."""
        if self.degraded:
            return copy.deepcopy(self._fallback.get(key, []))
        try:
            value = self._read(key)
        except Exception as exc:
            self._degrade('read', key, exc)
            return copy.deepcopy(self._fallback.get(key, []))
        if not isinstance(value, list):
            return []
        self._fallback[key] = copy.deepcopy(value)
        return copy.deepcopy(value)

    def save(self, key: str, value: list) -> None:
        """Persist `value` under `key`. Never raises."""
        value = copy.deepcopy(list(value))
        self._fallback[key] = value
        if self.degraded:
            return
        try:
            self._write(key, value)
        except Exception as exc:
            self._degrade('write', key, exc)

    def _degrade(self, op: str, key: str, exc: Exception) -> None:
        log.warning(f"Durable scope {op} failed for {key!r}, continuing in memory: {exc}")
        self.degraded = True


class MemoryScope(DurableScope):
    """Plain dict scope. Used by tests and the CLI."""

    def __init__(self, initial: dict | None = None):
        super().__init__()
        self.data: dict = copy.deepcopy(initial) if initial else {}

    def _read(self, key):
        return self.data.get(key, [])

    def _write(self, key, value):
        self.data[key] = value


class SessionScope(DurableScope):
    """
    Scope backed by the Flask session cookie.
    Values survive reloads for the lifetime of the browsing session.
    """

    def _read(self, key):
        return session.get(key, [])

    def _write(self, key, value):
        session[key]     = value
        session.modified = True
