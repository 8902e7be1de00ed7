"""
history.py - Bounded, persisted history of past analyses

This module handles:
- Recording each successful analysis, most recent first
- Evicting the oldest entry beyond the capacity (10 by default)
- Persisting the whole list to a single JSON slot after every change
- Reloading that slot once at start-up, degrading to "no history"

Persistence is best effort: a failed write is logged and never reaches
the caller.
"""

from __future__ import annotations

import json
import pathlib
import time
from typing import List, Optional, Tuple

from proofdesk.core.models import AnalysisResult, HistoryEntry
from proofdesk.utils.io_helpers import read_utf8, write_utf8
from proofdesk.utils.logging_helper import get_logger
from proofdesk.utils.paths import HISTORY_FILE, HISTORY_SLOT

log = get_logger()

DEFAULT_CAPACITY = 10


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    """Most-recent-first list of HistoryEntry, never longer than *capacity*."""

    def __init__(self,
                 path: Optional[pathlib.Path] = HISTORY_FILE,
                 capacity: int = DEFAULT_CAPACITY,
                 clock=_now_ms):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.path = pathlib.Path(path) if path is not None else None
        self.capacity = capacity
        self._clock = clock
        self._entries: List[HistoryEntry] = []

    # ── read side ────────────────────────────────────────────────────────
    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    @staticmethod
    def select(entry: HistoryEntry) -> Tuple[str, AnalysisResult]:
        """Return what the caller needs to restore buffer and corrections."""
        return entry.source_text, entry.result

    # ── write side ───────────────────────────────────────────────────────
    def record(self, source_text: str, result: AnalysisResult) -> HistoryEntry:
        """Prepend a new entry, evict beyond capacity, persist."""
        timestamp = self._clock()
        entry = HistoryEntry(
            id=self._fresh_id(timestamp),
            timestamp=timestamp,
            source_text=source_text,
            result=result,
        )
        evicted = self._entries[self.capacity - 1:]
        self._entries = [entry] + self._entries[:self.capacity - 1]
        if evicted:
            log.debug("Evicted %d history entr%s", len(evicted), "y" if len(evicted) == 1 else "ies")
        self.save()
        return entry

    def clear(self) -> None:
        self._entries = []
        self.save()

    def _fresh_id(self, timestamp: int) -> str:
        base = str(timestamp)
        taken = {e.id for e in self._entries}
        candidate, n = base, 1
        while candidate in taken:
            candidate = f"{base}-{n}"
            n += 1
        return candidate

    # ── persistence ──────────────────────────────────────────────────────
    def load(self) -> "HistoryStore":
        """Replace the in-memory list with the persisted one.

        Missing or unreadable state gives an empty history; a malformed
        entry inside a valid list is dropped on its own.
        """
        self._entries = []
        if self.path is None or not self.path.exists():
            return self
        try:
            payload = json.loads(read_utf8(self.path))
        except (OSError, ValueError, RecursionError) as e:
            log.warning("Ignoring unreadable history at %s: %s", self.path, e)
            return self

        # accept both the bare list and the {slot: [...]} envelope
        if isinstance(payload, dict):
            payload = payload.get(HISTORY_SLOT)
        if not isinstance(payload, list):
            log.warning("Ignoring malformed history at %s", self.path)
            return self

        for i, item in enumerate(payload):
            try:
                self._entries.append(HistoryEntry.from_dict(item))
            except ValueError as e:
                log.warning("Dropping malformed history entry %d: %s", i, e)
        del self._entries[self.capacity:]
        log.info("Loaded %d history entries", len(self._entries))
        return self

    def save(self) -> None:
        if self.path is None:
            return
        payload = {HISTORY_SLOT: [e.to_dict() for e in self._entries]}
        try:
            write_utf8(self.path, json.dumps(payload, ensure_ascii=False, indent=2))
        except OSError as e:
            log.warning("Could not persist history to %s: %s", self.path, e)
