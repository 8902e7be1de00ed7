"""
session.py - Editing session: buffer, open corrections and history

EditorSession is the explicit context object the shell drives. It owns
the buffer, the active AnalysisResult and the HistoryStore, and wires
them to the renderer, the applier and the analysis boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from proofdesk.core import applier, highlight
from proofdesk.core.analysis import AnalysisOrchestrator
from proofdesk.core.errors import AnalysisError, AnalysisInProgressError, EmptyInputError
from proofdesk.core.history import HistoryStore
from proofdesk.core.models import AnalysisResult, Correction, HistoryEntry
from proofdesk.utils.logging_helper import get_logger
from proofdesk.utils.text_processing import count_chars, count_words, is_blank

log = get_logger()


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def edit_invalidates(before: str, after: str, threshold: Optional[int]) -> bool:
    """Staleness policy for open corrections after a buffer change.

    ``threshold=None`` means any change at all invalidates; an integer means
    only a change in length larger than it does.
    """
    if threshold is None:
        return before != after
    return abs(len(after) - len(before)) > threshold


class EditorSession:
    """Single-writer state for one editing session."""

    def __init__(self,
                 orchestrator: AnalysisOrchestrator,
                 history: HistoryStore,
                 buffer: str = "",
                 stale_threshold: Optional[int] = 5):
        self.orchestrator = orchestrator
        self.history = history
        self.buffer = buffer
        self.result: Optional[AnalysisResult] = None
        self.stale_threshold = stale_threshold
        self.status = Status.IDLE
        self.error: Optional[AnalysisError] = None
        self.needs_setup = not orchestrator.has_credentials()
        self._analyzing = False

    # ── derived state ────────────────────────────────────────────────────
    @property
    def analyzing(self) -> bool:
        return self._analyzing

    @property
    def can_check(self) -> bool:
        return not self._analyzing and not is_blank(self.buffer)

    @property
    def can_apply_all(self) -> bool:
        return self.result is not None and not self.result.is_fully_correct

    def render(self) -> highlight.AnnotatedText:
        corrections = self.result.corrections if self.result else None
        return highlight.render(self.buffer, corrections)

    def stats(self) -> Dict[str, int]:
        return {"chars": count_chars(self.buffer), "words": count_words(self.buffer)}

    # ── buffer edits ─────────────────────────────────────────────────────
    def edit(self, new_text: str) -> None:
        """Replace the buffer (last write wins), dropping stale corrections."""
        previous, self.buffer = self.buffer, new_text
        if self.result is not None and edit_invalidates(previous, new_text, self.stale_threshold):
            log.debug("Edit invalidated %d open correction(s)", len(self.result.corrections))
            self.result = None

    def clear(self) -> None:
        self.buffer = ""
        self.result = None
        self.error = None
        self.status = Status.IDLE

    # ── analysis ─────────────────────────────────────────────────────────
    def check(self) -> Optional[AnalysisResult]:
        """Analyze the current buffer.

        Returns the adopted result, or None when the buffer changed enough
        during the call for the result to be discarded. The previous
        result is dropped as well. Failures are stored on the session and
        re-raised.

        Raises:
            AnalysisInProgressError: Another analysis is still outstanding
            AnalysisError: Blank input, credential problems or oracle failure
        """
        if self._analyzing:
            raise AnalysisInProgressError("An analysis is already running")

        submitted = self.buffer
        if is_blank(submitted):
            # fail fast: never reaches the oracle
            self.error = EmptyInputError()
            self.status = Status.ERROR
            raise self.error

        self._analyzing = True
        self.status = Status.LOADING
        self.error = None
        try:
            result = self.orchestrator.analyze(submitted)
        except AnalysisError as e:
            self.error = e
            self.status = Status.ERROR
            if e.needs_setup:
                self.needs_setup = True
            log.warning("Analysis failed (%s): %s", e.kind.value, e)
            raise
        finally:
            self._analyzing = False

        self.needs_setup = False
        self.status = Status.SUCCESS
        self.history.record(submitted, result)

        if edit_invalidates(submitted, self.buffer, self.stale_threshold):
            log.info("Buffer changed during analysis; discarding result")
            self.result = None
            return None
        self.result = result
        return result

    # ── applying corrections ─────────────────────────────────────────────
    def apply_all(self) -> None:
        if not self.can_apply_all:
            return
        self.buffer = applier.apply_all(self.buffer, self.result)
        self.result = None

    def apply_single(self, correction: Correction) -> None:
        self.buffer, self.result = applier.apply_single(self.buffer, correction, self.result)

    def select_history(self, entry: HistoryEntry) -> None:
        """Restore buffer and corrections from a past analysis."""
        self.buffer, self.result = self.history.select(entry)
        self.error = None
        self.status = Status.SUCCESS
