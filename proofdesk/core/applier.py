"""
applier.py - Accept corrections back into the buffer

This module handles:
- Applying the oracle's full corrected text in one step
- Applying a single correction to every occurrence of its span
- Narrowing the open correction set as corrections are accepted

The buffer is the source of truth: a correction whose span is gone is
acknowledged (removed) rather than reported as an error.
"""

import re
from typing import Optional, Tuple

from proofdesk.core.models import AnalysisResult, Correction
from proofdesk.utils.logging_helper import get_logger

log = get_logger()


def count_occurrences(buffer: str, span: str) -> int:
    """Number of non-overlapping literal occurrences of *span* in *buffer*."""
    if not span.strip():
        return 0
    return len(re.findall(re.escape(span), buffer))


def apply_all(buffer: str, result: Optional[AnalysisResult]) -> str:
    """Replace the whole buffer with the oracle's corrected text.

    The caller drops the active result afterwards. A missing or fully
    correct result leaves the buffer as it is.
    """
    if result is None or result.is_fully_correct:
        return buffer
    log.info("Applying all %d corrections", len(result.corrections))
    return result.corrected_full_text


def apply_single(buffer: str,
                 correction: Correction,
                 result: Optional[AnalysisResult]) -> Tuple[str, Optional[AnalysisResult]]:
    """Apply one correction everywhere its span occurs.

    Returns the new buffer and the narrowed result (every correction with the
    same identity removed). Never raises: vacuous and stale corrections
    leave the buffer untouched but are still removed. A correction that is
    no longer open in *result* was already applied and changes nothing.
    """
    if result is not None and correction.identity not in {c.identity for c in result.corrections}:
        log.debug("Correction %r already resolved", correction.identity)
        return buffer, result

    new_buffer = buffer
    if correction.is_vacuous:
        log.debug("Skipping vacuous correction %r", correction.identity)
    else:
        pattern = re.compile(re.escape(correction.original_span))
        # callable replacement: suggested text is inserted verbatim, no backrefs
        new_buffer, hits = pattern.subn(lambda _m: correction.suggested_span, buffer)
        if hits == 0:
            log.debug("Stale correction %r acknowledged; span no longer in buffer",
                      correction.original_span)
        else:
            log.info("Applied %r -> %r (%d occurrence%s)", correction.original_span,
                     correction.suggested_span, hits, "" if hits == 1 else "s")

    new_result = result.without(correction) if result is not None else None
    return new_buffer, new_result
