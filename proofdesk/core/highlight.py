"""
highlight.py - Mark every still-open correction span in the buffer

This module handles:
- Splitting the buffer into plain and highlighted segments
- Longest-span-first resolution so nested spans never double-wrap
- Escaped HTML and rich terminal renderings of the result

Matching is textual, not positional: every literal occurrence of a span
is highlighted. Spans are always matched as literal text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from rich.text import Text

from proofdesk.core.models import Category, Correction
from proofdesk.utils.text_processing import escape_markup

HIGHLIGHT_CLASS = "highlight-error"

CATEGORY_STYLES = {
    Category.SPELLING: "bold red underline",
    Category.GRAMMAR: "bold dark_orange underline",
    Category.STYLE: "bold blue underline",
}


@dataclass(frozen=True)
class Segment:
    """A run of buffer text, highlighted when it carries a correction."""

    text: str
    correction: Optional[Correction] = None

    @property
    def highlighted(self) -> bool:
        return self.correction is not None


@dataclass(frozen=True)
class AnnotatedText:
    """The buffer cut into segments. Joining the segments gives the buffer back."""

    segments: Tuple[Segment, ...] = ()
    has_markup: bool = False

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.segments)

    @property
    def highlighted(self) -> List[str]:
        """Highlighted substrings in buffer order."""
        return [s.text for s in self.segments if s.highlighted]

    def __str__(self) -> str:
        return self.text

    def to_html(self, css_class: str = HIGHLIGHT_CLASS) -> str:
        """Escaped markup with each highlighted segment wrapped in a span."""
        parts = []
        for seg in self.segments:
            escaped = escape_markup(seg.text)
            if seg.highlighted:
                parts.append(f'<span class="{css_class}">{escaped}</span>')
            else:
                parts.append(escaped)
        return "".join(parts)

    def to_rich(self) -> Text:
        text = Text()
        for seg in self.segments:
            style = CATEGORY_STYLES[seg.correction.category] if seg.highlighted else None
            text.append(seg.text, style=style)
        return text


def _split_on(segments: Iterable[Segment], correction: Correction) -> Iterator[Segment]:
    pattern = re.compile(re.escape(correction.original_span))
    for seg in segments:
        # text claimed by a longer span stays whole
        if seg.highlighted:
            yield seg
            continue
        pos = 0
        for match in pattern.finditer(seg.text):
            if match.start() > pos:
                yield Segment(seg.text[pos:match.start()])
            yield Segment(match.group(0), correction)
            pos = match.end()
        if pos < len(seg.text):
            yield Segment(seg.text[pos:])


def render(buffer: str, corrections: Optional[Sequence[Correction]]) -> AnnotatedText:
    """Annotate *buffer* with the open *corrections*.

    With no corrections the buffer comes back as a single plain segment and
    ``has_markup`` is False. Otherwise corrections are resolved longest
    ``original_span`` first (stable for equal lengths) and vacuous spans are
    skipped.
    """
    if not corrections:
        return AnnotatedText((Segment(buffer),) if buffer else (), has_markup=False)

    segments: Iterable[Segment] = [Segment(buffer)] if buffer else []
    ordered = sorted(corrections, key=lambda c: len(c.original_span), reverse=True)
    for correction in ordered:
        if correction.is_vacuous:
            continue
        segments = list(_split_on(segments, correction))
    return AnnotatedText(tuple(segments), has_markup=True)
