"""
models.py - Data model for corrections, analysis results and history

Field names on the wire (oracle responses and the persisted history slot)
are camelCase; the Python attributes are snake_case. ``from_dict`` is the
only way untrusted data becomes a model and raises ValueError on anything
it cannot validate.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Tuple


class Category(str, Enum):
    """Classification of a correction. Display grouping only."""

    SPELLING = "spelling"
    GRAMMAR = "grammar"
    STYLE = "style"

    @classmethod
    def from_label(cls, label: str) -> "Category":
        """Decode an English or Khmer category label."""
        if not isinstance(label, str):
            raise ValueError(f"Category must be a string, got {type(label).__name__}")
        key = label.strip()
        if key in _KHMER_LABELS:
            return _KHMER_LABELS[key]
        try:
            return cls(key.lower())
        except ValueError:
            raise ValueError(f"Unknown correction category: {label!r}") from None

    @property
    def khmer_label(self) -> str:
        return {v: k for k, v in _KHMER_LABELS.items()}[self]


_KHMER_LABELS = {
    "អក្ខរាវិរុទ្ធ": Category.SPELLING,
    "វេយ្យាករណ៍": Category.GRAMMAR,
    "កម្រិតភាសា": Category.STYLE,
}


def _require_str(data: Dict[str, Any], key: str) -> str:
    if key not in data:
        raise ValueError(f"Missing field: {key}")
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"Field {key} must be a string, got {type(value).__name__}")
    return value


def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class Correction:
    """A single proposed fix."""

    original_span: str
    suggested_span: str
    rationale: str = ""
    category: Category = Category.SPELLING

    @property
    def identity(self) -> Tuple[str, str]:
        """Key used to remove a correction from a set; not object identity."""
        return (self.original_span, self.suggested_span)

    @property
    def is_vacuous(self) -> bool:
        """Empty or whitespace-only spans never match anything."""
        return not self.original_span.strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Correction":
        data = _require_mapping(data, "Correction")
        return cls(
            original_span=_require_str(data, "originalText"),
            suggested_span=_require_str(data, "suggestedText"),
            rationale=_require_str(data, "reason"),
            category=Category.from_label(_require_str(data, "type")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalText": self.original_span,
            "suggestedText": self.suggested_span,
            "reason": self.rationale,
            "type": self.category.value,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one analysis. Superseded, never mutated.

    ``is_fully_correct`` is derived from ``corrections`` so the two can
    never disagree.
    """

    corrected_full_text: str
    summary: str
    corrections: Tuple[Correction, ...] = ()

    def __post_init__(self):
        # accept any iterable but store a tuple
        object.__setattr__(self, "corrections", tuple(self.corrections))

    @property
    def is_fully_correct(self) -> bool:
        return len(self.corrections) == 0

    def without(self, correction: Correction) -> "AnalysisResult":
        """Return a copy with every correction sharing *correction*'s identity removed."""
        key = correction.identity
        return self.with_corrections(c for c in self.corrections if c.identity != key)

    def with_corrections(self, corrections: Iterable[Correction]) -> "AnalysisResult":
        return replace(self, corrections=tuple(corrections))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        data = _require_mapping(data, "AnalysisResult")
        raw_corrections = data.get("corrections")
        if not isinstance(raw_corrections, list):
            raise ValueError("Field corrections must be a list")
        if "isCorrect" in data and not isinstance(data["isCorrect"], bool):
            raise ValueError("Field isCorrect must be a boolean")
        return cls(
            corrected_full_text=_require_str(data, "improvedText"),
            summary=_require_str(data, "summary"),
            corrections=tuple(Correction.from_dict(c) for c in raw_corrections),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isCorrect": self.is_fully_correct,
            "improvedText": self.corrected_full_text,
            "summary": self.summary,
            "corrections": [c.to_dict() for c in self.corrections],
        }


# last day of year 9999 in ms, so local-time formatting never overflows
_MAX_TIMESTAMP_MS = 253_402_214_400_000


@dataclass(frozen=True)
class HistoryEntry:
    """One past analysis: the text that was submitted and what came back."""

    id: str
    timestamp: int  # ms since epoch
    source_text: str
    result: AnalysisResult

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        data = _require_mapping(data, "HistoryEntry")
        timestamp = data.get("timestamp")
        # bool is an int subclass; reject it explicitly
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ValueError("Field timestamp must be an integer")
        if not 0 <= timestamp <= _MAX_TIMESTAMP_MS:
            raise ValueError(f"Field timestamp out of range: {timestamp}")
        return cls(
            id=_require_str(data, "id"),
            timestamp=timestamp,
            source_text=_require_str(data, "text"),
            result=AnalysisResult.from_dict(data.get("result")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "text": self.source_text,
            "result": self.result.to_dict(),
        }
