"""
Core module - Correction reconciliation for proofdesk

This module contains the business logic organized by concern:
- models: Corrections, analysis results and history entries
- highlight: Marking open correction spans in the buffer
- applier: Accepting one or all corrections into the buffer
- history: Bounded, persisted history of past analyses
- analysis: The oracle boundary and its typed errors
- session: The editing session tying everything together
"""

from proofdesk.core.models import AnalysisResult, Category, Correction, HistoryEntry
from proofdesk.core.highlight import AnnotatedText, Segment, render
from proofdesk.core.applier import apply_all, apply_single
from proofdesk.core.history import HistoryStore
from proofdesk.core.analysis import AnalysisOrchestrator
from proofdesk.core.session import EditorSession

__all__ = [
    'AnalysisResult', 'Category', 'Correction', 'HistoryEntry',
    'AnnotatedText', 'Segment', 'render',
    'apply_all', 'apply_single',
    'HistoryStore', 'AnalysisOrchestrator', 'EditorSession',
]
