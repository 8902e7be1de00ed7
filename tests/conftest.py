import json
import sys
from pathlib import Path

import pytest

# Ensure the project root is on the import path so ``proofdesk`` can be imported
root_path = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root_path))

from proofdesk.core.analysis import AnalysisOrchestrator
from proofdesk.core.history import HistoryStore
from proofdesk.core.models import Category, Correction
from proofdesk.core.session import EditorSession
from proofdesk.utils.llm_client import _StubClient
from proofdesk.utils.settings import Settings


def _oracle_json(corrections=(), improved="", summary="ok", is_correct=None) -> str:
    """Serialize a reply the way the model would send it."""
    corrections = [c.to_dict() if isinstance(c, Correction) else c for c in corrections]
    return json.dumps({
        "isCorrect": (not corrections) if is_correct is None else is_correct,
        "improvedText": improved,
        "summary": summary,
        "corrections": corrections,
    }, ensure_ascii=False)


@pytest.fixture()
def settings(tmp_path):
    return Settings(history_path=tmp_path / "history.json", initial_delay=0.0)


@pytest.fixture()
def make_orchestrator(settings):
    def factory(*responses, credentials=True):
        client = _StubClient(*responses)
        orch = AnalysisOrchestrator(settings, client=client,
                                    credential_probe=lambda: credentials,
                                    sleep=lambda _s: None)
        return orch, client
    return factory


@pytest.fixture()
def khmer_correction():
    return Correction("ជួយ", "ជួយអ្នក", "ត្រូវបន្ថែមកម្មបទ", Category.GRAMMAR)


@pytest.fixture()
def make_session(settings, make_orchestrator):
    def factory(*responses, buffer="", credentials=True, stale_threshold=5):
        orch, client = make_orchestrator(*responses, credentials=credentials)
        history = HistoryStore(settings.history_path).load()
        session = EditorSession(orch, history, buffer=buffer, stale_threshold=stale_threshold)
        return session, client
    return factory


@pytest.fixture()
def oracle_json():
    return _oracle_json
