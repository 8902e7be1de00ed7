"""proofdesk - reconcile LLM proofreading corrections against an editable text."""

__version__ = "0.1.0"
