"""
errors.py - Typed failures raised at the analysis boundary

Everything that can go wrong while asking the oracle for corrections is
mapped to one of four kinds before it reaches the caller. Local buffer
operations never raise these.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    EMPTY_INPUT = "emptyInput"
    MISSING_CREDENTIAL = "missingCredential"
    INVALID_CREDENTIAL = "invalidCredential"
    ORACLE_FAILURE = "oracleFailure"


class AnalysisError(Exception):
    """Base class for analysis failures.

    ``needs_setup`` tells the shell to offer credential setup instead of a
    plain retry.
    """

    kind: ErrorKind = ErrorKind.ORACLE_FAILURE
    default_message = "Analysis failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def needs_setup(self) -> bool:
        return self.kind in (ErrorKind.MISSING_CREDENTIAL, ErrorKind.INVALID_CREDENTIAL)

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.ORACLE_FAILURE


class EmptyInputError(AnalysisError):
    kind = ErrorKind.EMPTY_INPUT
    default_message = "Nothing to analyze: the text is empty"


class MissingCredentialError(AnalysisError):
    kind = ErrorKind.MISSING_CREDENTIAL
    default_message = "No API key configured for the analysis model"


class InvalidCredentialError(AnalysisError):
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "The API key was rejected by the analysis service"


class OracleFailureError(AnalysisError):
    kind = ErrorKind.ORACLE_FAILURE
    default_message = "The analysis service failed; please try again"


class AnalysisInProgressError(RuntimeError):
    """Raised when a second analysis is started while one is outstanding."""
