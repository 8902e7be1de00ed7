"""
analysis.py - The boundary to the analysis oracle

This module handles:
- Rejecting blank input before any network call
- Probing for credentials before calling the model
- Calling the model with retries and exponential backoff
- Decoding the JSON reply into a validated AnalysisResult
- Mapping every failure to a typed AnalysisError
"""

import json
import time
from typing import Callable, Dict, List, Optional

from proofdesk.core.errors import (
    EmptyInputError, InvalidCredentialError,
    MissingCredentialError, OracleFailureError,
)
from proofdesk.core.models import AnalysisResult
from proofdesk.core.prompts import PromptBuilder
from proofdesk.utils.llm_client import api_key_env_var, get_llm_client, has_credentials
from proofdesk.utils.logging_helper import get_logger
from proofdesk.utils.settings import Settings, load_settings
from proofdesk.utils.text_processing import extract_json_text, is_blank

log = get_logger()

_AUTH_STATUS_CODES = {401, 403}
_AUTH_MESSAGES = ("Requested entity was not found", "invalid x-api-key", "Incorrect API key")


def _is_credential_failure(error: Exception) -> bool:
    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    if status in _AUTH_STATUS_CODES:
        return True
    message = str(error)
    return any(m in message for m in _AUTH_MESSAGES)


def decode_response(content: str) -> AnalysisResult:
    """Turn the model's reply into an AnalysisResult.

    Raises:
        OracleFailureError: If the reply is not JSON or does not match the
            expected shape
    """
    try:
        data = json.loads(extract_json_text(content))
        result = AnalysisResult.from_dict(data)
    except (ValueError, RecursionError) as e:
        raise OracleFailureError(f"Could not decode analysis response: {e}") from e

    claimed = data.get("isCorrect")
    if claimed is not None and claimed != result.is_fully_correct:
        log.warning("Oracle reported isCorrect=%s with %d corrections; using %s",
                    claimed, len(result.corrections), result.is_fully_correct)
    return result


class AnalysisOrchestrator:
    """Owns the single external call ``analyze(text) -> AnalysisResult``."""

    def __init__(self,
                 settings: Optional[Settings] = None,
                 client=None,
                 credential_probe: Optional[Callable[[], bool]] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings or load_settings()
        self.prompt_builder = PromptBuilder(language=self.settings.language)
        self._client = client
        self._credential_probe = credential_probe or (lambda: has_credentials(self.settings.model))
        self._sleep = sleep

    @property
    def client(self):
        if self._client is None:
            self._client = get_llm_client()
        return self._client

    def has_credentials(self) -> bool:
        return bool(self._credential_probe())

    def analyze(self, text: str) -> AnalysisResult:
        """Analyze *text* and return the proposed corrections.

        Raises:
            EmptyInputError: Text is blank (nothing is sent)
            MissingCredentialError: No API key for the configured model
            InvalidCredentialError: The service rejected the key
            OracleFailureError: Any other failure, including undecodable replies
        """
        if is_blank(text):
            raise EmptyInputError()
        if not self.has_credentials():
            raise MissingCredentialError(
                f"No API key found; set {api_key_env_var(self.settings.model)} to enable analysis")

        messages = self.prompt_builder.build_analysis_prompt(text)
        content = self._call_oracle(messages)
        result = decode_response(content)
        log.info("Analysis finished: %d correction(s)", len(result.corrections))
        return result

    def _call_oracle(self, messages: List[Dict[str, str]]) -> str:
        model = self.settings.model
        attempts = max(1, self.settings.max_retries)
        delay = self.settings.initial_delay
        last_error = None

        for attempt in range(attempts):
            try:
                res = self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=self.settings.temperature,
                    max_tokens=self.settings.max_tokens,
                    response_format={"type": "json_object"},
                )
            except Exception as e:
                if _is_credential_failure(e):
                    log.error("Credential rejected by %s: %s", model, e)
                    raise InvalidCredentialError() from e
                last_error = e
                if attempt == attempts - 1:
                    break
                log.warning("LLM call failed (attempt %d/%d), retrying in %.1f s: %s",
                            attempt + 1, attempts, delay, e)
                self._sleep(delay)
                delay *= 2  # Exponential backoff
                continue

            return self._extract_content(res)

        log.error("Max retries reached for LLM call: %s", last_error)
        raise OracleFailureError() from last_error

    def _extract_content(self, res) -> str:
        # Response-shape problems are not retried
        choices = getattr(res, "choices", None)
        if not choices:
            raise OracleFailureError("Analysis response contained no choices")
        choice = choices[0]
        if getattr(choice, "finish_reason", None) in ("length", "max_tokens"):
            log.warning("LLM output was truncated due to token limit for model %s", self.settings.model)
        content = getattr(getattr(choice, "message", None), "content", None)
        if not isinstance(content, str) or not content.strip():
            raise OracleFailureError("Analysis response was empty")
        return content
