import os
import httpx
from types import SimpleNamespace
from dotenv import load_dotenv

load_dotenv()

import anthropic
from openai import OpenAI


def provider_for_model(model: str) -> str:
    """Return ``"anthropic"`` for Claude models and ``"openai"`` otherwise."""
    return "anthropic" if model.startswith("claude") else "openai"


def api_key_env_var(model: str) -> str:
    return "ANTHROPIC_API_KEY" if provider_for_model(model) == "anthropic" else "OPENAI_API_KEY"


def has_credentials(model: str) -> bool:
    """True when the API key for *model*'s provider is present in the environment."""
    return bool(os.getenv(api_key_env_var(model), "").strip())


def _flatten_anthropic_content(content_blocks):
    """Anthropic returns a list of blocks; join them into a single string."""
    text_parts = []
    for block in content_blocks:
        if hasattr(block, "text"):
            text_parts.append(block.text)
        elif isinstance(block, str):
            text_parts.append(block)
        else:
            text_parts.append(str(block))
    return "".join(text_parts)


class _AnthropicResponseAdapter:  # pylint: disable=too-few-public-methods
    """Wrap an Anthropic response so it mimics OpenAI's return structure."""

    def __init__(self, response):
        # Match the minimal interface we rely on: `choices[0].message.content`.
        content = _flatten_anthropic_content(response.content)
        self.choices = [SimpleNamespace(
            message=SimpleNamespace(content=content),
            finish_reason=getattr(response, "stop_reason", None),
        )]


class UnifiedClient:
    """A drop-in replacement for `openai.OpenAI` that also supports Anthropic.

    If the *model* argument passed to `chat.completions.create()` begins with
    "claude" we route the request to Anthropic's API.  Otherwise, we fall back
    to OpenAI.  The returned object always exposes the OpenAI-style structure
    (with `.choices[0].message.content`) so call-sites stay provider-agnostic.

    The SDK clients are built on first use so that constructing a
    UnifiedClient never fails when a key is missing; the caller is expected
    to probe `has_credentials()` first.
    """

    def __init__(self, timeout: httpx.Timeout | None = None):
        self._timeout = timeout
        self._openai = None
        self._anthropic = None

        # Build a namespace hierarchy so that callers can do
        #   client.chat.completions.create(...)
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._chat_create))

    # ---------------------------------------------------------------------
    # Internal dispatch method
    # ---------------------------------------------------------------------
    def _chat_create(
        self,
        model: str,
        messages: list[dict],
        temperature: float = 0.2,
        max_tokens: int = 4096,
        **kwargs,
    ):
        # → Anthropic
        if provider_for_model(model) == "anthropic":
            if self._anthropic is None:
                self._anthropic = anthropic.Anthropic(
                    api_key=os.getenv("ANTHROPIC_API_KEY"),
                    timeout=self._timeout,
                )

            # Separate system prompt from messages for Anthropic API
            system_prompt = anthropic.NOT_GIVEN
            user_assistant_messages = messages
            if messages and messages[0]["role"] == "system":
                system_prompt = messages[0]["content"]
                user_assistant_messages = messages[1:]

            # Anthropic has no JSON response mode; the prompt asks for JSON instead
            kwargs.pop("response_format", None)
            response = self._anthropic.messages.create(
                model=model,
                system=system_prompt,
                messages=user_assistant_messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **{k: v for k, v in kwargs.items() if v is not None},
            )
            return _AnthropicResponseAdapter(response)

        # → OpenAI (default)
        if self._openai is None:
            self._openai = OpenAI(timeout=self._timeout)
        return self._openai.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )


class _StubClient:
    """Offline stand-in for UnifiedClient used in test mode.

    Each call to `chat.completions.create()` consumes the next queued
    response; the last one is repeated once the queue runs dry. A queued
    exception instance is raised instead of returned. Every call's keyword
    arguments are kept in `calls`.
    """

    def __init__(self, *responses):
        self._responses = list(responses) or ['{"isCorrect": true, "improvedText": "", "summary": "", "corrections": []}']
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._chat_create))

    def _chat_create(self, **kwargs):
        self.calls.append(kwargs)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = response(**kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(
            message=SimpleNamespace(content=response),
            finish_reason="stop",
        )])


def get_llm_client(test_mode: bool = False):
    """Return a *UnifiedClient* that transparently supports OpenAI & Anthropic.

    With *test_mode* (or PROOFDESK_TEST_MODE set) a `_StubClient` is returned
    so nothing leaves the machine.
    """

    if test_mode or os.getenv("PROOFDESK_TEST_MODE"):
        return _StubClient()
    timeout = httpx.Timeout(connect=30.0, read=120.0, write=60.0, pool=60.0)
    return UnifiedClient(timeout=timeout)
