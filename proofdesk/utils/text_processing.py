"""
text_processing.py - Text processing and normalization utilities

Provides common text processing functions used across the project.
"""

import html
import re
from typing import Optional

_JSON_BLOCK = re.compile(r'```(?:json)?\s*(\{.*\})\s*```', re.DOTALL)


def is_blank(text: Optional[str]) -> bool:
    """Return True for None, the empty string or whitespace-only text."""
    return not text or not text.strip()


def escape_markup(text: str) -> str:
    """Escape text for safe embedding in HTML markup.
    
    Only ``&``, ``<`` and ``>`` are replaced; quotes are left alone since
    the result is placed in element content, never in attribute values.
    
    Args:
        text: Raw text
        
    Returns:
        Escaped text
    """
    return html.escape(text, quote=False)


def count_words(text: str) -> int:
    """Count whitespace-separated words in text.
    
    Args:
        text: Text to count words in
        
    Returns:
        Number of words (0 for blank text)
    """
    if is_blank(text):
        return 0
    return len(re.split(r"\s+", text.strip()))


def count_chars(text: str) -> int:
    """Count characters (code points) in text."""
    return len(text)


def preview(text: str, max_chars: int = 80) -> str:
    """Single-line preview of text for listings.
    
    Args:
        text: Text to preview
        max_chars: Maximum length of the preview, ellipsis included
        
    Returns:
        Whitespace-collapsed, truncated text
    """
    flat = re.sub(r"\s+", " ", text).strip()
    if len(flat) <= max_chars:
        return flat
    return flat[: max_chars - 1].rstrip() + "…"


def extract_json_text(response_text: str) -> str:
    """Pull the JSON object out of an LLM response.
    
    Models asked for JSON sometimes wrap it in a fenced ```json block or
    add a sentence of prose around it. The fenced block wins; otherwise
    the text between the first ``{`` and the last ``}`` is returned.
    
    Args:
        response_text: Raw model output
        
    Returns:
        The candidate JSON text (may still be invalid JSON)
    """
    text = response_text.strip()
    match = _JSON_BLOCK.search(text)
    if match:
        return match.group(1)
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text
