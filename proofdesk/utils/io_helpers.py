#!/usr/bin/env python
"""
io_helpers.py – tiny utilities for BOM-safe UTF-8 reading / writing.

All project code should import these instead of calling Path.read_text().
"""

from pathlib import Path
import sys, os
import unicodedata

from ftfy import fix_text

BOM = b"\xef\xbb\xbf"

# ── public API ─────────────────────────────────────────────────────────────
def read_utf8(path: Path) -> str:
    """
    Return file contents as str, decoded UTF-8, stripping BOM if present.
    Uses strict error-handling by default to catch encoding issues early.
    """
    raw = Path(path).read_bytes()
    if raw.startswith(BOM):
        raw = raw[len(BOM):]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        # Last resort: decode with replacement and repair what we can
        return normalize_text(raw.decode("utf-8", errors="replace"))

def write_utf8(path: Path, text: str, normalize: bool = False) -> None:
    """Write text to *path* as UTF-8.

    The file is written to a sibling temp file first and moved into place,
    so a crash mid-write never leaves a truncated file behind.
    """
    path = Path(path)
    if normalize:
        text = normalize_text(text)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)

def normalize_text(text: str) -> str:
    """
    Repair mojibake (smart quotes, dashes decoded with the wrong codec) and
    normalize to composed form (NFC).
    """
    return unicodedata.normalize("NFC", fix_text(text))

def ensure_utf8_windows() -> None:
    """Force UTF-8 on Windows terminals so Khmer output is readable."""
    if sys.platform == "win32":
        if sys.stdout.encoding != "utf-8":
            try:
                sys.stdout.reconfigure(encoding="utf-8")
            except AttributeError:
                os.environ["PYTHONIOENCODING"] = "utf-8"
        if sys.stderr.encoding != "utf-8":
            try:
                sys.stderr.reconfigure(encoding="utf-8")
            except AttributeError:
                pass
        os.environ["PYTHONIOENCODING"] = "utf-8"
