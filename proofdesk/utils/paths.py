#!/usr/bin/env python
"""
paths.py – single source of truth for proofdesk folders.
           Import these constants everywhere.
"""

import os
from pathlib import Path

# Try to get home from environment variable first
HOME = os.environ.get('PROOFDESK_HOME')
if HOME:
    HOME = Path(HOME).expanduser().resolve()
else:
    # Fallback: look for a marker file (like .git or pyproject.toml) in parent directories
    current = Path(__file__).resolve()
    while current.parent != current:
        if any((current / marker).exists() for marker in ['.git', 'pyproject.toml']):
            HOME = current
            break
        current = current.parent
    else:
        # installed as a regular package: keep state in the user's home
        HOME = Path.home() / ".proofdesk"

LOG_DIR      = HOME / "logs"
CONFIG_FILE  = HOME / "proofdesk.yaml"
HISTORY_FILE = HOME / "history.json"

# Name of the persisted history slot
HISTORY_SLOT = "khmer_spellcheck_history"

# guarantee critical folders exist at import-time
for p in (LOG_DIR,):
    p.mkdir(parents=True, exist_ok=True)
