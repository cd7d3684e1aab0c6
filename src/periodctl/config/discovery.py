"""Config file discovery.

Walk-up finder locates ``periodctl.toml``, similar to how git finds
``.git/``. ``PERIODCTL_CONFIG`` and ``--config`` override the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "periodctl.toml"
CONFIG_ENV_VAR = "PERIODCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``periodctl.toml``.

    ``PERIODCTL_CONFIG`` is checked first; if it names a missing file the
    result is None rather than falling back to the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent
