"""
Dot-env file loading for command-line entrypoints.

The sync job can be run from a developer checkout where credentials live in `.env` or
`.env.local` rather than in the shell. Files are parsed with python-dotenv and applied
to `os.environ` with two rules: a variable that already holds a non-empty value in the
process is never overridden, and when several files define the same variable the first
file wins. Missing files are ignored.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, MutableMapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


def load_env_files(
    base_dir: Path,
    filenames: Iterable[str],
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Load KEY=VALUE pairs from dot-env files into the process environment.

    Args:
        base_dir (Path): Directory the file names are resolved against.
        filenames (Iterable[str]): File names in priority order, e.g. [".env", ".env.local"].
        environ (MutableMapping[str, str], optional): Target mapping; defaults to os.environ.

    Returns:
        Dict[str, str]: The variables that were actually set by this call.
    """
    target = os.environ if environ is None else environ
    applied: Dict[str, str] = {}
    loaded_files: List[str] = []

    for name in filenames:
        path = Path(base_dir) / name
        if not path.is_file():
            continue
        loaded_files.append(str(path))
        for key, value in dotenv_values(path, interpolate=False, encoding="utf-8").items():
            if value is None:
                continue
            if target.get(key):
                continue
            target[key] = value
            applied[key] = value

    if loaded_files:
        logger.debug("Loaded env files %s (%d variables applied)", loaded_files, len(applied))
    return applied
