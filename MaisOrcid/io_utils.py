from __future__ import annotations

import os
from typing import List, Optional

from .config import DEFAULT_KEY_FILE
from .models import ClientConfig


def _project_root() -> str:
    """
    Return the absolute path to the project root directory, inferred from the location of this module on disk.
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _candidate_paths(primary: str) -> List[str]:
    """
    Paths to try for a key file: the path as given, then relative to the project root.
    """
    candidates: List[str] = [primary]
    if not os.path.isabs(primary):
        rooted = os.path.join(_project_root(), primary)
        if rooted != os.path.abspath(primary):
            candidates.append(rooted)
    return candidates


def _read_key_file(path: str, expected_lines: int = 1) -> List[str]:
    """
    Read the non-empty lines of a key file from the first candidate location
    that exists and has at least `expected_lines` of them.
    """
    last_err: Optional[Exception] = None

    for p in _candidate_paths(path):
        try:
            with open(p, "r", encoding="utf-8") as f:
                lines = [ln.strip() for ln in f.read().splitlines() if ln.strip()]
        except FileNotFoundError as e:
            last_err = e
            continue
        if len(lines) < expected_lines:
            last_err = ValueError(f"{os.path.basename(p)} has {len(lines)} line(s), expected {expected_lines}")
            continue
        return lines

    if last_err:
        raise last_err
    raise FileNotFoundError(f"Key file not found: {path}")


def read_credentials(path: str = DEFAULT_KEY_FILE) -> ClientConfig:
    """
    Load MAIS credentials from a small text file whose first three non-empty
    lines are the client id, the client secret, and the API base URL.
    """
    lines = _read_key_file(path, expected_lines=3)
    return ClientConfig(client_id=lines[0], client_secret=lines[1], base_url=lines[2])
