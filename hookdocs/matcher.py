"""Map configured product ids onto on-disk source directory names.

Checkout directories are named after the upstream repository, which drifts
from the configured product id (``gravityview-datatables`` vs
``GravityView-DataTables``). Exact normalized matches win outright; otherwise
candidates are ranked by how many hyphen-separated id tokens they contain so
that a sub-product never falls back to its parent's directory.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_TOKEN_WEIGHT = 1000


def normalize_slug(value: str) -> str:
    return _NON_ALNUM.sub("", str(value or "").lower())


def score_candidate(target_id: str, candidate: str) -> int:
    """Score ``candidate``: matched token count first, name length second."""
    tokens = [token for token in str(target_id).lower().split("-") if token]
    lowered = str(candidate).lower()
    matched = sum(1 for token in tokens if token in lowered)
    return matched * _TOKEN_WEIGHT + len(lowered)


def find_best_dir(target_id: str, candidates: Iterable[str]) -> Optional[str]:
    """Return the directory name that best matches ``target_id``, if any."""
    names = list(candidates)
    target = normalize_slug(target_id)
    for name in names:
        if normalize_slug(name) == target:
            return name

    best: Optional[str] = None
    best_score = -1
    for name in names:
        score = score_candidate(target_id, name)
        if score > best_score:
            best, best_score = name, score
    return best


def list_dirs(root: Path) -> List[str]:
    """Names of the visible sub-directories of ``root``, sorted."""
    if not root.is_dir():
        return []
    return sorted(
        entry.name
        for entry in root.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


__all__ = ["find_best_dir", "list_dirs", "normalize_slug", "score_candidate"]
