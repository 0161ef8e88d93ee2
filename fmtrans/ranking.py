"""
Candidate ranking: which string fields in a metadata tree look like human text.

Every non-empty string leaf is a candidate. Candidates are ordered so that the
ones an operator most likely wants translated come first:

    1. values containing whitespace (phrases, sentences) before single tokens
    2. values with lowercase letters before ALL-CAPS codes and constants

Ties keep traversal order. The ordering is only a convenience for the
selection prompt; nothing downstream depends on it.
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from fmtrans.paths import iter_leaves, to_path_expression

_WHITESPACE = re.compile(r"\s")


class Candidate(NamedTuple):
    path: tuple
    value: str

    @property
    def expression(self) -> str:
        return to_path_expression(self.path)


def looks_like_phrase(value: str) -> bool:
    return bool(_WHITESPACE.search(value.strip()))


def _sort_key(candidate: Candidate) -> tuple[bool, bool]:
    value = candidate.value
    return looks_like_phrase(value), value != value.upper()


def rank(tree: Any) -> list[Candidate]:
    """
    Return every non-empty string leaf of ``tree`` as a ranked list of candidates.

    Numbers, booleans, nulls, dates and empty strings are never candidates.
    A tree without any qualifying leaf yields an empty list.
    """
    candidates = [
        Candidate(path, value)
        for path, value in iter_leaves(tree)
        if isinstance(value, str) and value
    ]
    # sorted() is stable, so equal keys keep encounter order
    return sorted(candidates, key=_sort_key, reverse=True)


def select_top(candidates: list[Candidate], count: int | None) -> list[Candidate]:
    """First ``count`` candidates (all of them when ``count`` is None)."""
    if count is None:
        return list(candidates)
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    return list(candidates[:count])
