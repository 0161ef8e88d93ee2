"""
Structural addressing inside a metadata tree.

A path is a tuple of steps. A step is either a ``str`` (mapping key) or a
non-negative ``int`` (sequence index). Paths are only turned into strings at the
manifest boundary:

    ("title",)                     →  "$.title"
    ("authors", 0, "name")         →  "$.authors[0].name"
    ("og:title",)                  →  "$['og:title']"

``from_path_expression`` also accepts the usual equivalent spellings
(``title``, ``$["title"]``, ``authors[ 0 ].name``) and always decodes them to
the same path, so re-encoding yields the canonical form.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Union

from fmtrans.errors import PathNotFound

Step = Union[str, int]
Path = tuple  # tuple[Step, ...]

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*\Z")

# Tokens following the root: ".name", "[12]", "['key']" or '["key"]'
_DOT_KEY = re.compile(r"\.([^.\[\]'\"\s]+)")
_BARE_KEY = re.compile(r"([^.\[\]'\"\s$][^.\[\]'\"\s]*)")
_INDEX = re.compile(r"\[\s*(\d+)\s*\]")
_QUOTED = re.compile(r"""\[\s*(['"])((?:\\.|(?!\1).)*)\1\s*\]""")
_ESCAPE = re.compile(r"\\(.)")
_UNESCAPED = {"n": "\n", "r": "\r"}


# ── Encoding ───────────────────────────────────────────────────────────────────

def _unescape(m: re.Match) -> str:
    return _UNESCAPED.get(m.group(1), m.group(1))


def _quote(key: str) -> str:
    escaped = (
        key.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def to_path_expression(path: tuple | list) -> str:
    """
    Encode a path as its canonical expression.

    Raises:
        ValueError: If a step is neither a string nor a non-negative integer.
    """
    parts = ["$"]
    for step in path:
        if isinstance(step, bool) or not isinstance(step, (str, int)):
            raise ValueError(f"Invalid path step {step!r} in {list(path)!r}")
        if isinstance(step, int):
            if step < 0:
                raise ValueError(f"Negative index {step} in {list(path)!r}")
            parts.append(f"[{step}]")
        elif _IDENTIFIER.match(step):
            parts.append(f".{step}")
        else:
            parts.append(f"[{_quote(step)}]")
    return "".join(parts)


def from_path_expression(expression: str) -> Path:
    """
    Decode a path expression into a tuple of steps.

    "$.authors[0].name"  →  ("authors", 0, "name")
    "$['og:title']"      →  ("og:title",)
    "summary"            →  ("summary",)

    Raises:
        ValueError: If the expression is malformed.
    """
    text = expression.strip()
    pos = 0
    steps: list[Step] = []

    if text.startswith("$"):
        pos = 1
    else:
        m = _BARE_KEY.match(text)
        if m:
            steps.append(m.group(1))
            pos = m.end()

    while pos < len(text):
        for pattern in (_DOT_KEY, _INDEX, _QUOTED):
            m = pattern.match(text, pos)
            if m:
                break
        else:
            raise ValueError(
                f"Malformed path expression {expression!r} at offset {pos}"
            )
        if pattern is _INDEX:
            steps.append(int(m.group(1)))
        elif pattern is _QUOTED:
            steps.append(_ESCAPE.sub(_unescape, m.group(2)))
        else:
            steps.append(m.group(1))
        pos = m.end()

    return tuple(steps)


# ── Traversal ──────────────────────────────────────────────────────────────────

def iter_leaves(tree: Any, prefix: tuple = ()) -> Iterator[tuple[Path, Any]]:
    """
    Yield ``(path, value)`` for every scalar leaf, depth-first in encounter order.

    Mappings are walked in key order and sequences in index order. Non-string
    mapping keys (YAML allows ``2024: ...``) are addressed by their ``str()``.
    """
    if isinstance(tree, dict):
        for key, value in tree.items():
            step = key if isinstance(key, str) else str(key)
            yield from iter_leaves(value, prefix + (step,))
    elif isinstance(tree, list):
        for index, value in enumerate(tree):
            yield from iter_leaves(value, prefix + (index,))
    else:
        yield prefix, tree


def copy_tree(tree: Any, prefix: tuple = ()) -> Any:
    """
    Copy ``tree`` so that every location holds its own container.

    YAML aliases load as one shared object; ``copy.deepcopy`` would keep that
    sharing, so writing one location would change the others.

    Raises:
        ValueError: If two keys of one mapping share an address (``1`` and ``'1'``).
    """
    if isinstance(tree, dict):
        copied = {}
        seen: dict[str, Any] = {}
        for key, value in tree.items():
            step = key if isinstance(key, str) else str(key)
            if step in seen:
                raise ValueError(
                    f"Keys {seen[step]!r} and {key!r} both address "
                    f"{to_path_expression(prefix + (step,))}"
                )
            seen[step] = key
            copied[key] = copy_tree(value, prefix + (step,))
        return copied
    if isinstance(tree, list):
        return [copy_tree(value, prefix + (index,)) for index, value in enumerate(tree)]
    return tree


def _child_key(node: Any, step: Step, path: tuple, depth: int) -> Any:
    """Return the actual key/index under which ``step`` is stored in ``node``."""
    def missing(reason: str) -> PathNotFound:
        return PathNotFound(to_path_expression(path), f"{reason} at step {depth}")

    if isinstance(node, dict):
        if isinstance(step, int):
            raise missing(f"index [{step}] applied to a mapping")
        if step in node:
            return step
        matches = [k for k in node if not isinstance(k, str) and str(k) == step]
        if len(matches) == 1:
            return matches[0]
        raise missing(f"no key {step!r}")

    if isinstance(node, list):
        if not isinstance(step, int):
            raise missing(f"key {step!r} applied to a sequence")
        if not 0 <= step < len(node):
            raise missing(f"index {step} out of range for length {len(node)}")
        return step

    raise missing(f"cannot step into scalar {type(node).__name__}")


def get_value(tree: Any, path: tuple | list) -> Any:
    """
    Return the node at ``path``.

    Raises:
        PathNotFound: If any step does not resolve.
    """
    path = tuple(path)
    cur = tree
    for depth, step in enumerate(path):
        cur = cur[_child_key(cur, step, path, depth)]
    return cur


def set_value(tree: Any, path: tuple | list, value: Any) -> None:
    """
    Replace the value at ``path`` in place. Missing nodes are never created.

    Raises:
        PathNotFound: If any step does not resolve, or ``path`` is the root.
    """
    path = tuple(path)
    if not path:
        raise PathNotFound("$", "the root cannot be replaced")
    parent = get_value(tree, path[:-1])
    parent[_child_key(parent, path[-1], path, len(path) - 1)] = value
