"""
Front-matter document envelope: a YAML metadata block followed by a free-text body.

    ---
    title: Hello
    tags: [intro, guide]
    ---
    # Body text kept byte-for-byte

The metadata tree is loaded with PyYAML (mappings keep their key order) and
written back with ``sort_keys=False``; the body is never touched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fmtrans.errors import MalformedDocument
from fmtrans.paths import copy_tree

_OPENING = re.compile(r"\A(?:\ufeff)?---[ \t]*\r?\n")
_CLOSING = re.compile(r"^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.MULTILINE)


@dataclass
class Document:
    """A parsed front-matter document."""

    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    has_front_matter: bool = True


def parse_document(text: str, source: str | None = None) -> Document:
    """
    Split ``text`` into metadata and body.

    Text that does not open with a ``---`` line has no metadata block: the whole
    text becomes the body.

    Raises:
        MalformedDocument: If the block is unterminated, is not valid YAML, or
            does not hold a mapping.
    """
    opening = _OPENING.match(text)
    if not opening:
        return Document(metadata={}, body=text, has_front_matter=False)

    # An empty block closes on the line right after the opening one
    closing = _CLOSING.search(text, opening.end())
    if not closing:
        raise MalformedDocument("front matter block is not terminated", source)

    raw = text[opening.end():closing.start()]
    try:
        metadata = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise MalformedDocument(f"invalid YAML front matter: {exc}", source) from exc

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MalformedDocument(
            f"front matter must be a mapping, got {type(metadata).__name__}", source
        )

    # Split anchors/aliases into independent locations
    try:
        metadata = copy_tree(metadata)
    except ValueError as exc:
        raise MalformedDocument(str(exc), source) from exc

    return Document(metadata=metadata, body=text[closing.end():])


def serialize_document(document: Document) -> str:
    """Render ``document`` back to text, metadata block first."""
    if not document.has_front_matter and not document.metadata:
        return document.body

    if document.metadata:
        block = yaml.safe_dump(
            document.metadata,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    else:
        block = ""
    return f"---\n{block}---\n{document.body}"


# ── File I/O helpers ───────────────────────────────────────────────────────────

def load_document(path: Path) -> Document:
    """Read and parse a UTF-8 document from ``path``."""
    path = Path(path)
    # newline="" keeps the body's line endings untouched
    with path.open("r", encoding="utf-8", newline="") as f:
        text = f.read()
    return parse_document(text, source=path.name)


def save_document(document: Document, path: Path) -> None:
    """Serialize ``document`` to ``path`` as UTF-8."""
    with Path(path).open("w", encoding="utf-8", newline="") as f:
        f.write(serialize_document(document))
