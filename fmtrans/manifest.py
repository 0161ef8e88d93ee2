"""
Manifest files: the list of path expressions chosen for translation.

One expression per line, UTF-8. Blank lines and surrounding whitespace are
ignored on read. The same manifest can be reused for any target language.
"""

from __future__ import annotations

from pathlib import Path


def parse_manifest(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def format_manifest(expressions: list[str]) -> str:
    return "".join(f"{expression}\n" for expression in expressions)


def read_manifest(path: Path) -> list[str]:
    with Path(path).open("r", encoding="utf-8") as f:
        return parse_manifest(f.read())


def write_manifest(expressions: list[str], path: Path) -> None:
    with Path(path).open("w", encoding="utf-8") as f:
        f.write(format_manifest(expressions))
