"""
File naming conventions.

    page.en.md                →  source language "en"
    page.en.md + "fr"         →  page.en.fr.md
    page.en.md (manifest)     →  page.en.md.keys
"""

from __future__ import annotations

from pathlib import Path

import config


def source_language_from_path(path: Path) -> str:
    """
    Return the language tag embedded in the file name (penultimate segment).

    Raises:
        ValueError: If the name has no ``<name>.<lang>.<ext>`` shape.
    """
    segments = Path(path).name.split(".")
    if len(segments) < 3 or not segments[-2]:
        raise ValueError(
            f"Cannot detect source language from '{Path(path).name}': "
            "expected a name like 'page.en.md'"
        )
    return segments[-2]


def translated_output_path(path: Path, language: str) -> Path:
    """Insert ``language`` before the extension, keeping the source tag."""
    path = Path(path)
    return path.with_name(f"{path.stem}.{language}{path.suffix}")


def default_manifest_path(path: Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + config.MANIFEST_SUFFIX)
