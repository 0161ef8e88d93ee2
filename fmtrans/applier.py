"""
Apply a key manifest: translate the selected metadata fields and the body of a
document into one or more target languages.

Per language, the metadata strings go out as one batch and the body as a
second, concurrent request. Results are written back by path into a fresh copy
of the source metadata, so the source document is never modified and a failed
language leaves nothing half-done behind.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable

import config
from fmtrans.document import Document
from fmtrans.errors import BackendError, PathNotFound, TranslationMismatch
from fmtrans.paths import copy_tree, from_path_expression, get_value, set_value

# (texts, source_language, target_language) -> translated texts
TranslateBatch = Callable[[list, str, str], list]


@dataclass
class ApplyReport:
    """Outcome of one manifest application, keyed by target language."""

    documents: dict[str, Document] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


# ── Manifest resolution ────────────────────────────────────────────────────────

def resolve_manifest(document: Document, manifest: Iterable[str]) -> list[tuple[tuple, str]]:
    """
    Resolve every manifest expression against the document's metadata.

    Returns:
        ``(path, source_text)`` pairs in manifest order.

    Raises:
        PathNotFound: If an expression does not resolve, is malformed, or
            points at something other than a string.
    """
    resolved: list[tuple[tuple, str]] = []
    for expression in manifest:
        try:
            path = from_path_expression(expression)
        except ValueError as exc:
            raise PathNotFound(expression, str(exc)) from exc
        value = get_value(document.metadata, path)
        if not isinstance(value, str):
            raise PathNotFound(
                expression, f"value is {type(value).__name__}, not a string"
            )
        resolved.append((path, value))
    return resolved


# ── Per-language translation ───────────────────────────────────────────────────

def _call_backend(
    translate_batch: TranslateBatch,
    texts: list[str],
    source_language: str,
    target_language: str,
) -> list[str]:
    try:
        translated = translate_batch(texts, source_language, target_language)
    except Exception as exc:
        raise BackendError(f"{type(exc).__name__}: {exc}", target_language) from exc
    translated = list(translated)
    if len(translated) != len(texts):
        raise TranslationMismatch(target_language, len(texts), len(translated))
    return translated


def translate_document(
    document: Document,
    resolved: list[tuple[tuple, str]],
    source_language: str,
    target_language: str,
    translate_batch: TranslateBatch,
) -> Document:
    """
    Translate the resolved fields and the body of ``document`` into one language.

    Raises:
        TranslationMismatch: If a batch comes back with the wrong length.
        BackendError: If the backend call fails.
    """
    texts = [text for _, text in resolved]
    has_body = bool(document.body.strip())

    # Key batch and body request are independent; join on both
    with ThreadPoolExecutor(max_workers=2) as pool:
        keys_future = body_future = None
        if texts:
            keys_future = pool.submit(
                _call_backend, translate_batch, texts, source_language, target_language
            )
        if has_body:
            body_future = pool.submit(
                _call_backend, translate_batch, [document.body], source_language, target_language
            )
        translated_texts = keys_future.result() if keys_future else []
        translated_body = body_future.result()[0] if body_future else document.body

    metadata = copy_tree(document.metadata)
    for (path, _), translation in zip(resolved, translated_texts):
        set_value(metadata, path, translation)

    return Document(
        metadata=metadata,
        body=translated_body,
        has_front_matter=document.has_front_matter,
    )


# ── Core entry point ───────────────────────────────────────────────────────────

def apply_manifest(
    document: Document,
    manifest: Iterable[str],
    source_language: str,
    target_languages: Iterable[str],
    translate_batch: TranslateBatch,
    max_workers: int = config.MAX_WORKERS,
    on_done: Callable[[str], None] | None = None,
) -> ApplyReport:
    """
    Translate ``document`` into every target language using a key manifest.

    The manifest is resolved once, before any backend call, so a bad path
    costs nothing. Each language is then processed independently: a failure in
    one is recorded in the report and does not stop the others.

    Args:
        document:         Parsed source document (left untouched).
        manifest:         Path expressions of the fields to translate.
        source_language:  Language code of the source document.
        target_languages: Language codes to produce.
        translate_batch:  Backend callable ``(texts, source, target) -> texts``.
        max_workers:      How many languages run in parallel.
        on_done:          Called with each language code as it finishes.

    Returns:
        An ApplyReport with one entry per language in ``documents`` or
        ``failures``, in the requested order.

    Raises:
        PathNotFound: If any manifest path does not resolve.
    """
    resolved = resolve_manifest(document, manifest)
    languages = list(dict.fromkeys(target_languages))
    outcomes: dict[str, Document | Exception] = {}

    def run(language: str) -> None:
        try:
            outcomes[language] = translate_document(
                document, resolved, source_language, language, translate_batch
            )
        except (BackendError, TranslationMismatch, PathNotFound) as exc:
            outcomes[language] = exc
        if on_done is not None:
            on_done(language)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        for future in [pool.submit(run, language) for language in languages]:
            future.result()

    report = ApplyReport()
    for language in languages:
        outcome = outcomes[language]
        if isinstance(outcome, Exception):
            report.failures[language] = outcome
        else:
            report.documents[language] = outcome
    return report
