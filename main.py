"""
Entry point for the front-matter translation tool.

Usage:
    python main.py select page.en.md                  # pick fields interactively
    python main.py select page.en.md --top 5 -o page.keys
    python main.py translate page.en.md --lang fr de
    python main.py translate page.en.md -l ja -k page.keys --model gpt-4o
"""

from __future__ import annotations

import argparse
import functools
import sys
from pathlib import Path

import questionary
from tqdm import tqdm

import config
from fmtrans.applier import apply_manifest
from fmtrans.document import load_document, save_document
from fmtrans.errors import MalformedDocument, PathNotFound
from fmtrans.manifest import read_manifest, write_manifest
from fmtrans.naming import (
    default_manifest_path,
    source_language_from_path,
    translated_output_path,
)
from fmtrans.ranking import Candidate, looks_like_phrase, rank, select_top


# ── Key selection ──────────────────────────────────────────────────────────────

def _preview(value: str, width: int = 60) -> str:
    flat = " ".join(value.split())
    return flat if len(flat) <= width else flat[: width - 1] + "…"


def ask_candidates(candidates: list[Candidate]) -> list[Candidate]:
    """Let the operator tick the fields to translate; phrases start ticked."""
    choices = [
        questionary.Choice(
            title=f"{c.expression} = {_preview(c.value)}",
            value=c.expression,
            checked=looks_like_phrase(c.value),
        )
        for c in candidates
    ]
    picked = questionary.checkbox("Select the fields to translate:", choices=choices).ask()
    if picked is None:  # Ctrl-C
        raise KeyboardInterrupt
    chosen = set(picked)
    return [c for c in candidates if c.expression in chosen]


def run_select(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else default_manifest_path(input_path)

    document = load_document(input_path)
    candidates = rank(document.metadata)

    print(f"Input           : {input_path}")
    print(f"Candidates      : {len(candidates)}")

    if not candidates:
        print("[WARN] No translatable string fields found.")
        selected: list[Candidate] = []
    elif args.all:
        selected = candidates
    elif args.top is not None:
        selected = select_top(candidates, args.top)
    else:
        selected = ask_candidates(candidates)

    write_manifest([c.expression for c in selected], output_path)
    print(f"Selected        : {len(selected)}")
    print(f"  Saved → {output_path}")
    return 0


# ── Translation ────────────────────────────────────────────────────────────────

def run_translate(args: argparse.Namespace) -> int:
    from fmtrans.client import translate_batch

    input_path = Path(args.input)
    keys_path = Path(args.keys) if args.keys else default_manifest_path(input_path)

    if not keys_path.exists():
        print(f"[ERROR] Key manifest not found: {keys_path} (run 'select' first)")
        return 1

    source_language = source_language_from_path(input_path)
    document = load_document(input_path)
    manifest = read_manifest(keys_path)

    print(f"Input           : {input_path}")
    print(f"Source language : {source_language}")
    print(f"Target languages: {', '.join(args.lang)}")
    print(f"Model           : {args.model}")
    print(f"Keys            : {len(manifest)} ({keys_path})\n")

    backend = functools.partial(translate_batch, model=args.model)

    with tqdm(total=len(args.lang), desc="  Translating languages", unit="lang") as bar:
        report = apply_manifest(
            document,
            manifest,
            source_language,
            args.lang,
            backend,
            max_workers=args.workers,
            on_done=lambda _language: bar.update(1),
        )

    saved = 0
    for language, translated in report.documents.items():
        out_path = translated_output_path(input_path, language)
        try:
            save_document(translated, out_path)
        except OSError as exc:
            report.failures[language] = exc
            continue
        saved += 1
        print(f"  [{language}] Saved → {out_path}")

    for language, exc in report.failures.items():
        print(f"  [ERROR] [{language}] {exc}")

    print(f"\nDone: {saved} succeeded, {len(report.failures)} failed.")
    return 0 if report.ok else 1


# ── CLI ────────────────────────────────────────────────────────────────────────

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Translate the text fields and body of front-matter documents."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    select = sub.add_parser("select", help="Choose which metadata fields to translate.")
    select.add_argument("input", help="Source document, e.g. page.en.md")
    select.add_argument(
        "--output", "-o",
        default=None,
        help=f"Manifest path (default: <input>{config.MANIFEST_SUFFIX})",
    )
    mode = select.add_mutually_exclusive_group()
    mode.add_argument(
        "--all",
        action="store_true",
        help="Select every candidate without prompting.",
    )
    mode.add_argument(
        "--top",
        type=int,
        default=config.SELECT_TOP,
        help="Select the N best-ranked candidates without prompting.",
    )
    select.set_defaults(handler=run_select)

    translate = sub.add_parser("translate", help="Translate a document using a key manifest.")
    translate.add_argument("input", help="Source document, e.g. page.en.md")
    translate.add_argument(
        "--lang", "-l",
        nargs="+",
        required=True,
        help='Target language codes, e.g. "fr de ja"',
    )
    translate.add_argument(
        "--keys", "-k",
        default=None,
        help=f"Key manifest (default: <input>{config.MANIFEST_SUFFIX})",
    )
    translate.add_argument(
        "--model", "-m",
        default=config.MODEL,
        help=f"OpenAI model to use (default: {config.MODEL})",
    )
    translate.add_argument(
        "--workers", "-w",
        type=int,
        default=config.MAX_WORKERS,
        help=f"Languages translated in parallel (default: {config.MAX_WORKERS})",
    )
    translate.set_defaults(handler=run_translate)

    return parser.parse_args(argv)


# ── Main ───────────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if not Path(args.input).exists():
        print(f"[ERROR] Input file not found: {args.input}")
        return 1

    try:
        return args.handler(args)
    except (MalformedDocument, PathNotFound, ValueError) as exc:
        print(f"[ERROR] {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
