#!/usr/bin/env python3
"""
debug_print_standoff.py

Purpose
- Inspect stand-off artifacts in the terminal.
- Accepts either:
  1) a document index (ledger output) with `sources[].standoff_out_relpath`, or
  2) a single `*.standoff.json` artifact.

Features
- Prints a compact summary (counts, skipped tokens, errors).
- Lists annotations with the text they cover, indented by structural level.
- Flags annotations whose offsets fall outside the text.

Usage examples
  python3 tools/debug_print_standoff.py out/mydoc/0000_page.standoff.json
  python3 tools/debug_print_standoff.py out/mydoc_index.json --out-dir out --type TextLine

Options
  --out-dir DIR         Base directory of `standoff_out_relpath` (document index only)
  --type TYPE           Only list annotations of this type (repeatable)
  --max-snippet 80      Max characters for a snippet
  --no-annotations      Print the summary only
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from contracts.standoff import AnnotationType, StandoffDocument

_INDENT = {
    AnnotationType.PAGE: 0,
    AnnotationType.TEXT_BLOCK: 1,
    AnnotationType.TEXT_LINE: 2,
    AnnotationType.STRING: 3,
}


def _read_json(p: Path) -> Any:
    return json.loads(p.read_text(encoding="utf-8"))


def _snippet(s: str, max_len: int) -> str:
    s = s.replace("\n", "\\n")
    return s if len(s) <= max_len else s[: max_len - 3] + "..."


def print_artifact(payload: dict[str, Any], *, types: set[str] | None, max_snippet: int, show_annotations: bool) -> None:
    doc = StandoffDocument.from_dict(payload)
    meta = payload.get("meta") or {}
    counts = meta.get("counts") or {}

    print(f"source={payload.get('source_relpath')} ok={payload.get('ok')} set={doc.annotation_set!r}")
    print(f"  text_length={len(doc.text)} annotations={len(doc.annotations)}")
    if counts:
        print("  counts: " + " ".join(f"{k}={counts[k]}" for k in sorted(counts)))
    for e in payload.get("errors") or []:
        print(f"  error {e.get('code')}: {e.get('message')}")
    for s in meta.get("skipped_tokens") or []:
        print(f"  skipped {s.get('position')} id={s.get('token_id')} reason={s.get('reason')}")
    for v in doc.offset_violations():
        print(f"  OFFSET VIOLATION {v}")

    if not show_annotations:
        return

    for a in doc.annotations:
        if types and a.type.value not in types:
            continue
        attrs = " ".join(f"{k}={v}" for k, v in sorted(a.attributes.items()))
        pad = "  " * (_INDENT[a.type] + 1)
        print(f"{pad}{a.type.value}({a.start},{a.end}) {attrs} | {_snippet(doc.covered_text(a), max_snippet)}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="debug_print_standoff")
    p.add_argument("artifact", type=Path)
    p.add_argument("--out-dir", type=Path, default=None)
    p.add_argument("--type", action="append", dest="types", default=None, choices=[t.value for t in AnnotationType])
    p.add_argument("--max-snippet", type=int, default=80)
    p.add_argument("--no-annotations", action="store_true")
    args = p.parse_args(argv)

    payload = _read_json(args.artifact)
    types = set(args.types) if args.types else None

    if isinstance(payload, dict) and "sources" in payload:
        base = args.out_dir or args.artifact.parent
        print(f"doc_id={payload.get('doc_id')} ok={payload.get('ok')} sources={len(payload['sources'])}")
        for entry in payload["sources"]:
            artifact = base / entry["standoff_out_relpath"]
            if not artifact.exists():
                print(f"  missing artifact: {artifact}")
                continue
            print_artifact(
                _read_json(artifact),
                types=types,
                max_snippet=args.max_snippet,
                show_annotations=not args.no_annotations,
            )
        return 0

    print_artifact(payload, types=types, max_snippet=args.max_snippet, show_annotations=not args.no_annotations)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
