from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ingest.contracts import IngestConfig

from .config import UnpackConfig
from .doc_module import run_unpack_on_ledger


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="alto-standoff-doc",
        description=(
            "Document mode: consume a ledger of ALTO sources and emit per-source stand-off "
            "artifacts (+ optional document-level index)."
        ),
    )
    p.add_argument("--ledger", required=True, type=Path, help="Source ledger JSON file.")
    p.add_argument(
        "--data-root",
        required=True,
        type=Path,
        help="Resolved data root; every source_relpath is resolved under it.",
    )
    p.add_argument("--out-dir", required=True, type=Path, help="Output directory for per-source artifacts.")
    p.add_argument(
        "--out-doc",
        required=False,
        type=Path,
        default=None,
        help="Optional output file path for the document-level index.",
    )
    p.add_argument("--encoding", default=None, help="Source encoding (default: detected by the XML parser).")
    p.add_argument(
        "--strict",
        action="store_true",
        help="Treat decode/parse errors as hard per-source failures.",
    )
    p.add_argument("--require-alto-magic", action="store_true")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    result = run_unpack_on_ledger(
        ledger=args.ledger,
        data_root=args.data_root,
        out_dir=args.out_dir,
        out_doc_manifest=args.out_doc,
        ingest_config=IngestConfig(
            strict=args.strict,
            encoding=args.encoding,
            require_alto_magic=args.require_alto_magic,
        ),
        unpack_config=UnpackConfig(),
    )

    print(f"doc_id={result.doc_id or '<missing>'} sources={len(result.sources)} ok={result.ok}")
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
