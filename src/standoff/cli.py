from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from ingest.contracts import AltoFormatError, IngestConfig

from .artifacts import write_standoff_json_artifact, write_text_artifact
from .config import UnpackConfig
from .module import run_unpack_on_alto_file, run_unpack_on_alto_relpath

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="alto-standoff",
        description="Unpack ALTO XML into plain text + stand-off annotations (Page/TextBlock/TextLine/String) as JSON.",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="ALTO XML file path.")
    src.add_argument("--relpath", help="ALTO XML path relative to --data-root.")
    p.add_argument(
        "--data-root",
        type=Path,
        default=None,
        help="Resolved data root (required with --relpath; no env reads).",
    )
    p.add_argument("--out", required=True, type=Path, help="Output JSON artifact file path.")
    p.add_argument("--text-out", type=Path, default=None, help="Optional plain-text output file path.")
    p.add_argument(
        "--encoding",
        default=None,
        help="Source encoding (default: detected by the XML parser).",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Fail on decode/parse errors instead of emitting an unparsed (ok=false) result.",
    )
    p.add_argument(
        "--require-alto-magic",
        action="store_true",
        help="Reject sources without an <alto root tag near the start.",
    )
    p.add_argument("--first-hyphen-part-type", default="HypPart1")
    p.add_argument("--annotation-set", default="Original markups")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.relpath is not None and args.data_root is None:
        logger.error("--relpath requires --data-root")
        return 2

    ingest_config = IngestConfig(
        strict=args.strict,
        encoding=args.encoding,
        require_alto_magic=args.require_alto_magic,
        data_root=args.data_root,
    )
    unpack_config = UnpackConfig(
        first_hyphen_part_type=args.first_hyphen_part_type,
        annotation_set=args.annotation_set,
    )

    try:
        if args.relpath is not None:
            result = run_unpack_on_alto_relpath(
                relpath=args.relpath, ingest_config=ingest_config, unpack_config=unpack_config
            )
        else:
            result = run_unpack_on_alto_file(
                alto_file=args.input, ingest_config=ingest_config, unpack_config=unpack_config
            )
    except AltoFormatError as e:
        logger.error("%s", e)
        return 2

    write_standoff_json_artifact(result=result, out_file=args.out)
    if args.text_out is not None:
        write_text_artifact(result=result, out_file=args.text_out)

    counts = result.meta.get("counts") or {}
    summary = {
        "ok": result.ok,
        "pages": counts.get("pages", 0),
        "annotations": len(result.annotations),
        "text_length": len(result.text),
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
