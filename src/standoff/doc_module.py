from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Any

from ingest.contracts import AltoFormatError, IngestConfig

from .artifacts import write_standoff_json_artifact
from .config import UnpackConfig
from .contracts import UnpackError, UnpackResult
from .doc_artifacts import write_unpack_doc_manifest_json
from .doc_contracts import UnpackDocEntry, UnpackDocResult
from .module import run_unpack_on_alto_relpath

logger = logging.getLogger(__name__)


def _safe_stem(relpath: str) -> str:
    """
    Deterministic, filesystem-safe stem for readability.
    """
    s = relpath.replace("\\", "/").split("/")[-1]
    if s.lower().endswith(".xml"):
        s = s[: -len(".xml")]
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "alto"


def _doc_meta(*, ingest_config: IngestConfig, unpack_config: UnpackConfig) -> dict[str, Any]:
    return {
        "stage": 2,
        "mode": "document",
        "strict": ingest_config.strict,
        "encoding": ingest_config.encoding,
        "require_alto_magic": ingest_config.require_alto_magic,
        "params": unpack_config.to_dict(),
    }


def _doc_failure(
    *, doc_id: str, source_ledger: str, error: UnpackError, meta: dict[str, Any]
) -> UnpackDocResult:
    return UnpackDocResult(
        doc_id=doc_id,
        ok=False,
        source_ledger=source_ledger,
        sources=[],
        errors=[error],
        meta=meta,
    )


def _failed_source_result(*, relpath: str, error: AltoFormatError, unpack_config: UnpackConfig) -> UnpackResult:
    return UnpackResult(
        ok=False,
        text="",
        annotations=[],
        annotation_set=unpack_config.annotation_set,
        errors=[UnpackError(code=error.code, message=error.message, detail=error.detail)],
        meta={"stage": 2, "mode": "document"},
        source_relpath=relpath,
    )


def run_unpack_on_ledger(
    *,
    ledger: Path,
    data_root: Path,
    out_dir: Path,
    out_doc_manifest: Path | None = None,
    ingest_config: IngestConfig | None = None,
    unpack_config: UnpackConfig | None = None,
) -> UnpackDocResult:
    """
    Document mode: consume a JSON ledger of ALTO sources and emit one
    stand-off artifact per source plus an optional document-level index.

    Ledger shape: {"doc_id": str, "sources": [{"source_relpath": str}, ...]}
    with every relpath resolved under `data_root`. Sources are processed in
    ledger order. A failing source never aborts the run; it is recorded in
    its own artifact and the index.
    """

    ingest_config = replace(ingest_config or IngestConfig(), data_root=data_root)
    unpack_config = unpack_config or UnpackConfig()
    meta = _doc_meta(ingest_config=ingest_config, unpack_config=unpack_config)
    source_ledger = ledger.as_posix()

    ledger_file = ledger.expanduser().resolve()
    if not ledger_file.exists():
        return _doc_failure(
            doc_id="",
            source_ledger=source_ledger,
            error=UnpackError(
                code="LEDGER_MISSING",
                message="Source ledger JSON file not found",
                detail={"ledger": source_ledger},
            ),
            meta=meta,
        )

    try:
        payload = json.loads(ledger_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        return _doc_failure(
            doc_id="",
            source_ledger=source_ledger,
            error=UnpackError(
                code="LEDGER_INVALID_JSON",
                message="Failed to read or parse source ledger JSON",
                detail={"ledger": source_ledger, "error": repr(e)},
            ),
            meta=meta,
        )

    doc_id = payload.get("doc_id") if isinstance(payload, dict) else None
    sources_in = payload.get("sources") if isinstance(payload, dict) else None
    if not isinstance(doc_id, str) or doc_id.strip() == "" or not isinstance(sources_in, list):
        return _doc_failure(
            doc_id=doc_id if isinstance(doc_id, str) else "",
            source_ledger=source_ledger,
            error=UnpackError(
                code="LEDGER_BAD_SHAPE",
                message="Source ledger missing required fields (doc_id, sources[])",
                detail={"ledger": source_ledger},
            ),
            meta=meta,
        )

    # Strict ledger validation: refuse to run if any entry is invalid.
    invalid: list[dict[str, Any]] = []
    for i, entry in enumerate(sources_in):
        if not isinstance(entry, dict):
            invalid.append({"index": i, "source_relpath": None, "reason": "entry must be a dict"})
            continue
        relpath = entry.get("source_relpath")
        if not isinstance(relpath, str) or relpath.strip() == "":
            invalid.append(
                {"index": i, "source_relpath": relpath, "reason": "source_relpath must be a non-empty string"}
            )

    if invalid:
        return _doc_failure(
            doc_id=doc_id,
            source_ledger=source_ledger,
            error=UnpackError(
                code="LEDGER_INVALID_SOURCES",
                message="Source ledger contains invalid entries; refusing to run in document mode",
                detail={"invalid_count": len(invalid), "invalid_examples": invalid[:3]},
            ),
            meta=meta,
        )

    out_dir_abs = out_dir.expanduser().resolve()
    out_doc_dir = out_dir_abs / _safe_stem(doc_id)

    entries: list[UnpackDocEntry] = []
    for idx, entry in enumerate(sources_in):
        relpath = entry["source_relpath"]
        out_file = out_doc_dir / f"{idx:04d}_{_safe_stem(relpath)}.standoff.json"

        try:
            result = run_unpack_on_alto_relpath(
                relpath=relpath, ingest_config=ingest_config, unpack_config=unpack_config
            )
        except AltoFormatError as e:
            logger.warning("Source %s failed: %s", relpath, e)
            result = _failed_source_result(relpath=relpath, error=e, unpack_config=unpack_config)

        write_standoff_json_artifact(result=result, out_file=out_file)
        entries.append(
            UnpackDocEntry(
                index=idx,
                source_relpath=relpath,
                standoff_out_relpath=out_file.relative_to(out_dir_abs).as_posix(),
                ok=result.ok,
                errors=result.errors,
                counts=dict(result.meta.get("counts") or {}),
            )
        )

    failed = [e.index for e in entries if not e.ok]
    errors: list[UnpackError] = []
    if failed:
        errors.append(
            UnpackError(
                code="UNPACK_SOME_SOURCES_FAILED",
                message="One or more ALTO sources failed to unpack",
                detail={"failed_count": len(failed), "failed_indexes": failed},
            )
        )

    result_doc = UnpackDocResult(
        doc_id=doc_id,
        ok=not errors,
        source_ledger=source_ledger,
        sources=entries,
        errors=errors,
        meta=meta,
    )
    logger.info("doc_id=%s sources=%d failed=%d", doc_id, len(entries), len(failed))

    if out_doc_manifest is not None:
        write_unpack_doc_manifest_json(result=result_doc, out_path=out_doc_manifest.expanduser().resolve())

    return result_doc
