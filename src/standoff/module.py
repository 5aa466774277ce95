from __future__ import annotations

from pathlib import Path

from ingest.contracts import IngestConfig, IngestResult
from ingest.module import load_alto_file, load_alto_relpath, load_alto_string

from .config import UnpackConfig
from .contracts import UnpackError, UnpackResult
from .unpack_markup import unpack_alto_document


def _unpack_ingested(*, ingested: IngestResult, unpack_config: UnpackConfig, source_relpath: str | None) -> UnpackResult:
    if not ingested.ok or ingested.document is None:
        # Ingestion failed softly: leave the target unmodified.
        return UnpackResult(
            ok=False,
            text="",
            annotations=[],
            annotation_set=unpack_config.annotation_set,
            errors=[UnpackError(code=e.code, message=e.message, detail=e.detail) for e in ingested.errors],
            meta={"stage": 2, "mode": "single", "ingest": dict(ingested.meta)},
            source_relpath=source_relpath,
        )

    result = unpack_alto_document(ingested.document, unpack_config)
    return UnpackResult(
        ok=result.ok,
        text=result.text,
        annotations=result.annotations,
        annotation_set=result.annotation_set,
        errors=result.errors,
        meta={**result.meta, "ingest": dict(ingested.meta)},
        source_relpath=source_relpath,
    )


def run_unpack_on_alto_string(
    *,
    content: str | None,
    ingest_config: IngestConfig | None = None,
    unpack_config: UnpackConfig | None = None,
    source_relpath: str | None = None,
) -> UnpackResult:
    """
    Ingest ALTO markup held in memory and unpack it.
    """

    ingested = load_alto_string(content, ingest_config, source_relpath=source_relpath)
    return _unpack_ingested(
        ingested=ingested, unpack_config=unpack_config or UnpackConfig(), source_relpath=source_relpath
    )


def run_unpack_on_alto_file(
    *,
    alto_file: Path,
    ingest_config: IngestConfig | None = None,
    unpack_config: UnpackConfig | None = None,
    source_relpath: str | None = None,
) -> UnpackResult:
    """
    Ingest an explicit ALTO file path (no data_root resolution) and unpack it.
    """

    ingested = load_alto_file(alto_file, ingest_config, source_relpath=source_relpath)
    return _unpack_ingested(
        ingested=ingested, unpack_config=unpack_config or UnpackConfig(), source_relpath=source_relpath
    )


def run_unpack_on_alto_relpath(
    *,
    relpath: str,
    ingest_config: IngestConfig,
    unpack_config: UnpackConfig | None = None,
) -> UnpackResult:
    """
    Ingest an ALTO file referenced by a relative path under
    `ingest_config.data_root` and unpack it.
    """

    ingested = load_alto_relpath(relpath, ingest_config)
    return _unpack_ingested(
        ingested=ingested, unpack_config=unpack_config or UnpackConfig(), source_relpath=relpath
    )
