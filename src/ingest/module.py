from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from lxml import etree

from .contracts import AltoFormatError, IngestConfig, IngestResult
from .data_access import DataAccessError, resolve_under_data_root, sha256_bytes
from .parser import alto_tree_to_document, parse_alto_bytes, parse_alto_text
from .sniff import ALTO_MIME_TYPE, looks_like_alto

logger = logging.getLogger(__name__)


def _base_meta(*, config: IngestConfig, source_kind: str) -> dict[str, Any]:
    return {
        "stage": 1,
        "mime_type": ALTO_MIME_TYPE,
        "source_kind": source_kind,
        "encoding": config.encoding,
        "strict": config.strict,
        "parsing_error": False,
    }


def _fail_soft_or_raise(
    *,
    config: IngestConfig,
    meta: dict[str, Any],
    error: AltoFormatError,
    cause: BaseException | None,
) -> IngestResult:
    """
    Decode/parse failures are policy-selectable: raise when strict, otherwise
    flag the result, log a warning and leave the document unparsed.
    """

    if config.strict:
        raise error from cause

    logger.warning("Document remains unparsed (%s): %s", error.code, error.message, exc_info=cause)
    return IngestResult(
        ok=False,
        document=None,
        errors=[error.to_error()],
        meta={**meta, "parsing_error": True},
    )


def _decode(data: bytes, encoding: str) -> str:
    text = data.decode(encoding)
    # Some codecs (utf-8, utf-16-le, ...) leave the byte order mark in place.
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def _ingest(
    source: str | bytes,
    *,
    config: IngestConfig,
    meta: dict[str, Any],
    source_relpath: str | None,
) -> IngestResult:
    if config.require_alto_magic and not looks_like_alto(source):
        return _fail_soft_or_raise(
            config=config,
            meta=meta,
            error=AltoFormatError(
                "ALTO_NOT_DETECTED",
                "Source does not look like ALTO XML (no <alto root tag near the start)",
                {"source_relpath": source_relpath},
            ),
            cause=None,
        )

    try:
        root = parse_alto_text(source) if isinstance(source, str) else parse_alto_bytes(source)
    except etree.XMLSyntaxError as e:
        return _fail_soft_or_raise(
            config=config,
            meta=meta,
            error=AltoFormatError(
                "ALTO_PARSE_ERROR",
                "Failed to parse ALTO XML",
                {"source_relpath": source_relpath, "error": str(e)},
            ),
            cause=e,
        )

    document = alto_tree_to_document(root, source_relpath=source_relpath)
    return IngestResult(
        ok=True,
        document=document,
        errors=[],
        meta={**meta, "pages": len(document.pages)},
    )


def load_alto_string(
    content: str | None, config: IngestConfig | None = None, *, source_relpath: str | None = None
) -> IngestResult:
    """
    Ingest ALTO markup held in memory as text (no source file involved).
    """

    config = config or IngestConfig()
    if not content:
        raise AltoFormatError("ALTO_INPUT_ABSENT", "ALTO document is null or no content found. Nothing to parse!")

    return _ingest(content, config=config, meta=_base_meta(config=config, source_kind="string"), source_relpath=source_relpath)


def load_alto_bytes(
    data: bytes | None, config: IngestConfig | None = None, *, source_relpath: str | None = None
) -> IngestResult:
    """
    Ingest raw ALTO bytes. With `config.encoding` set the bytes are decoded
    (BOM stripped) before parsing; otherwise the parser detects the encoding.
    """

    config = config or IngestConfig()
    if not data:
        raise AltoFormatError("ALTO_INPUT_ABSENT", "ALTO document is null or no content found. Nothing to parse!")

    meta = _base_meta(config=config, source_kind="bytes")
    if config.compute_source_sha256:
        meta["source_sha256"] = sha256_bytes(data)

    if config.encoding is None:
        return _ingest(data, config=config, meta=meta, source_relpath=source_relpath)

    try:
        text = _decode(data, config.encoding)
    except (UnicodeDecodeError, LookupError) as e:
        return _fail_soft_or_raise(
            config=config,
            meta=meta,
            error=AltoFormatError(
                "ALTO_DECODE_ERROR",
                f"Failed to decode source as {config.encoding!r}",
                {"source_relpath": source_relpath, "error": str(e)},
            ),
            cause=e,
        )
    return _ingest(text, config=config, meta=meta, source_relpath=source_relpath)


def load_alto_file(
    path: Path | None, config: IngestConfig | None = None, *, source_relpath: str | None = None
) -> IngestResult:
    """
    Ingest an ALTO file. Unreadable sources always raise; the file handle is
    released on every path, including parse failures.
    """

    config = config or IngestConfig()
    if path is None:
        raise AltoFormatError("ALTO_INPUT_ABSENT", "ALTO document is null or no content found. Nothing to parse!")

    try:
        data = path.read_bytes()
    except OSError as e:
        raise AltoFormatError(
            "ALTO_SOURCE_UNREADABLE",
            "Failed to read ALTO source",
            {"source_relpath": source_relpath, "path": str(path), "error": str(e)},
        ) from e

    result = load_alto_bytes(data, config, source_relpath=source_relpath)
    return IngestResult(
        ok=result.ok,
        document=result.document,
        errors=result.errors,
        meta={**result.meta, "source_kind": "file"},
    )


def load_alto_relpath(relpath: str, config: IngestConfig) -> IngestResult:
    """
    Ingest an ALTO file referenced by a relative path under `config.data_root`.
    """

    if config.data_root is None:
        raise AltoFormatError("ALTO_DATA_ROOT_MISSING", "config.data_root is required for relpath loading")

    try:
        path = resolve_under_data_root(data_root=config.data_root, relpath=relpath)
    except DataAccessError as e:
        raise AltoFormatError(
            "ALTO_DATA_ACCESS_ERROR",
            str(e),
            {"data_root": str(config.data_root), "relpath": relpath},
        ) from e

    return load_alto_file(path, config, source_relpath=relpath)
