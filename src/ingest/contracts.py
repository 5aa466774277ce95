from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from contracts.alto import AltoDocument


@dataclass(frozen=True, slots=True)
class IngestError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AltoFormatError(Exception):
    """
    Format-level failure: the ALTO source could not be located, read, decoded
    or parsed into a page tree.
    """

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.detail = detail

    def to_error(self) -> IngestError:
        return IngestError(code=self.code, message=self.message, detail=self.detail)


@dataclass(frozen=True, slots=True)
class IngestResult:
    """
    Parsed ALTO page tree plus audit metadata.

    On a soft (non-strict) failure `ok` is False, `document` is None and
    `meta["parsing_error"]` is True.
    """

    ok: bool
    document: AltoDocument | None
    errors: list[IngestError]
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IngestConfig:
    """
    Ingestion configuration.

    - `strict`: raise AltoFormatError on decode/parse failures instead of
      returning a flagged, unparsed result with a logged warning.
    - `encoding`: explicit source encoding; None lets the XML parser detect it.
    - `data_root`: required only for relpath-based loading; no environment reads.
    """

    strict: bool = False
    encoding: str | None = None
    require_alto_magic: bool = False
    data_root: Path | None = None
    compute_source_sha256: bool = False  # optional audit metadata

    def __post_init__(self) -> None:
        if self.encoding is not None and self.encoding.strip() == "":
            raise ValueError("encoding must be None or a non-empty codec name")
        if self.data_root is not None and not isinstance(self.data_root, Path):
            raise TypeError("data_root must be a pathlib.Path")
