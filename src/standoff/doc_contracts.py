from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .contracts import UnpackError


@dataclass(frozen=True, slots=True)
class UnpackDocEntry:
    """
    Ledger entry for a single ALTO source.

    This is an index only; it does not duplicate text or annotations. The
    referenced `standoff_out_relpath` points to the per-source JSON artifact.
    """

    index: int  # position in the input ledger
    source_relpath: str  # relative to data_root
    standoff_out_relpath: str  # relative to out_dir
    ok: bool
    errors: list[UnpackError]
    counts: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "source_relpath": self.source_relpath,
            "standoff_out_relpath": self.standoff_out_relpath,
            "ok": self.ok,
            "errors": [e.to_dict() for e in self.errors],
            "counts": dict(self.counts),
        }


@dataclass(frozen=True, slots=True)
class UnpackDocResult:
    """
    Document-mode run index (ledger) over many ALTO sources.
    """

    doc_id: str
    ok: bool  # True iff all sources ok AND there are no document-level errors
    source_ledger: str
    sources: list[UnpackDocEntry]
    errors: list[UnpackError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "doc_id": self.doc_id,
            "ok": self.ok,
            "source_ledger": self.source_ledger,
            "sources": [s.to_dict() for s in self.sources],
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }
