from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from contracts.standoff import Annotation, StandoffDocument


@dataclass(frozen=True, slots=True)
class UnpackError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class UnpackResult:
    """
    Machine-readable, auditable unpack output.

    On ingestion failure `ok` is False, `text` is empty and there are no
    annotations. Nothing is fabricated to stand in for unparsed content.
    """

    ok: bool
    text: str
    annotations: list[Annotation]
    annotation_set: str
    errors: list[UnpackError]
    meta: dict[str, Any]
    source_relpath: str | None = None

    def standoff(self) -> StandoffDocument:
        return StandoffDocument(
            text=self.text, annotations=list(self.annotations), annotation_set=self.annotation_set
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Stable JSON-serializable representation (dataclasses -> primitives).
        """

        return {
            "ok": self.ok,
            "text": self.text,
            "annotation_set": self.annotation_set,
            "annotations": [a.to_dict() for a in self.annotations],
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
            "source_relpath": self.source_relpath,
        }
