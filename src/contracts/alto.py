from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _opt_str(v: Any) -> str | None:
    return None if v is None else str(v)


@dataclass(frozen=True, slots=True)
class AltoToken:
    """
    One ALTO `String` element.

    `line_index` is the ordinal of the token's parent `TextLine` within its
    block; two tokens share a line iff their `line_index` values are equal.
    """

    content: str  # CONTENT, may be empty
    line_index: int
    subs_content: str | None = None  # SUBS_CONTENT
    subs_type: str | None = None  # SUBS_TYPE
    element_id: str | None = None  # ID
    word_confidence: str | None = None  # WC
    character_confidence: str | None = None  # CC

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AltoToken":
        return AltoToken(
            content=str(d.get("content", "")),
            line_index=int(d["line_index"]),
            subs_content=_opt_str(d.get("subs_content")),
            subs_type=_opt_str(d.get("subs_type")),
            element_id=_opt_str(d.get("element_id")),
            word_confidence=_opt_str(d.get("word_confidence")),
            character_confidence=_opt_str(d.get("character_confidence")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "line_index": self.line_index,
            "subs_content": self.subs_content,
            "subs_type": self.subs_type,
            "element_id": self.element_id,
            "word_confidence": self.word_confidence,
            "character_confidence": self.character_confidence,
        }


@dataclass(frozen=True, slots=True)
class AltoLine:
    line_index: int  # ordinal within the block
    element_id: str | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AltoLine":
        return AltoLine(line_index=int(d["line_index"]), element_id=_opt_str(d.get("element_id")))

    def to_dict(self) -> dict[str, Any]:
        return {"line_index": self.line_index, "element_id": self.element_id}


@dataclass(frozen=True, slots=True)
class AltoBlock:
    element_id: str | None
    lines: list[AltoLine]
    tokens: list[AltoToken]  # document order across the whole block

    def line(self, line_index: int) -> AltoLine | None:
        for ln in self.lines:
            if ln.line_index == line_index:
                return ln
        return None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AltoBlock":
        lines_raw = d.get("lines") or []
        tokens_raw = d.get("tokens") or []
        if not isinstance(lines_raw, list) or not isinstance(tokens_raw, list):
            raise TypeError("AltoBlock.lines and AltoBlock.tokens must be lists")
        return AltoBlock(
            element_id=_opt_str(d.get("element_id")),
            lines=[AltoLine.from_dict(x) for x in lines_raw],
            tokens=[AltoToken.from_dict(x) for x in tokens_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "lines": [ln.to_dict() for ln in self.lines],
            "tokens": [t.to_dict() for t in self.tokens],
        }


@dataclass(frozen=True, slots=True)
class AltoPage:
    """
    One ALTO `PrintSpace`. Margins, headers and footers are not represented.
    """

    element_id: str | None
    accuracy: str | None  # ACCURACY
    blocks: list[AltoBlock]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AltoPage":
        blocks_raw = d.get("blocks") or []
        if not isinstance(blocks_raw, list):
            raise TypeError("AltoPage.blocks must be a list")
        return AltoPage(
            element_id=_opt_str(d.get("element_id")),
            accuracy=_opt_str(d.get("accuracy")),
            blocks=[AltoBlock.from_dict(b) for b in blocks_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "accuracy": self.accuracy,
            "blocks": [b.to_dict() for b in self.blocks],
        }


@dataclass(frozen=True, slots=True)
class AltoDocument:
    pages: list[AltoPage]
    source_relpath: str | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AltoDocument":
        # A missing page list is a valid, empty document.
        pages_raw = d.get("pages") or []
        if not isinstance(pages_raw, list):
            raise TypeError("AltoDocument.pages must be a list")
        return AltoDocument(
            pages=[AltoPage.from_dict(p) for p in pages_raw],
            source_relpath=_opt_str(d.get("source_relpath")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pages": [p.to_dict() for p in self.pages],
            "source_relpath": self.source_relpath,
        }
