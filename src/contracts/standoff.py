from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_ANNOTATION_SET = "Original markups"


class AnnotationType(str, Enum):
    PAGE = "Page"
    TEXT_BLOCK = "TextBlock"
    TEXT_LINE = "TextLine"
    STRING = "String"


@dataclass(frozen=True, slots=True)
class Annotation:
    # Absolute, 0-based, end-exclusive offsets into StandoffDocument.text.
    type: AnnotationType
    start: int
    end: int
    attributes: dict[str, str] = field(default_factory=dict)  # only attributes present on the source element

    def length(self) -> int:
        return int(self.end - self.start)

    def contains(self, other: "Annotation") -> bool:
        return self.start <= other.start and other.end <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "start": self.start,
            "end": self.end,
            "attributes": dict(self.attributes),
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Annotation":
        return Annotation(
            type=AnnotationType(str(d["type"])),
            start=int(d["start"]),
            end=int(d["end"]),
            attributes={str(k): str(v) for k, v in (d.get("attributes") or {}).items()},
        )


@dataclass(frozen=True, slots=True)
class StandoffDocument:
    text: str
    annotations: list[Annotation]
    annotation_set: str = DEFAULT_ANNOTATION_SET

    def covered_text(self, annotation: Annotation) -> str:
        return self.text[annotation.start : annotation.end]

    def of_type(self, annotation_type: AnnotationType) -> list[Annotation]:
        return [a for a in self.annotations if a.type == annotation_type]

    def offset_violations(self) -> list[str]:
        """
        Describe every annotation whose offsets fall outside 0 <= start <= end <= len(text).

        An empty list means the document is offset-consistent. A non-empty list
        is a defect in the producer, never an input condition.
        """

        n = len(self.text)
        out: list[str] = []
        for i, a in enumerate(self.annotations):
            if not (0 <= a.start <= a.end <= n):
                out.append(f"#{i} {a.type.value}({a.start},{a.end}) outside text of length {n}")
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "annotation_set": self.annotation_set,
            "annotations": [a.to_dict() for a in self.annotations],
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "StandoffDocument":
        annotations_raw = d.get("annotations") or []
        if not isinstance(annotations_raw, list):
            raise TypeError("StandoffDocument.annotations must be a list")
        return StandoffDocument(
            text=str(d.get("text", "")),
            annotations=[Annotation.from_dict(a) for a in annotations_raw],
            annotation_set=str(d.get("annotation_set") or DEFAULT_ANNOTATION_SET),
        )
