"""
Canonical, authoritative contracts.

These models are the schema boundary between ingestion and the unpack core:
- `alto`: the read-only page/block/line/token tree handed to the core
- `standoff`: the flattened text plus stand-off annotation records it produces

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .alto import AltoBlock, AltoDocument, AltoLine, AltoPage, AltoToken
from .standoff import DEFAULT_ANNOTATION_SET, Annotation, AnnotationType, StandoffDocument

__all__ = [
    "AltoToken",
    "AltoLine",
    "AltoBlock",
    "AltoPage",
    "AltoDocument",
    "DEFAULT_ANNOTATION_SET",
    "AnnotationType",
    "Annotation",
    "StandoffDocument",
]
