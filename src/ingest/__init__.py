"""
ALTO ingestion (locate, decode, parse).

Contract:
- Input: an ALTO XML source (text, bytes, file, or relpath under data_root)
- Output: a read-only `contracts.alto.AltoDocument` page tree
- Absent or unreadable sources always raise `AltoFormatError`; decode/parse
  failures raise only when `IngestConfig.strict` is set, otherwise they are
  flagged on the result and logged

Data access:
- No environment variable reads in this module
- Relpaths are resolved under an explicitly passed data_root
"""

from .contracts import AltoFormatError, IngestConfig, IngestError, IngestResult
from .module import load_alto_bytes, load_alto_file, load_alto_relpath, load_alto_string
from .parser import alto_tree_to_document
from .sniff import ALTO_MAGIC, ALTO_MIME_TYPE, looks_like_alto

__all__ = [
    "ALTO_MAGIC",
    "ALTO_MIME_TYPE",
    "AltoFormatError",
    "IngestConfig",
    "IngestError",
    "IngestResult",
    "alto_tree_to_document",
    "load_alto_bytes",
    "load_alto_file",
    "load_alto_relpath",
    "load_alto_string",
    "looks_like_alto",
]
