"""
Markup unpacking: ALTO page tree -> plain text + stand-off annotations.

One forward pass over pages, blocks and tokens:
- token text resolution (first hyphenation part carries the reunited word)
- separators: one space between tokens, a blank line between blocks and pages
- TextLine spans inferred from changes of the tokens' grouping parent
- Page/TextBlock/TextLine/String spans as absolute offsets into the text

No geometry, no schema validation, no nested annotation tree.
"""

from .config import UnpackConfig
from .contracts import UnpackError, UnpackResult
from .doc_module import run_unpack_on_ledger
from .module import run_unpack_on_alto_file, run_unpack_on_alto_relpath, run_unpack_on_alto_string
from .unpack_markup import unpack_alto_document

__all__ = [
    "UnpackConfig",
    "UnpackError",
    "UnpackResult",
    "run_unpack_on_alto_file",
    "run_unpack_on_alto_relpath",
    "run_unpack_on_alto_string",
    "run_unpack_on_ledger",
    "unpack_alto_document",
]
