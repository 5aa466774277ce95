from __future__ import annotations

ALTO_MIME_TYPE = "application/xml+alto"
ALTO_MAGIC = "<alto"

# Only the head of a source is inspected.
SNIFF_WINDOW = 4096


def looks_like_alto(head: str | bytes, *, window: int = SNIFF_WINDOW) -> bool:
    """
    Content sniffing: True when the `<alto` root tag appears in the first
    `window` characters/bytes. A prefixed root (`<alto:alto`) also matches.
    """

    if isinstance(head, bytes):
        return ALTO_MAGIC.encode("ascii") in head[:window]
    return ALTO_MAGIC in head[:window]
