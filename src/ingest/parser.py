from __future__ import annotations

from lxml import etree

from contracts.alto import AltoBlock, AltoDocument, AltoLine, AltoPage, AltoToken

# `{*}` matches the local name in any (or no) namespace, so ALTO v2/v3/v4
# namespaces and un-namespaced files are read the same way.
_PRINT_SPACE = "{*}PrintSpace"
_TEXT_BLOCK = "{*}TextBlock"
_STRING = "{*}String"


def _make_parser(*, encoding: str | None = None) -> etree.XMLParser:
    return etree.XMLParser(encoding=encoding, resolve_entities=False, no_network=True)


def parse_alto_text(text: str) -> etree._Element:
    """
    Parse already-decoded markup. Any encoding declaration in the XML prolog
    is overridden, since the text is no longer in that encoding.
    """

    return etree.fromstring(text.encode("utf-8"), parser=_make_parser(encoding="utf-8"))


def parse_alto_bytes(data: bytes) -> etree._Element:
    """
    Parse raw bytes, letting the XML parser detect the encoding (BOM, prolog).
    """

    return etree.fromstring(data, parser=_make_parser())


def _read_block(text_block: etree._Element) -> AltoBlock:
    # Line identity is the String's parent element; ordinals are assigned in
    # first-seen order. Holding the parents in the dict keeps their proxies alive.
    line_index_by_parent: dict[etree._Element, int] = {}
    lines: list[AltoLine] = []
    tokens: list[AltoToken] = []

    for s in text_block.iter(_STRING):
        parent = s.getparent()
        line_index = line_index_by_parent.get(parent)
        if line_index is None:
            line_index = len(lines)
            line_index_by_parent[parent] = line_index
            lines.append(AltoLine(line_index=line_index, element_id=parent.get("ID")))

        tokens.append(
            AltoToken(
                content=s.get("CONTENT", ""),
                line_index=line_index,
                subs_content=s.get("SUBS_CONTENT"),
                subs_type=s.get("SUBS_TYPE"),
                element_id=s.get("ID"),
                word_confidence=s.get("WC"),
                character_confidence=s.get("CC"),
            )
        )

    return AltoBlock(element_id=text_block.get("ID"), lines=lines, tokens=tokens)


def alto_tree_to_document(root: etree._Element, *, source_relpath: str | None = None) -> AltoDocument:
    """
    Build the read-only page tree from a parsed ALTO root.

    Only the main content is read: every `PrintSpace` (not the enclosing
    `Page`, so margins are ignored), its `TextBlock` descendants, and their
    `String` descendants, all in document order. No PrintSpace means an
    empty document, not a failure.
    """

    pages: list[AltoPage] = []
    for print_space in root.iter(_PRINT_SPACE):
        blocks = [_read_block(tb) for tb in print_space.iter(_TEXT_BLOCK)]
        pages.append(
            AltoPage(
                element_id=print_space.get("ID"),
                accuracy=print_space.get("ACCURACY"),
                blocks=blocks,
            )
        )
    return AltoDocument(pages=pages, source_relpath=source_relpath)
