from __future__ import annotations

import unittest

from contracts.alto import AltoBlock, AltoDocument, AltoLine, AltoPage, AltoToken
from contracts.standoff import Annotation, AnnotationType
from standoff.config import UnpackConfig
from standoff.unpack_markup import unpack_alto_document

PAGE = AnnotationType.PAGE
BLOCK = AnnotationType.TEXT_BLOCK
LINE = AnnotationType.TEXT_LINE
STRING = AnnotationType.STRING


def _spans(result) -> list[tuple[str, int, int]]:
    return [(a.type.value, a.start, a.end) for a in result.annotations]


def _block(*lines: list[AltoToken], element_id: str | None = None, line_ids: list[str | None] | None = None) -> AltoBlock:
    tokens = [t for ln in lines for t in ln]
    ids = line_ids or [None] * len(lines)
    return AltoBlock(
        element_id=element_id,
        lines=[AltoLine(line_index=i, element_id=ids[i]) for i in range(len(lines))],
        tokens=tokens,
    )


def _tok(content: str, line_index: int, **kw) -> AltoToken:
    return AltoToken(content=content, line_index=line_index, **kw)


class TestUnpackScenarios(unittest.TestCase):
    def test_empty_document_yields_empty_output(self) -> None:
        for doc in (AltoDocument(pages=[]), AltoDocument.from_dict({})):
            r = unpack_alto_document(doc)
            self.assertTrue(r.ok)
            self.assertEqual(r.text, "")
            self.assertEqual(r.annotations, [])
            self.assertEqual(r.meta["counts"]["pages"], 0)

    def test_simple_block(self) -> None:
        block = _block([_tok("Hello", 0), _tok("world", 0)])
        r = unpack_alto_document(AltoDocument(pages=[AltoPage(element_id=None, accuracy=None, blocks=[block])]))

        self.assertEqual(r.text, "Hello world")
        self.assertEqual(
            _spans(r),
            [
                ("String", 0, 5),
                ("TextLine", 0, 11),
                ("String", 6, 11),
                ("TextBlock", 0, 11),
                ("Page", 0, 11),
            ],
        )

    def test_hyphenated_word_is_reunited_on_first_part(self) -> None:
        block = _block(
            [_tok("Hel-", 0, subs_content="Hello", subs_type="HypPart1")],
            [_tok("lo", 1, subs_content="Hello", subs_type="HypPart2"), _tok("there", 1)],
        )
        r = unpack_alto_document(AltoDocument(pages=[AltoPage(element_id=None, accuracy=None, blocks=[block])]))

        self.assertEqual(r.text, "Hello there")
        self.assertEqual(
            _spans(r),
            [
                # Line 1 closes on the literal "Hel-" length, not "Hello".
                ("TextLine", 0, 4),
                ("String", 0, 5),
                # No separator position is reserved after a hyphen fragment.
                ("TextLine", 4, 11),
                ("String", 6, 11),
                ("TextBlock", 0, 11),
                ("Page", 0, 11),
            ],
        )

        strings = [a for a in r.annotations if a.type == STRING]
        self.assertEqual(len(strings), 2)
        self.assertEqual(r.text[strings[0].start : strings[0].end], "Hello")

        counts = r.meta["counts"]
        self.assertEqual(counts["tokens_in"], 3)
        self.assertEqual(counts["tokens_emitted"], 2)
        self.assertEqual(counts["tokens_skipped"], 1)
        self.assertEqual(
            r.meta["skipped_tokens"],
            [{"token_id": None, "position": "p001_b0000_t000001", "reason": "SUBSTITUTION_NOT_FIRST_PART:HypPart2"}],
        )

    def test_multi_page(self) -> None:
        pages = [
            AltoPage(element_id="P1", accuracy=None, blocks=[_block([_tok("A", 0)])]),
            AltoPage(element_id="P2", accuracy=None, blocks=[_block([_tok("B", 0)])]),
        ]
        r = unpack_alto_document(AltoDocument(pages=pages))

        self.assertEqual(r.text, "A\n\nB")
        page_spans = [(a.start, a.end) for a in r.annotations if a.type == PAGE]
        self.assertEqual(page_spans, [(0, 1), (3, 4)])
        self.assertEqual(
            _spans(r),
            [
                ("TextLine", 0, 1),
                ("String", 0, 1),
                ("TextBlock", 0, 1),
                ("Page", 0, 1),
                ("TextLine", 3, 4),
                ("String", 3, 4),
                ("TextBlock", 3, 4),
                ("Page", 3, 4),
            ],
        )

    def test_line_boundary_at_block_end_does_not_leak_into_next_block(self) -> None:
        b0 = _block([_tok("a", 0), _tok("b", 0)], [_tok("c", 1)])
        b1 = _block([_tok("d", 0)])
        r = unpack_alto_document(AltoDocument(pages=[AltoPage(element_id=None, accuracy=None, blocks=[b0, b1])]))

        self.assertEqual(r.text, "a b c\n\nd")
        self.assertEqual(
            _spans(r),
            [
                ("String", 0, 1),
                ("TextLine", 0, 3),
                ("String", 2, 3),
                ("TextLine", 4, 5),
                ("String", 4, 5),
                ("TextBlock", 0, 5),
                # The next block's first line starts at the block start.
                ("TextLine", 7, 8),
                ("String", 7, 8),
                ("TextBlock", 7, 8),
                ("Page", 0, 8),
            ],
        )
        self.assertEqual(r.standoff().offset_violations(), [])

    def test_skipped_first_token_adds_no_leading_separator(self) -> None:
        block = _block([_tok("lo", 0, subs_content="Hello", subs_type="HypPart2"), _tok("world", 0)])
        r = unpack_alto_document(AltoDocument(pages=[AltoPage(element_id=None, accuracy=None, blocks=[block])]))

        self.assertEqual(r.text, "world")
        self.assertEqual(_spans(r), [("TextLine", 0, 5), ("String", 0, 5), ("TextBlock", 0, 5), ("Page", 0, 5)])

    def test_substitution_type_is_case_insensitive_and_other_types_are_skipped(self) -> None:
        block = _block(
            [
                _tok("Dr", 0, subs_content="Doctor", subs_type="Abbreviation"),
                _tok("Sm-", 0, subs_content="Smith", subs_type="hyppart1"),
            ],
            [_tok("ith", 1, subs_content="Smith", subs_type="HYPPART2")],
        )
        r = unpack_alto_document(AltoDocument(pages=[AltoPage(element_id=None, accuracy=None, blocks=[block])]))

        self.assertEqual(r.text, "Smith")
        self.assertEqual(r.meta["counts"]["tokens_skipped"], 2)
        self.assertEqual([a for a in r.annotations if a.type == STRING], [Annotation(STRING, 0, 5, {})])

    def test_substitution_type_without_substitution_content_emits_content(self) -> None:
        block = _block([_tok("lo", 0, subs_type="HypPart2"), _tok("there", 0)])
        r = unpack_alto_document(AltoDocument(pages=[AltoPage(element_id=None, accuracy=None, blocks=[block])]))
        self.assertEqual(r.text, "lo there")

    def test_attributes_are_projected_only_when_present(self) -> None:
        block = AltoBlock(
            element_id="TB1",
            lines=[AltoLine(line_index=0, element_id="TL1")],
            tokens=[
                _tok("One", 0, element_id="S1", word_confidence="0.91", character_confidence="0 1 2"),
                _tok("two", 0),
            ],
        )
        page = AltoPage(element_id="PS1", accuracy="88.5", blocks=[block])
        r = unpack_alto_document(AltoDocument(pages=[page]))

        by_type: dict[AnnotationType, list[Annotation]] = {}
        for a in r.annotations:
            by_type.setdefault(a.type, []).append(a)

        self.assertEqual(by_type[STRING][0].attributes, {"ID": "S1", "WC": "0.91", "CC": "0 1 2"})
        self.assertEqual(by_type[STRING][1].attributes, {})
        self.assertEqual(by_type[LINE][0].attributes, {"ID": "TL1"})
        self.assertEqual(by_type[BLOCK][0].attributes, {"ID": "TB1"})
        self.assertEqual(by_type[PAGE][0].attributes, {"ID": "PS1", "ACCURACY": "88.5"})

    def test_empty_blocks_still_get_separators_and_spans(self) -> None:
        empty = AltoBlock(element_id="E", lines=[], tokens=[])
        page = AltoPage(element_id=None, accuracy=None, blocks=[_block([_tok("x", 0)]), empty, _block([_tok("y", 0)])])
        r = unpack_alto_document(AltoDocument(pages=[page]))

        self.assertEqual(r.text, "x\n\n\n\ny")
        blocks = [(a.start, a.end) for a in r.annotations if a.type == BLOCK]
        self.assertEqual(blocks, [(0, 1), (3, 3), (5, 6)])

    def test_custom_config_is_recorded_in_meta(self) -> None:
        cfg = UnpackConfig(first_hyphen_part_type="HypPart1", annotation_set="ALTO")
        r = unpack_alto_document(AltoDocument(pages=[]), cfg)
        self.assertEqual(r.annotation_set, "ALTO")
        self.assertEqual(r.meta["params"]["annotation_set"], "ALTO")

    def test_config_rejects_multi_character_token_separator(self) -> None:
        with self.assertRaises(ValueError):
            UnpackConfig(token_separator="  ")
        with self.assertRaises(ValueError):
            UnpackConfig(first_hyphen_part_type=" ")


if __name__ == "__main__":
    unittest.main()
