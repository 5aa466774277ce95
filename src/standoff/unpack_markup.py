from __future__ import annotations

import logging
from typing import Any

from contracts.alto import AltoBlock, AltoDocument, AltoToken
from contracts.standoff import Annotation, AnnotationType

from .config import UnpackConfig
from .contracts import UnpackResult

logger = logging.getLogger(__name__)


def _fmt_token_position(page_idx: int, block_idx: int, token_idx: int) -> str:
    return f"p{page_idx + 1:03d}_b{block_idx:04d}_t{token_idx:06d}"


def _project(*pairs: tuple[str, str | None]) -> dict[str, str]:
    # Absent attributes are omitted, never emitted as empty/None.
    return {name: value for name, value in pairs if value is not None}


class _ContentBuilder:
    """
    Owns the append-only text buffer and the ordered annotation records.

    Nothing already appended is re-read or mutated; offsets are always taken
    from the running buffer length.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0
        self.annotations: list[Annotation] = []

    @property
    def length(self) -> int:
        return self._length

    def append(self, s: str) -> None:
        self._parts.append(s)
        self._length += len(s)

    def add(self, annotation_type: AnnotationType, start: int, end: int, attributes: dict[str, str]) -> None:
        self.annotations.append(Annotation(type=annotation_type, start=start, end=end, attributes=attributes))

    def text(self) -> str:
        return "".join(self._parts)


def _resolve_token(token: AltoToken, config: UnpackConfig) -> tuple[str, bool] | None:
    """
    Decide what a token contributes to the text.

    Returns (emitted_text, substituted), or None when the token is skipped.
    Only the first part of a hyphenated word carries the reunited spelling, so
    every other substitution type (HypPart2, abbreviations, ...) is dropped.
    """

    if token.subs_content is None:
        return token.content, False
    if (token.subs_type or "").casefold() != config.first_hyphen_part_type.casefold():
        return None
    return token.subs_content, True


def _ends_line(current: AltoToken, following: AltoToken | None) -> bool:
    # A line ends at the end of the block or where the grouping parent changes.
    # `following` may be a skipped token; its parent still counts.
    return following is None or following.line_index != current.line_index


def _unpack_block(
    block: AltoBlock,
    *,
    page_idx: int,
    block_idx: int,
    builder: _ContentBuilder,
    config: UnpackConfig,
    skipped_tokens: list[dict[str, Any]],
) -> tuple[int, int]:
    """
    Append one block's tokens and record their String and TextLine spans.

    Returns (tokens_emitted, lines_closed).
    """

    tokens = block.tokens

    line_start = builder.length
    emitted = 0
    lines = 0

    for i, tok in enumerate(tokens):
        resolved = _resolve_token(tok, config)
        if resolved is None:
            skipped_tokens.append(
                {
                    "token_id": tok.element_id,
                    "position": _fmt_token_position(page_idx, block_idx, i),
                    "reason": f"SUBSTITUTION_NOT_FIRST_PART:{tok.subs_type or ''}",
                }
            )
            continue

        text, substituted = resolved

        if emitted > 0:
            builder.append(config.token_separator)

        following = tokens[i + 1] if i + 1 < len(tokens) else None
        if _ends_line(tok, following):
            # Line extents follow the literal CONTENT length, not the reunited word.
            line_end = builder.length + len(tok.content)
            line = block.line(tok.line_index)
            builder.add(
                AnnotationType.TEXT_LINE,
                line_start,
                line_end,
                _project(("ID", None if line is None else line.element_id)),
            )
            lines += 1
            # Reserve one position for the separator before the next token, except
            # after a hyphen fragment, whose continuation follows without one.
            line_start = line_end + (0 if substituted else len(config.token_separator))

        start = builder.length
        builder.append(text)
        builder.add(
            AnnotationType.STRING,
            start,
            builder.length,
            _project(
                ("ID", tok.element_id),
                ("WC", tok.word_confidence),
                ("CC", tok.character_confidence),
            ),
        )
        emitted += 1

    return emitted, lines


def unpack_alto_document(doc: AltoDocument, config: UnpackConfig | None = None) -> UnpackResult:
    """
    Flatten an ALTO page tree into plain text plus stand-off annotations.

    Single forward pass: pages, then blocks, then tokens in document order.
    Annotations are produced in order (tokens and lines interleaved within a
    block, then the block span, then the page span).
    """

    if config is None:
        config = UnpackConfig()
    config.validate()

    builder = _ContentBuilder()
    skipped_tokens: list[dict[str, Any]] = []

    n_blocks = 0
    n_lines = 0
    tokens_in = 0
    tokens_emitted = 0

    for page_idx, page in enumerate(doc.pages):
        if page_idx > 0:
            builder.append(config.page_separator)
        page_start = builder.length

        for block_idx, block in enumerate(page.blocks):
            if block_idx > 0:
                builder.append(config.block_separator)
            block_start = builder.length

            emitted, lines = _unpack_block(
                block,
                page_idx=page_idx,
                block_idx=block_idx,
                builder=builder,
                config=config,
                skipped_tokens=skipped_tokens,
            )
            builder.add(AnnotationType.TEXT_BLOCK, block_start, builder.length, _project(("ID", block.element_id)))

            n_blocks += 1
            n_lines += lines
            tokens_in += len(block.tokens)
            tokens_emitted += emitted

        builder.add(
            AnnotationType.PAGE,
            page_start,
            builder.length,
            _project(("ID", page.element_id), ("ACCURACY", page.accuracy)),
        )

    text = builder.text()
    meta: dict[str, Any] = {
        "stage": 2,
        "mode": "single",
        "version": "alto_unpack_v1",
        "params": config.to_dict(),
        "counts": {
            "pages": len(doc.pages),
            "blocks": n_blocks,
            "lines": n_lines,
            "tokens_in": tokens_in,
            "tokens_emitted": tokens_emitted,
            "tokens_skipped": len(skipped_tokens),
            "annotations": len(builder.annotations),
            "text_length": len(text),
        },
        "skipped_tokens": skipped_tokens,
    }

    logger.debug(
        "unpacked %s: pages=%d blocks=%d lines=%d tokens=%d/%d chars=%d",
        doc.source_relpath or "<memory>",
        len(doc.pages),
        n_blocks,
        n_lines,
        tokens_emitted,
        tokens_in,
        len(text),
    )

    return UnpackResult(
        ok=True,
        text=text,
        annotations=builder.annotations,
        annotation_set=config.annotation_set,
        errors=[],
        meta=meta,
        source_relpath=doc.source_relpath,
    )
