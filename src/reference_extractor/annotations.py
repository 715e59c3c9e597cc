"""Reader for the inline-tag training corpus format.

One reference per line, fields wrapped in tags named after the field::

    <author>Pivovarova T.</author> <title>Geology of ore deposits.</title> <date>2005.</date>

Blank lines and lines starting with ``#`` are skipped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List

from .errors import AnnotationError
from .models import FIELDS, State, TaggedExample, Token
from .tokenizer import tokenize

TAG_PATTERN = re.compile(r"<(/?)([A-Za-z_]+)>")


@dataclass
class _Span:
    field: str
    start: int
    end: int
    tag_position: int
    tokens: int = 0


def parse_tagged_line(line: str, source: str = "<tagged text>") -> TaggedExample:
    """Parse one annotated reference into tokens and their states."""
    plain_parts: List[str] = []
    # plain-text index -> column in the annotated line, for error positions
    columns: List[int] = []
    spans: List[_Span] = []
    open_span: _Span | None = None
    cursor = 0

    for match in TAG_PATTERN.finditer(line):
        plain_parts.append(line[cursor : match.start()])
        columns.extend(range(cursor, match.start()))
        cursor = match.end()
        closing = match.group(1) == "/"
        name = match.group(2)
        plain_length = len(columns)

        if name not in FIELDS:
            raise AnnotationError(f"unknown tag {match.group(0)}", source, match.start())
        if closing:
            if open_span is None:
                raise AnnotationError(f"closing tag {match.group(0)} without opening tag", source, match.start())
            if open_span.field != name:
                raise AnnotationError(
                    f"expected </{open_span.field}> but found {match.group(0)}", source, match.start()
                )
            open_span.end = plain_length
            spans.append(open_span)
            open_span = None
        else:
            if open_span is not None:
                raise AnnotationError(
                    f"tag {match.group(0)} nested inside <{open_span.field}>", source, match.start()
                )
            open_span = _Span(name, plain_length, plain_length, match.start())

    if open_span is not None:
        raise AnnotationError(f"unclosed tag <{open_span.field}>", source, open_span.tag_position)

    plain_parts.append(line[cursor:])
    columns.extend(range(cursor, len(line)))
    plain = "".join(plain_parts)

    tokens = tokenize(plain)
    states: List[State] = []
    index = 0
    for token in tokens:
        while index < len(spans) and spans[index].end <= token.start:
            index += 1
        if index == len(spans) or token.start < spans[index].start:
            raise AnnotationError(f"text {token.text!r} is outside any field tag", source, columns[token.start])
        span = spans[index]
        if token.end > span.end:
            raise AnnotationError(
                f"token {plain[token.start:token.end]!r} crosses the </{span.field}> boundary",
                source,
                columns[token.start],
            )
        states.append(State(span.field, "start" if span.tokens == 0 else "rest"))
        span.tokens += 1

    for span in spans:
        if span.tokens == 0:
            raise AnnotationError(f"<{span.field}> tag contains no tokens", source, span.tag_position)

    return TaggedExample(source=source, tokens=tuple(tokens), states=tuple(states))


def iter_tagged_lines(lines: Iterable[str], source: str = "<tagged text>") -> Iterator[TaggedExample]:
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield parse_tagged_line(line, f"{source}:{lineno}")


def load_corpus(path: str | Path) -> List[TaggedExample]:
    corpus_path = Path(path)
    with corpus_path.open(encoding="utf-8") as handle:
        return list(iter_tagged_lines(handle, corpus_path.name))


def format_tagged_example(example: TaggedExample) -> str:
    """Render an example back to the tagged format, tokens joined by spaces."""
    parts: List[str] = []
    current: str | None = None
    words: List[str] = []
    for token, state in example.pairs():
        if current is not None and (state.field != current or state.phase == "start"):
            parts.append(f"<{current}>{' '.join(words)}</{current}>")
            words = []
        current = state.field
        words.append(token.text)
    if current is not None:
        parts.append(f"<{current}>{' '.join(words)}</{current}>")
    return " ".join(parts)
