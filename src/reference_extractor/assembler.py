"""Group decoded tokens into field values."""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .models import DecodedReference, FieldSpan, State, Token
from .tokenizer import join_tokens

logger = logging.getLogger(__name__)


def assemble(tokens: Sequence[Token], states: Sequence[State], raw_text: str = "") -> DecodedReference:
    """Build a field record from parallel token and state sequences.

    Consecutive tokens whose states share a field form one span regardless of
    phase. A field that shows up again later in the string overwrites its
    earlier value.
    """
    if len(tokens) != len(states):
        raise ValueError(f"Got {len(tokens)} tokens but {len(states)} states")

    spans: List[FieldSpan] = []
    first = 0
    for index in range(1, len(tokens) + 1):
        if index < len(tokens) and states[index].field == states[first].field:
            continue
        field = states[first].field
        if states[first].phase == "rest" and first > 0:
            logger.debug("Field jump into %s without a start state at token %d", field, first)
        text = join_tokens(tokens[first:index])
        spans.append(
            FieldSpan(
                field=field,
                text=text,
                first_token=first,
                last_token=index - 1,
                start=tokens[first].start,
                end=tokens[index - 1].end,
            )
        )
        first = index

    fields: Dict[str, str] = {}
    for span in spans:
        if span.field in fields:
            logger.debug("Field %s appears more than once, keeping the later span", span.field)
        fields[span.field] = span.text
    return DecodedReference(fields, spans=spans, raw_text=raw_text)
