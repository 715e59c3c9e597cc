"""Split reference strings into word and punctuation tokens."""
from __future__ import annotations

import re
from typing import List

from .models import Token

PUNCTUATION = ",.;:?!\"'()[]{}«»“”„‘’/\\_*&^%#№+=<>@|~-‐‑–—…"

_PUNCT_CLASS = "".join(re.escape(ch) for ch in PUNCTUATION)
TOKEN_PATTERN = re.compile(rf"[{_PUNCT_CLASS}]|[^\s{_PUNCT_CLASS}]+")


def tokenize(text: str) -> List[Token]:
    """Return the tokens of ``text`` in order.

    Whitespace separates tokens and is dropped. Every punctuation character is
    a token of its own, so ``"Poland,"`` gives ``"Poland"`` and ``","``.
    """
    if not text:
        return []
    return [Token(match.group(0), match.start(), match.end()) for match in TOKEN_PATTERN.finditer(text)]


def join_tokens(tokens) -> str:
    return " ".join(token.text for token in tokens)
