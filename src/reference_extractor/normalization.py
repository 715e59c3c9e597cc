"""Cleanup helpers turning extracted field text into bibliographic values."""
from __future__ import annotations

import re
from typing import List

YEAR_PATTERN = re.compile(r"\b(1[5-9]|20)\d{2}\b")
DOI_PATTERN = re.compile(r"10\.\d{4,9}/\S+", re.IGNORECASE)

# Separators that belong between fields rather than to a field value.
_EDGE_CHARACTERS = " \t,;:/\\-–—"
# A final period is dropped unless it closes an initial ("B.R.").
_TRAILING_PERIOD = re.compile(r"(?:(?<=[^\W\d_]{2})|(?<=[\d)]))\.$")
# Author joiners, also at the start of a part as in ", & Brown".
_JOINER = re.compile(r"(?:^|\s+)(?:and|&|и|und)\s+")
_INITIAL = re.compile(r"(?<![^\W\d_])[^\W\d_]{1,2}\.")
_INITIALS = re.compile(r"(?:[^\W\d_]{1,2}\.[\s-]*)+")


def clean_field(value: str | None) -> str | None:
    """Collapse whitespace and drop separator punctuation at both ends."""
    if not value:
        return None
    text = re.sub(r"\s+", " ", value).strip(_EDGE_CHARACTERS).lstrip(".")
    text = _TRAILING_PERIOD.sub("", text).strip(_EDGE_CHARACTERS)
    # drop an unbalanced trailing bracket left over from "(2008)." style dates
    if text.endswith(")") and "(" not in text:
        text = text[:-1].rstrip()
    if text.startswith("(") and ")" not in text:
        text = text[1:].lstrip()
    return text or None


def compact_url(value: str | None) -> str | None:
    if not value:
        return None
    text = "".join(value.split()).rstrip(".,;")
    text = re.sub(r"^(?:url|URL)\s*:\s*", "", text)
    return text or None


def extract_year(value: str | None) -> str | None:
    if not value:
        return None
    match = YEAR_PATTERN.search(value)
    return match.group(0) if match else None


def extract_doi(value: str | None) -> str | None:
    if not value:
        return None
    match = DOI_PATTERN.search(value)
    if match:
        return match.group(0).rstrip(".,;")
    return None


def split_authors(value: str | None) -> List[str]:
    """Split an author span on ``;`` (or ``,`` when there are none) and joiners.

    APA style puts a comma between surname and initials, so an initials-only
    part is joined back onto a preceding bare surname:
    ``"Smith, J., & Brown, K."`` gives ``["Smith, J.", "Brown, K."]``.
    """
    text = clean_field(value)
    if not text:
        return []
    parts = [part for part in text.split(";") if part.strip()]
    if len(parts) < 2:
        parts = [part for part in text.split(",") if part.strip()]
    authors: List[str] = []
    bare_surname = False
    for part in parts:
        for name in _JOINER.split(part.strip()):
            cleaned = clean_field(name)
            if not cleaned:
                continue
            if bare_surname and _INITIALS.fullmatch(cleaned):
                authors[-1] = f"{authors[-1]}, {cleaned}"
                bare_surname = False
            else:
                authors.append(cleaned)
                bare_surname = _INITIAL.search(cleaned) is None
    return authors
