"""Exporters for extracted reference data."""
from __future__ import annotations

import json
from dataclasses import asdict
from typing import List, Optional, Sequence

from .models import DecodedReference, ReferenceEntry


def record_to_dict(record: DecodedReference, entry: ReferenceEntry | None = None) -> dict:
    data = {"input": record.raw_text, "fields": record.as_dict()}
    if entry is not None:
        data["entry"] = asdict(entry)
    return data


def to_json(records: Sequence[Optional[DecodedReference]], entries: Sequence[ReferenceEntry] | None = None) -> str:
    items = []
    for idx, record in enumerate(records):
        if record is None:
            items.append(None)
            continue
        entry = entries[idx] if entries is not None else None
        items.append(record_to_dict(record, entry))
    return json.dumps(items, ensure_ascii=False, indent=2)


def to_bibtex(references: List[ReferenceEntry]) -> str:
    entries = []
    for idx, ref in enumerate(references, start=1):
        key = _bibtex_key(ref) or f"ref{idx}"
        kind = "article" if ref.journal else ("book" if ref.publisher else "misc")
        lines = [f"@{kind}{{{key},"]
        if ref.authors:
            lines.append(f"  author = {{{' and '.join(ref.authors)}}},")
        if ref.title:
            lines.append(f"  title = {{{ref.title}}},")
        if ref.journal:
            lines.append(f"  journal = {{{ref.journal}}},")
        if ref.publisher:
            lines.append(f"  publisher = {{{ref.publisher}}},")
        if ref.location:
            lines.append(f"  address = {{{ref.location}}},")
        if ref.year:
            lines.append(f"  year = {{{ref.year}}},")
        if ref.volume:
            lines.append(f"  volume = {{{ref.volume}}},")
        if ref.issue:
            lines.append(f"  number = {{{ref.issue}}},")
        if ref.pages:
            lines.append(f"  pages = {{{ref.pages}}},")
        if ref.doi:
            lines.append(f"  doi = {{{ref.doi}}},")
        if ref.url:
            lines.append(f"  url = {{{ref.url}}},")
        lines.append("}")
        entries.append("\n".join(lines))
    return "\n\n".join(entries)


def to_ris(references: List[ReferenceEntry]) -> str:
    entries = []
    for ref in references:
        ty = "JOUR" if ref.journal else ("BOOK" if ref.publisher else "GEN")
        lines = [f"TY  - {ty}"]
        for author in ref.authors:
            lines.append(f"AU  - {author}")
        if ref.title:
            lines.append(f"TI  - {ref.title}")
        if ref.journal:
            lines.append(f"JO  - {ref.journal}")
        if ref.publisher:
            lines.append(f"PB  - {ref.publisher}")
        if ref.location:
            lines.append(f"CY  - {ref.location}")
        if ref.year:
            lines.append(f"PY  - {ref.year}")
        if ref.volume:
            lines.append(f"VL  - {ref.volume}")
        if ref.issue:
            lines.append(f"IS  - {ref.issue}")
        if ref.pages:
            start, end = _split_pages(ref.pages)
            if start:
                lines.append(f"SP  - {start}")
            if end:
                lines.append(f"EP  - {end}")
        if ref.doi:
            lines.append(f"DO  - {ref.doi}")
        if ref.url:
            lines.append(f"UR  - {ref.url}")
        lines.append("ER  - ")
        entries.append("\n".join(lines))
    return "\n\n".join(entries)


def _bibtex_key(ref: ReferenceEntry) -> str | None:
    if not (ref.authors and ref.year):
        return None
    return ref.formatted_key()


def _split_pages(pages: str) -> tuple[str | None, str | None]:
    if "-" in pages:
        start, end = pages.split("-", 1)
        return start.strip(), end.strip()
    return pages.strip(), None
