"""Data models for reference extraction."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

FIELDS: Tuple[str, ...] = (
    "author",
    "title",
    "date",
    "pages",
    "volume",
    "journal",
    "number",
    "url",
    "publisher",
    "location",
)
PHASES: Tuple[str, ...] = ("start", "rest")


@dataclass(frozen=True)
class Token:
    """A word or punctuation mark with its offsets in the source string."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class State:
    """Hidden label: the field a token belongs to and whether it opens it."""

    field: str
    phase: str

    def __post_init__(self) -> None:
        if self.field not in FIELDS:
            raise ValueError(f"Unknown field: {self.field!r}")
        if self.phase not in PHASES:
            raise ValueError(f"Unknown phase: {self.phase!r}")

    @property
    def name(self) -> str:
        return f"{self.field}-{self.phase}"

    @classmethod
    def parse(cls, name: str) -> "State":
        field_name, sep, phase = name.rpartition("-")
        if not sep:
            raise ValueError(f"Malformed state name: {name!r}")
        return cls(field_name, phase)

    def __str__(self) -> str:
        return self.name


# Canonical ordering; the decoder breaks ties by position in this tuple.
STATES: Tuple[State, ...] = tuple(State(f, p) for f in FIELDS for p in PHASES)


@dataclass(frozen=True)
class TaggedExample:
    """Manually annotated reference used for training and evaluation."""

    source: str
    tokens: Tuple[Token, ...]
    states: Tuple[State, ...]

    def __post_init__(self) -> None:
        if len(self.tokens) != len(self.states):
            raise ValueError(
                f"{self.source}: {len(self.tokens)} tokens but {len(self.states)} states"
            )

    def pairs(self) -> Iterator[Tuple[Token, State]]:
        return zip(self.tokens, self.states)


@dataclass(frozen=True)
class FieldSpan:
    """Consecutive tokens assigned to one field."""

    field: str
    text: str
    first_token: int
    last_token: int
    start: int = 0
    end: int = 0


class DecodedReference(Mapping):
    """Read-only mapping of field name to extracted text.

    Fields keep the order in which they first appear in the input. When the
    decoder returns to a field later in the string, the later span replaces
    the earlier text.
    """

    def __init__(self, fields: Dict[str, str], spans: Sequence[FieldSpan] = (), raw_text: str = ""):
        self._fields = MappingProxyType(dict(fields))
        self.spans: Tuple[FieldSpan, ...] = tuple(spans)
        self.raw_text = raw_text

    def __getitem__(self, key: str) -> str:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"DecodedReference({dict(self._fields)!r})"

    def as_dict(self) -> Dict[str, str]:
        return dict(self._fields)

    def original_text(self, field_name: str) -> Optional[str]:
        """Return the winning span of a field as it was written in the input."""
        for span in reversed(self.spans):
            if span.field == field_name:
                if self.raw_text:
                    return self.raw_text[span.start : span.end]
                return span.text
        return None


@dataclass
class ReferenceEntry:
    """Bibliographic record derived from a decoded reference."""

    raw_text: str
    authors: List[str] = field(default_factory=list)
    title: Optional[str] = None
    journal: Optional[str] = None
    publisher: Optional[str] = None
    location: Optional[str] = None
    year: Optional[str] = None
    date: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    url: Optional[str] = None
    doi: Optional[str] = None

    def formatted_key(self) -> str:
        """Return a citation key such as ``rakishev2008``."""
        if self.authors and self.year:
            lead = self.authors[0].split(",")[0].split()[0].strip().lower()
            return f"{lead}{self.year}"
        return self.raw_text.strip().lower()
