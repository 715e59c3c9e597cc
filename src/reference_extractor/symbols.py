"""Symbol catalog: the observable alphabet of the reference model."""
from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import CatalogError

CASE_RULES = ("upper", "lower", "title")

FALLBACK_SYMBOL = "other"

_LETTERS = r"[^\W\d_]"


@dataclass(frozen=True)
class Symbol:
    """A named token class matched by a full regular expression match.

    ``case`` adds a Unicode-aware letter case condition on top of the pattern
    so that word shapes are recognized in any script.
    """

    name: str
    pattern: str
    case: Optional[str] = None
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise CatalogError("Symbol name cannot be empty")
        if self.case is not None and self.case not in CASE_RULES:
            raise CatalogError(f"Symbol {self.name!r}: unknown case rule {self.case!r}")
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise CatalogError(f"Symbol {self.name!r}: invalid pattern {self.pattern!r}: {exc}") from exc
        object.__setattr__(self, "compiled", compiled)

    def matches(self, text: str) -> bool:
        if not self.compiled.fullmatch(text):
            return False
        if self.case == "upper":
            return text.isupper()
        if self.case == "lower":
            return text.islower()
        if self.case == "title":
            return text[:1].isupper() and not text.isupper()
        return True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "pattern": self.pattern}
        if self.case:
            data["case"] = self.case
        return data


class SymbolCatalog:
    """Ordered symbol list evaluated first-match-wins.

    More specific symbols must come first: keywords before word shapes,
    ``fourDigit`` before ``digit``. The fallback symbol has no pattern; it
    only labels tokens nothing else matched while decoding.
    """

    def __init__(self, symbols: Iterable[Symbol], version: str, fallback: str = FALLBACK_SYMBOL):
        self.symbols: Tuple[Symbol, ...] = tuple(symbols)
        self.version = str(version)
        self.fallback = fallback
        seen = set()
        for symbol in self.symbols:
            if symbol.name in seen:
                raise CatalogError(f"Duplicate symbol name {symbol.name!r}")
            seen.add(symbol.name)
        if fallback in seen:
            raise CatalogError(f"Fallback symbol {fallback!r} cannot also have a pattern")
        if not self.symbols:
            raise CatalogError("Symbol catalog is empty")

    @property
    def names(self) -> Tuple[str, ...]:
        """All symbol names, fallback last; this is the model's emission alphabet."""
        return tuple(symbol.name for symbol in self.symbols) + (self.fallback,)

    def match(self, text: str) -> Optional[Symbol]:
        normalized = unicodedata.normalize("NFC", text)
        for symbol in self.symbols:
            if symbol.matches(normalized):
                return symbol
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "fallback": self.fallback,
            "symbols": [symbol.to_dict() for symbol in self.symbols],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SymbolCatalog":
        if not isinstance(data, dict) or "symbols" not in data or "version" not in data:
            raise CatalogError("Catalog must define 'version' and 'symbols'")
        symbols: List[Symbol] = []
        for item in data["symbols"]:
            if not isinstance(item, dict) or "name" not in item or "pattern" not in item:
                raise CatalogError(f"Malformed symbol entry: {item!r}")
            symbols.append(Symbol(item["name"], item["pattern"], item.get("case")))
        return cls(symbols, version=data["version"], fallback=data.get("fallback", FALLBACK_SYMBOL))

    @classmethod
    def load(cls, path: str | Path) -> "SymbolCatalog":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except ValueError as exc:
            raise CatalogError(f"{path}: not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        return f"SymbolCatalog(version={self.version!r}, symbols={len(self.symbols)})"


DEFAULT_SYMBOLS: Tuple[Symbol, ...] = (
    # punctuation
    Symbol("comma", r","),
    Symbol("period", r"[.…]"),
    Symbol("colon", r":"),
    Symbol("semicolon", r";"),
    Symbol("hyphen", r"[-‐‑]"),
    Symbol("dash", r"[–—]"),
    Symbol("slash", r"[/\\]"),
    Symbol("quote", r"[\"'«»“”„‘’]"),
    Symbol("openBracket", r"[(\[{]"),
    Symbol("closeBracket", r"[)\]}]"),
    Symbol("ampersand", r"&"),
    Symbol("numberSign", r"[№#]"),
    Symbol("questionMark", r"[?!]"),
    Symbol("otherPunct", r"[_*^%+=<>@|~]"),
    # keywords
    Symbol("urlPrefix", r"(?i:https?|ftp|www|doi|url)"),
    Symbol("webSuffix", r"(?i:com|org|net|edu|gov|info|html?|php|pdf|ru|kz|uk)"),
    Symbol("etAl", r"et|al|др"),
    Symbol("volumeKeyword", r"vol|Vol|VOL|volume|Volume|том|Том|т|Bd|Band|Jg"),
    Symbol("numberKeyword", r"no|No|NO|nr|Nr|iss|issue|Issue|number|Number|вып|Вып|Heft"),
    Symbol("pagesKeyword", r"pp|p|pages?|Pages?|стр|Стр|с|сс|s|Seiten?"),
    Symbol(
        "publisherKeyword",
        r"Press|Publishing|Publishers?|Verlag|Books|Изд|изд|Издательство|издательство|Наука|Springer|Elsevier|Wiley",
    ),
    Symbol(
        "venueKeyword",
        r"Proceedings|Proc|Journal|Transactions|Trans|Congress|Conference|Symposium|Workshop|"
        r"Bulletin|Review|Annals|Letters|Вестник|Известия|Журнал|Труды|Сборник|Доклады|Zeitschrift",
    ),
    Symbol(
        "cityName",
        r"Moscow|Москва|London|New|York|Berlin|Almaty|Алматы|Oxford|Cambridge|Paris|Boston|"
        r"Amsterdam|Heidelberg|Leipzig|Novosibirsk|Новосибирск|Astana|Астана|Warsaw|Kyiv|Киев",
    ),
    Symbol(
        "monthName",
        r"(?i:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?|"
        r"sep(?:t|tember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?|"
        r"январ[ья]|феврал[ья]|марта?|апрел[ья]|ма[йя]|июн[ья]|июл[ья]|августа?|"
        r"сентябр[ья]|октябр[ья]|ноябр[ья]|декабр[ья])",
    ),
    # digit shapes
    Symbol("ordinal", r"\d+(?:st|nd|rd|th)"),
    Symbol("fourDigit", r"\d{4}"),
    Symbol("digit", r"\d+"),
    Symbol("alphanumeric", r"\w*\d\w*"),
    # word shapes
    Symbol("initial", _LETTERS, case="upper"),
    Symbol("lowerLetter", _LETTERS, case="lower"),
    Symbol("upperWord", _LETTERS + "+", case="upper"),
    Symbol("titleWord", _LETTERS + "+", case="title"),
    Symbol("lowerWord", _LETTERS + "+", case="lower"),
    Symbol("mixedWord", _LETTERS + "+"),
)

DEFAULT_CATALOG = SymbolCatalog(DEFAULT_SYMBOLS, version="2")
