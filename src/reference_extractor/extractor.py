"""High-level orchestrator for reference extraction."""
from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Iterable, List, Optional, Sequence

from .annotations import load_corpus
from .assembler import assemble
from .config import BUNDLED_CORPUS_PATH, ExtractorSettings
from .errors import CatalogMismatchError, EmptyInputError
from .hmm import ModelParameters
from .models import DecodedReference, ReferenceEntry, State, Token
from .normalization import clean_field, compact_url, extract_doi, extract_year, split_authors
from .symbolizer import Symbolizer
from .symbols import DEFAULT_CATALOG, SymbolCatalog
from .tokenizer import tokenize
from .trainer import DEFAULT_SMOOTHING, HMMTrainer
from .viterbi import decode

logger = logging.getLogger(__name__)


class ReferenceExtractor:
    """Coordinates tokenizing, symbolizing, decoding and assembling references."""

    def __init__(self, params: ModelParameters, catalog: SymbolCatalog = DEFAULT_CATALOG):
        if not params.is_compatible_with(catalog):
            raise CatalogMismatchError(
                f"Model was trained with catalog version {params.catalog_version!r}, "
                f"not {catalog.version!r} (or the symbol lists differ); retrain the model"
            )
        self.params = params
        self.catalog = catalog
        self.symbolizer = Symbolizer(catalog, strict=False)

    @classmethod
    def from_settings(cls, settings: ExtractorSettings | None = None) -> "ReferenceExtractor":
        """Load the configured model, or train one from the configured corpus."""
        settings = settings or ExtractorSettings()
        catalog = SymbolCatalog.load(settings.catalog_path) if settings.catalog_path else DEFAULT_CATALOG
        if settings.model_path:
            params = ModelParameters.load(settings.model_path)
            logger.info("Loaded model from %s", settings.model_path)
        else:
            corpus_path = settings.resolved_corpus_path()
            params = HMMTrainer(catalog, settings.smoothing).train(load_corpus(corpus_path))
            logger.info("Trained model from %s", corpus_path)
        return cls(params, catalog)

    def decode_tokens(self, tokens: Sequence[Token]) -> List[State]:
        symbols = self.symbolizer.symbolize_all(tokens)
        return decode(symbols, self.params)

    def extract(self, text: str) -> DecodedReference:
        tokens = tokenize(text)
        if not tokens:
            raise EmptyInputError("Reference text is empty")
        states = self.decode_tokens(tokens)
        return assemble(tokens, states, raw_text=text)

    def extract_many(
        self,
        texts: Iterable[str],
        max_workers: int | None = None,
        skip_errors: bool = False,
    ) -> List[Optional[DecodedReference]]:
        """Extract several references, preserving input order.

        With ``skip_errors`` an empty reference yields ``None`` instead of
        aborting the whole batch.
        """
        items = list(texts)
        worker = partial(self._extract_item, skip_errors=skip_errors)
        if max_workers and max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                return list(executor.map(worker, items))
        return [worker(text) for text in items]

    def _extract_item(self, text: str, skip_errors: bool) -> Optional[DecodedReference]:
        try:
            return self.extract(text)
        except EmptyInputError:
            if not skip_errors:
                raise
            logger.warning("Skipping empty reference")
            return None

    def to_entry(self, record: DecodedReference) -> ReferenceEntry:
        return to_reference_entry(record)


def _strip_label(value: str | None) -> str | None:
    """Drop a leading keyword such as ``Vol.``, ``No.`` or ``pp.``."""
    if not value:
        return None
    match = re.search(r"\d", value)
    if not match:
        return value
    text = value[match.start() :]
    text = re.sub(r"\s*[-‐‑–—]\s*", "-", text)
    # "512 p." style page counts
    text = re.sub(r"\s+[^\W\d_]+\.?$", "", text)
    return text.strip(" ()") or None


def to_reference_entry(record: DecodedReference) -> ReferenceEntry:
    """Turn decoded fields into a cleaned bibliographic entry."""

    def value(field_name: str) -> str | None:
        return clean_field(record.original_text(field_name))

    url = compact_url(record.original_text("url"))
    date = value("date")
    return ReferenceEntry(
        raw_text=record.raw_text or " ".join(record.values()),
        authors=split_authors(record.original_text("author")),
        title=value("title"),
        journal=value("journal"),
        publisher=value("publisher"),
        location=value("location"),
        year=extract_year(date),
        date=date,
        volume=_strip_label(value("volume")),
        issue=_strip_label(value("number")),
        pages=_strip_label(value("pages")),
        url=url,
        doi=extract_doi(url) or extract_doi(record.raw_text),
    )


def train_default_model(
    catalog: SymbolCatalog = DEFAULT_CATALOG, smoothing: float = DEFAULT_SMOOTHING
) -> ModelParameters:
    """Train on the corpus bundled with the package."""
    return HMMTrainer(catalog, smoothing).train(load_corpus(BUNDLED_CORPUS_PATH))
