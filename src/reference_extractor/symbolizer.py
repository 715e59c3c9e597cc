"""Map tokens to catalog symbols."""
from __future__ import annotations

import logging
from typing import List, Sequence

from .errors import UnmatchedTokenError
from .models import Token
from .symbols import DEFAULT_CATALOG, SymbolCatalog

logger = logging.getLogger(__name__)


class Symbolizer:
    """Assigns each token exactly one symbol name.

    In strict mode an unmatched token raises :class:`UnmatchedTokenError`;
    otherwise it is labelled with the catalog's fallback symbol so decoding
    never stops on an unexpected token.
    """

    def __init__(self, catalog: SymbolCatalog = DEFAULT_CATALOG, strict: bool = True):
        self.catalog = catalog
        self.strict = strict

    def symbolize(self, token: Token) -> str:
        symbol = self.catalog.match(token.text)
        if symbol is not None:
            return symbol.name
        if self.strict:
            raise UnmatchedTokenError(token.text)
        logger.debug("Token %r at %d matched no symbol, using %r", token.text, token.start, self.catalog.fallback)
        return self.catalog.fallback

    def symbolize_all(self, tokens: Sequence[Token]) -> List[str]:
        return [self.symbolize(token) for token in tokens]


def symbolize(token: Token, catalog: SymbolCatalog = DEFAULT_CATALOG) -> str:
    """Strictly symbolize a single token."""
    return Symbolizer(catalog, strict=True).symbolize(token)
