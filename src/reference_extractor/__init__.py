"""Hidden Markov model extraction of fields from bibliographic references."""

from .errors import (
    AnnotationError,
    CatalogError,
    CatalogMismatchError,
    EmptyInputError,
    InsufficientDataError,
    ModelFormatError,
    ReferenceExtractorError,
    UnmatchedTokenError,
)
from .extractor import ReferenceExtractor, train_default_model
from .hmm import ModelParameters
from .models import FIELDS, STATES, DecodedReference, ReferenceEntry, State, Token
from .symbols import DEFAULT_CATALOG, Symbol, SymbolCatalog
from .trainer import HMMTrainer

__all__ = [
    "ReferenceExtractor",
    "train_default_model",
    "HMMTrainer",
    "ModelParameters",
    "Symbol",
    "SymbolCatalog",
    "DEFAULT_CATALOG",
    "FIELDS",
    "STATES",
    "State",
    "Token",
    "DecodedReference",
    "ReferenceEntry",
    "ReferenceExtractorError",
    "CatalogError",
    "UnmatchedTokenError",
    "AnnotationError",
    "InsufficientDataError",
    "EmptyInputError",
    "ModelFormatError",
    "CatalogMismatchError",
]
