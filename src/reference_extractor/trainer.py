"""Estimate model parameters from field-tagged references."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Sequence

from .errors import InsufficientDataError, UnmatchedTokenError
from .hmm import ModelParameters
from .models import STATES, State, TaggedExample
from .symbolizer import Symbolizer
from .symbols import DEFAULT_CATALOG, SymbolCatalog

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING = 1e-5


def smooth_distribution(counts: Mapping[str, int], constant: float) -> Dict[str, float]:
    """Normalize ``counts`` and give every zero-count event ``constant``.

    The mass handed to the Z unseen events is taken evenly from the NZ seen
    ones (``Z * constant / NZ`` each), so the row still sums to one.
    """
    total = sum(counts.values())
    if total <= 0:
        raise ValueError("Cannot normalize a distribution without observations")
    probabilities = {event: count / total for event, count in counts.items()}
    unseen = [event for event, count in counts.items() if count == 0]
    if not unseen:
        return probabilities

    seen = [event for event, count in counts.items() if count > 0]
    penalty = len(unseen) * constant / len(seen)
    for event in seen:
        adjusted = probabilities[event] - penalty
        if adjusted <= 0:
            raise ValueError(
                f"Smoothing constant {constant} is too large: event {event!r} would drop to {adjusted}"
            )
        probabilities[event] = adjusted
    for event in unseen:
        probabilities[event] = constant
    return probabilities


class HMMTrainer:
    """Counts state starts, transitions and emissions and normalizes them."""

    def __init__(
        self,
        catalog: SymbolCatalog = DEFAULT_CATALOG,
        smoothing: float = DEFAULT_SMOOTHING,
        states: Sequence[State] = STATES,
    ):
        if not 0 < smoothing < 1:
            raise ValueError(f"Smoothing constant must be in (0, 1), got {smoothing}")
        self.catalog = catalog
        self.smoothing = smoothing
        self.states = tuple(states)
        self.symbolizer = Symbolizer(catalog, strict=True)

    def train(self, examples: Iterable[TaggedExample]) -> ModelParameters:
        names = [state.name for state in self.states]
        symbols = self.catalog.names
        start_counts: Dict[str, int] = {name: 0 for name in names}
        transition_counts: Dict[str, Dict[str, int]] = {name: {target: 0 for target in names} for name in names}
        emission_counts: Dict[str, Dict[str, int]] = {name: {symbol: 0 for symbol in symbols} for name in names}

        example_count = 0
        token_count = 0
        for example in examples:
            if not example.tokens:
                logger.debug("Skipping empty training example %s", example.source)
                continue
            try:
                observed = self.symbolizer.symbolize_all(example.tokens)
            except UnmatchedTokenError as exc:
                raise UnmatchedTokenError(exc.token, source=example.source) from exc

            sequence = [state.name for state in example.states]
            unknown = [name for name in sequence if name not in start_counts]
            if unknown:
                raise ValueError(f"{example.source}: states {sorted(set(unknown))} are not part of the model")

            start_counts[sequence[0]] += 1
            for source, target in zip(sequence, sequence[1:]):
                transition_counts[source][target] += 1
            for name, symbol in zip(sequence, observed):
                emission_counts[name][symbol] += 1
            example_count += 1
            token_count += len(sequence)

        for name in names:
            if not any(emission_counts[name].values()):
                raise InsufficientDataError(name, "emission")
        for name in names:
            if not any(transition_counts[name].values()):
                raise InsufficientDataError(name, "transition")

        start = smooth_distribution(start_counts, self.smoothing)
        transition = {name: smooth_distribution(transition_counts[name], self.smoothing) for name in names}
        emission = {name: smooth_distribution(emission_counts[name], self.smoothing) for name in names}

        logger.info(
            "Trained model on %d examples (%d tokens, %d states, %d symbols)",
            example_count,
            token_count,
            len(names),
            len(symbols),
        )
        return ModelParameters(
            states=self.states,
            symbols=symbols,
            start=start,
            transition=transition,
            emission=emission,
            catalog_version=self.catalog.version,
            smoothing=self.smoothing,
        )


def train(
    examples: Iterable[TaggedExample],
    catalog: SymbolCatalog = DEFAULT_CATALOG,
    smoothing: float = DEFAULT_SMOOTHING,
) -> ModelParameters:
    return HMMTrainer(catalog, smoothing).train(examples)
