"""Exact maximum-likelihood decoding of hidden field states."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .errors import CatalogMismatchError, EmptyInputError
from .hmm import ModelParameters
from .models import State


@dataclass(frozen=True)
class ViterbiPath:
    states: Tuple[State, ...]
    log_probability: float


def viterbi(symbols: Sequence[str], params: ModelParameters) -> ViterbiPath:
    """Return the most likely state path for ``symbols`` and its log score.

    Scores are sums of log probabilities; impossible events are ``-inf``.
    Ties go to the state listed first in ``params.states``.
    """
    if not symbols:
        raise EmptyInputError()

    tables = params.log_tables
    count = len(params.states)
    try:
        emissions = [[tables.emission[s][symbol] for s in range(count)] for symbol in symbols]
    except KeyError as exc:
        raise CatalogMismatchError(f"Symbol {exc.args[0]!r} is not part of the model") from exc

    delta = [tables.start[s] + emissions[0][s] for s in range(count)]
    backpointers: List[List[int]] = []

    for t in range(1, len(symbols)):
        column = emissions[t]
        scores: List[float] = []
        pointers: List[int] = []
        for s in range(count):
            best_score = -math.inf
            best_prev = 0
            for prev in range(count):
                score = delta[prev] + tables.transition[prev][s]
                if score > best_score:
                    best_score = score
                    best_prev = prev
            scores.append(best_score + column[s])
            pointers.append(best_prev)
        delta = scores
        backpointers.append(pointers)

    last = 0
    for s in range(1, count):
        if delta[s] > delta[last]:
            last = s

    path = [last]
    for pointers in reversed(backpointers):
        path.append(pointers[path[-1]])
    path.reverse()

    return ViterbiPath(states=tuple(params.states[s] for s in path), log_probability=delta[last])


def decode(symbols: Sequence[str], params: ModelParameters) -> List[State]:
    return list(viterbi(symbols, params).states)
