"""Measure a model against hand-tagged references."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable

from .extractor import ReferenceExtractor
from .models import FIELDS, TaggedExample

logger = logging.getLogger(__name__)


@dataclass
class FieldScore:
    """Token-level counts for one field."""

    true_positive: int = 0
    false_positive: int = 0
    false_negative: int = 0

    @property
    def precision(self) -> float:
        predicted = self.true_positive + self.false_positive
        return self.true_positive / predicted if predicted else 0.0

    @property
    def recall(self) -> float:
        actual = self.true_positive + self.false_negative
        return self.true_positive / actual if actual else 0.0

    @property
    def f1(self) -> float:
        if not self.precision + self.recall:
            return 0.0
        return 2 * self.precision * self.recall / (self.precision + self.recall)


@dataclass
class EvaluationReport:
    examples: int = 0
    tokens: int = 0
    correct_tokens: int = 0
    exact_matches: int = 0
    fields: Dict[str, FieldScore] = field(default_factory=lambda: {name: FieldScore() for name in FIELDS})

    @property
    def token_accuracy(self) -> float:
        return self.correct_tokens / self.tokens if self.tokens else 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "examples": self.examples,
            "tokens": self.tokens,
            "token_accuracy": round(self.token_accuracy, 4),
            "exact_matches": self.exact_matches,
            "fields": {
                name: {
                    "precision": round(score.precision, 4),
                    "recall": round(score.recall, 4),
                    "f1": round(score.f1, 4),
                }
                for name, score in self.fields.items()
                if score.true_positive or score.false_positive or score.false_negative
            },
        }


def evaluate(extractor: ReferenceExtractor, examples: Iterable[TaggedExample]) -> EvaluationReport:
    """Decode each example and compare predicted fields with the gold tags."""
    report = EvaluationReport()
    for example in examples:
        if not example.tokens:
            continue
        predicted = extractor.decode_tokens(example.tokens)
        correct = 0
        for gold_state, predicted_state in zip(example.states, predicted):
            gold, guess = gold_state.field, predicted_state.field
            if gold == guess:
                correct += 1
                report.fields[gold].true_positive += 1
            else:
                report.fields[guess].false_positive += 1
                report.fields[gold].false_negative += 1
        report.examples += 1
        report.tokens += len(example.tokens)
        report.correct_tokens += correct
        if correct == len(example.tokens):
            report.exact_matches += 1
        else:
            logger.debug("%s: %d of %d tokens correct", example.source, correct, len(example.tokens))
    return report
