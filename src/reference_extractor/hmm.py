"""Hidden Markov model parameters and their JSON persistence."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from .errors import ModelFormatError
from .models import State
from .symbols import SymbolCatalog

MODEL_FORMAT = "reference-extractor/hmm"
MODEL_FORMAT_VERSION = 1
ROW_SUM_TOLERANCE = 1e-6


def _freeze(rows: Mapping[str, Mapping[str, float]]) -> Mapping[str, Mapping[str, float]]:
    return MappingProxyType({key: MappingProxyType(dict(row)) for key, row in rows.items()})


def _log(probability: float) -> float:
    return math.log(probability) if probability > 0 else -math.inf


def row_sums(table: Mapping[str, Mapping[str, float]]) -> Dict[str, float]:
    """Total probability of each row."""
    return {key: math.fsum(row.values()) for key, row in table.items()}


def _check_probabilities(label: str, row: Mapping[str, float]) -> None:
    for key, value in row.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ModelFormatError(f"{label} probability for {key!r} is not a number: {value!r}")
        if not 0.0 <= value <= 1.0:
            raise ModelFormatError(f"{label} probability for {key!r} is outside [0, 1]: {value!r}")


@dataclass(frozen=True)
class LogTables:
    """Dense log-probability tables indexed by state/symbol position."""

    start: Tuple[float, ...]
    transition: Tuple[Tuple[float, ...], ...]
    emission: Tuple[Dict[str, float], ...]


@dataclass(frozen=True)
class ModelParameters:
    """Start, transition and emission probabilities of a trained model.

    Tables are keyed by state name (``"author-start"``) and symbol name.
    Instances are read-only and may be shared between threads.
    """

    states: Tuple[State, ...]
    symbols: Tuple[str, ...]
    start: Mapping[str, float]
    transition: Mapping[str, Mapping[str, float]]
    emission: Mapping[str, Mapping[str, float]]
    catalog_version: str = ""
    smoothing: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "symbols", tuple(self.symbols))
        object.__setattr__(self, "start", MappingProxyType(dict(self.start)))
        object.__setattr__(self, "transition", _freeze(self.transition))
        object.__setattr__(self, "emission", _freeze(self.emission))
        self._validate()

    def _validate(self) -> None:
        names = [state.name for state in self.states]
        if not names:
            raise ModelFormatError("Model defines no states")
        if len(set(names)) != len(names):
            raise ModelFormatError("Model state names are not unique")
        if len(set(self.symbols)) != len(self.symbols):
            raise ModelFormatError("Model symbol names are not unique")
        expected_states = set(names)
        expected_symbols = set(self.symbols)
        if set(self.start) != expected_states:
            raise ModelFormatError("Start table keys do not match the model states")
        if set(self.transition) != expected_states:
            raise ModelFormatError("Transition table rows do not match the model states")
        if set(self.emission) != expected_states:
            raise ModelFormatError("Emission table rows do not match the model states")
        for name in names:
            if set(self.transition[name]) != expected_states:
                raise ModelFormatError(f"Transition row {name!r} does not cover all states")
            if set(self.emission[name]) != expected_symbols:
                raise ModelFormatError(f"Emission row {name!r} does not cover all symbols")
        tables = (
            ("Start table", {"start": self.start}),
            ("Transition row", self.transition),
            ("Emission row", self.emission),
        )
        for label, table in tables:
            for name, row in table.items():
                _check_probabilities(f"{label} {name!r}", row)
            for name, total in row_sums(table).items():
                if abs(total - 1.0) > ROW_SUM_TOLERANCE:
                    raise ModelFormatError(f"{label} {name!r} sums to {total}, not 1")

    @property
    def state_names(self) -> List[str]:
        return [state.name for state in self.states]

    @cached_property
    def log_tables(self) -> LogTables:
        names = self.state_names
        return LogTables(
            start=tuple(_log(self.start[name]) for name in names),
            transition=tuple(
                tuple(_log(self.transition[source][target]) for target in names) for source in names
            ),
            emission=tuple(
                {symbol: _log(p) for symbol, p in self.emission[name].items()} for name in names
            ),
        )

    def is_compatible_with(self, catalog: SymbolCatalog) -> bool:
        return self.catalog_version == catalog.version and self.symbols == catalog.names

    def to_dict(self) -> Dict[str, Any]:
        names = self.state_names
        return {
            "format": MODEL_FORMAT,
            "format_version": MODEL_FORMAT_VERSION,
            "catalog_version": self.catalog_version,
            "smoothing": self.smoothing,
            "states": names,
            "symbols": list(self.symbols),
            "start": {name: self.start[name] for name in names},
            "transition": {
                source: {target: self.transition[source][target] for target in names} for source in names
            },
            "emission": {
                name: {symbol: self.emission[name][symbol] for symbol in self.symbols} for name in names
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelParameters":
        if not isinstance(data, dict):
            raise ModelFormatError("Model data must be a JSON object")
        if data.get("format") != MODEL_FORMAT:
            raise ModelFormatError(f"Unsupported model format: {data.get('format')!r}")
        if data.get("format_version") != MODEL_FORMAT_VERSION:
            raise ModelFormatError(f"Unsupported model format version: {data.get('format_version')!r}")
        try:
            states = tuple(State.parse(name) for name in data["states"])
            return cls(
                states=states,
                symbols=tuple(data["symbols"]),
                start=data["start"],
                transition=data["transition"],
                emission=data["emission"],
                catalog_version=str(data.get("catalog_version", "")),
                smoothing=float(data.get("smoothing", 0.0)),
            )
        except KeyError as exc:
            raise ModelFormatError(f"Model data is missing {exc.args[0]!r}") from exc
        except (TypeError, ValueError, AttributeError) as exc:
            raise ModelFormatError(f"Malformed model data: {exc}") from exc

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path) -> "ModelParameters":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except ValueError as exc:
            raise ModelFormatError(f"{path}: not valid JSON: {exc}") from exc
        return cls.from_dict(data)
