"""Runtime configuration for the extractor."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .trainer import DEFAULT_SMOOTHING

BUNDLED_CORPUS_PATH = Path(__file__).resolve().parent / "data" / "references.tagged"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _optional_path(source: Mapping[str, str], name: str) -> Optional[Path]:
    value = source.get(name, "").strip()
    return Path(value).expanduser() if value else None


@dataclass(frozen=True)
class ExtractorSettings:
    """Where the model, corpus and catalog come from, plus runtime knobs."""

    model_path: Optional[Path] = None
    corpus_path: Optional[Path] = None
    catalog_path: Optional[Path] = None
    smoothing: float = DEFAULT_SMOOTHING
    log_level: str = "WARNING"
    workers: int = 1

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExtractorSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        raw_smoothing = source.get("REFEXTRACT_SMOOTHING", "").strip()
        try:
            smoothing = float(raw_smoothing) if raw_smoothing else DEFAULT_SMOOTHING
        except ValueError as exc:
            raise ValueError(f"REFEXTRACT_SMOOTHING must be a number, got {raw_smoothing!r}") from exc
        if not 0 < smoothing < 1:
            raise ValueError("REFEXTRACT_SMOOTHING must be between 0 and 1")

        log_level = source.get("REFEXTRACT_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"REFEXTRACT_LOG_LEVEL is not a logging level: {log_level!r}")

        raw_workers = source.get("REFEXTRACT_WORKERS", "").strip()
        try:
            workers = int(raw_workers) if raw_workers else 1
        except ValueError as exc:
            raise ValueError(f"REFEXTRACT_WORKERS must be an integer, got {raw_workers!r}") from exc
        if workers < 1:
            raise ValueError("REFEXTRACT_WORKERS must be at least 1")

        return cls(
            model_path=_optional_path(source, "REFEXTRACT_MODEL_PATH"),
            corpus_path=_optional_path(source, "REFEXTRACT_CORPUS_PATH"),
            catalog_path=_optional_path(source, "REFEXTRACT_CATALOG_PATH"),
            smoothing=smoothing,
            log_level=log_level,
            workers=workers,
        )

    def resolved_corpus_path(self) -> Path:
        return self.corpus_path or BUNDLED_CORPUS_PATH


def configure_logging(level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())
