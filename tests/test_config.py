from pathlib import Path

import pytest

from reference_extractor.config import BUNDLED_CORPUS_PATH, ExtractorSettings
from reference_extractor.trainer import DEFAULT_SMOOTHING


def test_defaults_without_environment():
    settings = ExtractorSettings.from_env({})

    assert settings.model_path is None
    assert settings.catalog_path is None
    assert settings.smoothing == DEFAULT_SMOOTHING
    assert settings.log_level == "WARNING"
    assert settings.workers == 1
    assert settings.resolved_corpus_path() == BUNDLED_CORPUS_PATH
    assert BUNDLED_CORPUS_PATH.exists()


def test_values_are_read_from_environment():
    settings = ExtractorSettings.from_env(
        {
            "REFEXTRACT_MODEL_PATH": "/tmp/model.json",
            "REFEXTRACT_CORPUS_PATH": "/tmp/refs.tagged",
            "REFEXTRACT_SMOOTHING": "0.001",
            "REFEXTRACT_LOG_LEVEL": "debug",
            "REFEXTRACT_WORKERS": "4",
        }
    )

    assert settings.model_path == Path("/tmp/model.json")
    assert settings.resolved_corpus_path() == Path("/tmp/refs.tagged")
    assert settings.smoothing == 0.001
    assert settings.log_level == "DEBUG"
    assert settings.workers == 4


def test_process_environment_is_used_by_default(monkeypatch):
    monkeypatch.setenv("REFEXTRACT_WORKERS", "2")
    assert ExtractorSettings.from_env().workers == 2


@pytest.mark.parametrize(
    "name, value",
    [
        ("REFEXTRACT_SMOOTHING", "lots"),
        ("REFEXTRACT_SMOOTHING", "1.5"),
        ("REFEXTRACT_LOG_LEVEL", "chatty"),
        ("REFEXTRACT_WORKERS", "many"),
        ("REFEXTRACT_WORKERS", "0"),
    ],
)
def test_invalid_values_name_the_variable(name, value):
    with pytest.raises(ValueError) as excinfo:
        ExtractorSettings.from_env({name: value})
    assert name in str(excinfo.value)
