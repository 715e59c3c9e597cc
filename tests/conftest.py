import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

import pytest

from reference_extractor.extractor import ReferenceExtractor, train_default_model
from reference_extractor.hmm import ModelParameters
from reference_extractor.models import State

RAKISHEV = (
    "Rakishev B.R. Open Cast Mining in Kazakhstan Under Market Conditions. "
    "//The 21st World Mining Congress & Expo 2008."
)


@pytest.fixture()
def rakishev() -> str:
    return RAKISHEV


@pytest.fixture(scope="session")
def default_model() -> ModelParameters:
    """Model trained once on the bundled corpus."""

    return train_default_model()


@pytest.fixture(scope="session")
def extractor(default_model: ModelParameters) -> ReferenceExtractor:
    return ReferenceExtractor(default_model)


@pytest.fixture()
def toy_model() -> ModelParameters:
    """Three states over four symbols with no ties between paths."""

    states = (State("author", "start"), State("title", "start"), State("date", "start"))
    names = [state.name for state in states]
    return ModelParameters(
        states=states,
        symbols=("a", "b", "c", "d"),
        start=dict(zip(names, (0.5, 0.3, 0.2))),
        transition={
            names[0]: dict(zip(names, (0.6, 0.3, 0.1))),
            names[1]: dict(zip(names, (0.15, 0.55, 0.3))),
            names[2]: dict(zip(names, (0.25, 0.05, 0.7))),
        },
        emission={
            names[0]: dict(a=0.5, b=0.2, c=0.2, d=0.1),
            names[1]: dict(a=0.1, b=0.6, c=0.1, d=0.2),
            names[2]: dict(a=0.05, b=0.15, c=0.35, d=0.45),
        },
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "REFEXTRACT_MODEL_PATH",
        "REFEXTRACT_CORPUS_PATH",
        "REFEXTRACT_CATALOG_PATH",
        "REFEXTRACT_SMOOTHING",
        "REFEXTRACT_LOG_LEVEL",
        "REFEXTRACT_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
