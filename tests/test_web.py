import inspect

import pytest

fastapi = pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from reference_extractor.extractor import ReferenceExtractor
from reference_extractor.web import app, extract_references, parse_text


client = TestClient(app)


@pytest.fixture(autouse=True)
def _shared_extractor(extractor):
    app.state.extractor = extractor
    yield
    app.state.extractor = None


def test_homepage_renders_form():
    response = client.get("/")

    assert response.status_code == 200
    assert "Reference Extractor" in response.text
    assert "tailwind" in response.text.lower()
    assert "name=\"text\"" in response.text


def test_parse_form_returns_report(rakishev):
    response = client.post("/parse", data={"text": f"{rakishev}\n\n"})

    assert response.status_code == 200
    assert "Extraction Report" in response.text
    assert "References parsed: 1 of 1" in response.text
    assert "Congress &amp; Expo" in response.text


def test_api_returns_fields_and_errors(rakishev):
    response = client.post("/api/extract", json={"references": [rakishev, "   "]})

    assert response.status_code == 200
    first, second = response.json()["results"]
    assert first["input"] == rakishev
    assert first["fields"]["author"].startswith("Rakishev")
    assert first["entry"]["year"] == "2008"
    assert "error" not in first
    assert second["input"] == "   "
    assert second["error"] == "Reference text is empty"
    assert "fields" not in second


def test_api_rejects_empty_request():
    response = client.post("/api/extract", json={"references": []})
    assert response.status_code == 422


def test_extractor_is_built_on_first_request(rakishev):
    app.state.extractor = None

    response = client.post("/api/extract", json={"references": [rakishev]})

    assert response.status_code == 200
    assert isinstance(app.state.extractor, ReferenceExtractor)


def test_extraction_endpoints_run_in_the_threadpool():
    assert not inspect.iscoroutinefunction(parse_text)
    assert not inspect.iscoroutinefunction(extract_references)
