import logging

import pytest

from reference_extractor.assembler import assemble
from reference_extractor.config import ExtractorSettings
from reference_extractor.errors import CatalogMismatchError, EmptyInputError
from reference_extractor.extractor import ReferenceExtractor, to_reference_entry
from reference_extractor.models import State
from reference_extractor.symbols import Symbol, SymbolCatalog
from reference_extractor.tokenizer import tokenize


def test_rakishev_reference_end_to_end(extractor, rakishev):
    record = extractor.extract(rakishev)

    assert record["author"].startswith("Rakishev")
    assert record["title"].startswith("Open Cast Mining")
    assert record["journal"].startswith("/ / The 21st World Mining Congress")
    assert record.original_text("journal").startswith("//The 21st")
    assert record["date"].startswith("2008")

    entry = extractor.to_entry(record)
    assert entry.year == "2008"
    assert entry.authors == ["Rakishev B.R."]
    assert entry.journal == "The 21st World Mining Congress & Expo"
    assert entry.formatted_key() == "rakishev2008"


def test_blank_reference_is_rejected(extractor):
    with pytest.raises(EmptyInputError):
        extractor.extract("   ")


def test_unknown_characters_fall_back_instead_of_failing(extractor):
    record = extractor.extract("Rakishev B.R. ☃ Open pit mining. 2008.")
    assert record.raw_text.startswith("Rakishev")
    assert "author" in record


def test_extract_many_preserves_order_with_threads(extractor, rakishev):
    texts = [
        rakishev,
        "Ivanov A.A. Stability of Pit Slopes. //Mining Journal. 2011. № 7. P. 45-52.",
        "Hoek E., Bray J.W. Rock Slope Engineering. London: Institution of Mining and Metallurgy, 1981. 358 p.",
    ]
    sequential = extractor.extract_many(texts)
    threaded = extractor.extract_many(texts, max_workers=3)

    assert [record.as_dict() for record in threaded] == [record.as_dict() for record in sequential]
    assert [record.raw_text for record in threaded] == texts


def test_extract_many_skips_blank_references(extractor, rakishev, caplog):
    with pytest.raises(EmptyInputError):
        extractor.extract_many([rakishev, ""])

    with caplog.at_level(logging.WARNING, logger="reference_extractor.extractor"):
        records = extractor.extract_many([rakishev, "", rakishev], skip_errors=True)
    assert records[1] is None
    assert records[0].as_dict() == records[2].as_dict()
    assert "Skipping empty reference" in caplog.text


def test_model_and_catalog_must_agree(default_model):
    catalog = SymbolCatalog([Symbol("word", r"\w+")], version="words")
    with pytest.raises(CatalogMismatchError):
        ReferenceExtractor(default_model, catalog)


def test_from_settings_loads_saved_model(default_model, tmp_path):
    path = tmp_path / "model.json"
    default_model.save(path)

    extractor = ReferenceExtractor.from_settings(ExtractorSettings(model_path=path))
    assert extractor.params.to_dict() == default_model.to_dict()


def test_from_settings_trains_on_bundled_corpus_by_default(default_model):
    extractor = ReferenceExtractor.from_settings(ExtractorSettings())
    assert extractor.params.to_dict() == default_model.to_dict()


def test_entry_labels_are_stripped_from_numbers():
    text = "Vol. 48, No. 1. pp. 42-50."
    tokens = tokenize(text)
    states = (
        [State("volume", "start")] + [State("volume", "rest")] * 3
        + [State("number", "start")] + [State("number", "rest")] * 3
        + [State("pages", "start")] + [State("pages", "rest")] * 5
    )
    entry = to_reference_entry(assemble(tokens, states, raw_text=text))

    assert entry.volume == "48"
    assert entry.issue == "1"
    assert entry.pages == "42-50"


def test_entry_cleans_book_fields():
    text = "Rzhevsky V.V. Open Pit Mining Processes. Moscow: Nauka, 1985. 512 p."
    tokens = tokenize(text)
    layout = [("author", 5), ("title", 5), ("location", 2), ("publisher", 2), ("date", 2), ("pages", 3)]
    states = []
    for field_name, count in layout:
        states += [State(field_name, "start")] + [State(field_name, "rest")] * (count - 1)
    entry = to_reference_entry(assemble(tokens, states, raw_text=text))

    assert entry.authors == ["Rzhevsky V.V."]
    assert entry.title == "Open Pit Mining Processes"
    assert entry.location == "Moscow"
    assert entry.publisher == "Nauka"
    assert entry.year == "1985"
    assert entry.pages == "512"


def test_entry_picks_up_doi_from_url():
    text = "Singh S.P. doi: 10.1080/13855140500283409"
    tokens = tokenize(text)
    states = (
        [State("author", "start")] + [State("author", "rest")] * 4
        + [State("url", "start")] + [State("url", "rest")] * (len(tokens) - 6)
    )
    entry = to_reference_entry(assemble(tokens, states, raw_text=text))

    assert entry.doi == "10.1080/13855140500283409"


def test_entry_keeps_apa_surnames_with_their_initials():
    text = "Read, J., & Stacey, P. (2009). Guidelines for open pit slope design. Collingwood: CSIRO Publishing."
    tokens = tokenize(text)
    layout = [("author", 10), ("date", 4), ("title", 7), ("location", 2), ("publisher", 3)]
    states = []
    for field_name, count in layout:
        states += [State(field_name, "start")] + [State(field_name, "rest")] * (count - 1)
    entry = to_reference_entry(assemble(tokens, states, raw_text=text))

    assert entry.authors == ["Read, J.", "Stacey, P."]
    assert entry.year == "2009"
    assert entry.formatted_key() == "read2009"


def test_apa_reference_authors_end_to_end(extractor):
    record = extractor.extract(
        "Read, J., & Stacey, P. (2009). Guidelines for open pit slope design. Collingwood: CSIRO Publishing."
    )
    assert extractor.to_entry(record).authors == ["Read, J.", "Stacey, P."]
