import logging

import pytest

from reference_extractor.assembler import assemble
from reference_extractor.models import State, Token
from reference_extractor.tokenizer import tokenize


def _states(*names):
    return [State.parse(name) for name in names]


def test_author_span_keeps_all_tokens():
    tokens = tokenize("Pivovarova T.")
    record = assemble(tokens, _states("author-start", "author-rest", "author-rest"), raw_text="Pivovarova T.")

    assert record["author"] == "Pivovarova T ."
    assert record.original_text("author") == "Pivovarova T."
    assert len(record.spans) == 1


def test_fields_keep_first_position_and_later_value():
    tokens = [Token("A", 0, 1), Token("B", 2, 3), Token("C", 4, 5)]
    record = assemble(tokens, _states("author-start", "title-start", "author-start"), raw_text="A B C")

    assert list(record) == ["author", "title"]
    assert record["author"] == "C"
    assert record.original_text("author") == "C"
    assert [span.field for span in record.spans] == ["author", "title", "author"]


def test_repeated_start_state_does_not_split_a_field():
    tokens = [Token("A", 0, 1), Token("B", 2, 3)]
    record = assemble(tokens, _states("title-start", "title-start"))

    assert record.as_dict() == {"title": "A B"}


def test_field_jump_into_rest_state_opens_new_span(caplog):
    tokens = [Token("Ivanov", 0, 6), Token("Rock", 7, 11), Token("2001", 12, 16)]
    with caplog.at_level(logging.DEBUG, logger="reference_extractor.assembler"):
        record = assemble(tokens, _states("author-start", "title-rest", "date-rest"))

    assert record.as_dict() == {"author": "Ivanov", "title": "Rock", "date": "2001"}
    assert "without a start state" in caplog.text


def test_span_offsets_cover_the_source_text():
    text = "Ivanov  I.  Rock"
    tokens = tokenize(text)
    record = assemble(tokens, _states("author-start", "author-rest", "author-rest", "title-start"), raw_text=text)

    author, title = record.spans
    assert (author.start, author.end) == (0, 10)
    assert (author.first_token, author.last_token) == (0, 2)
    assert text[title.start : title.end] == "Rock"


def test_record_is_read_only():
    record = assemble([Token("A", 0, 1)], _states("title-start"))
    with pytest.raises(TypeError):
        record["title"] = "B"


def test_length_mismatch_is_rejected():
    with pytest.raises(ValueError):
        assemble([Token("A", 0, 1)], _states("title-start", "title-rest"))


def test_empty_input_gives_empty_record():
    record = assemble([], [])
    assert len(record) == 0
    assert record.original_text("title") is None
