from reference_extractor.tokenizer import join_tokens, tokenize


def _texts(text):
    return [token.text for token in tokenize(text)]


def test_punctuation_is_split_from_words():
    assert _texts("Poland,") == ["Poland", ","]
    assert _texts("Rakishev B.R.") == ["Rakishev", "B", ".", "R", "."]
    assert _texts("//The 21st") == ["/", "/", "The", "21st"]
    assert _texts("P. 12-16.") == ["P", ".", "12", "-", "16", "."]


def test_offsets_point_back_into_the_source():
    text = "Ivanov  I.I.,\tStability of slopes (2011)."
    for token in tokenize(text):
        assert text[token.start : token.end] == token.text


def test_whitespace_only_and_empty_input_give_no_tokens():
    assert tokenize("") == []
    assert tokenize("   \t ") == []


def test_cyrillic_and_numero_sign():
    assert _texts("Горный журнал. № 4") == ["Горный", "журнал", ".", "№", "4"]


def test_tokenizing_joined_tokens_is_stable():
    text = "Smith, J., & Brown, K. (2010). Rock mechanics, 47(3), 345-360."
    first = _texts(text)
    again = _texts(join_tokens(tokenize(text)))
    assert again == first
