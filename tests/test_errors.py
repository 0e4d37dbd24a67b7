import pytest

from cntshop.errors import ContinenteError, NoResultsError, ParseError


def test_parse_error_keeps_url_and_message():
    err = ParseError("Product-Variation?pid=bad", "expected value")
    assert err.url == "Product-Variation?pid=bad"
    assert err.message == "expected value"


def test_parse_error_text_mentions_url_and_message():
    err = ParseError("SearchServices-GetSuggestions", "Query must be at least 5 characters")
    text = str(err)
    assert "SearchServices-GetSuggestions" in text
    assert "Query must be at least 5 characters" in text


def test_parse_error_is_a_continente_error():
    err = ParseError("Stores-FindStores?lat=38.7&long=-9.1", "bad json")
    assert isinstance(err, ContinenteError)
    assert err.url == "Stores-FindStores?lat=38.7&long=-9.1"
    assert err.message == "bad json"
    assert "bad json" in str(err)


def test_parse_error_match_on_message():
    err = ParseError("SearchServices-GetSuggestions", "Query must be at least 5 characters")
    assert "at least 5 characters" in str(err)
    assert err.url == "SearchServices-GetSuggestions"
    assert err.message == "Query must be at least 5 characters"
    with pytest.raises(ContinenteError, match="at least 5 characters"):
        raise err


def test_no_results_error_default_message():
    assert str(NoResultsError()) == "No results found"


def test_no_results_error_is_caught_as_base_but_not_as_parse_error():
    err = NoResultsError()
    assert isinstance(err, ContinenteError)
    assert not isinstance(err, ParseError)
    assert str(err) == "No results found"
    with pytest.raises(ContinenteError, match="No results found"):
        raise err