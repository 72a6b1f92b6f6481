from unittest.mock import MagicMock, patch

import pytest
import requests

from fintrack.core.exceptions import ExternalServiceError, NotFoundError, RateLimitError
from fintrack.services.quotes import QuoteClient


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "IBM",
        "05. price": "187.4200",
        "07. latest trading day": "2024-03-01",
        "09. change": "-1.2300",
        "10. change percent": "-0.6520%",
    }
}


@pytest.fixture
def client():
    return QuoteClient(api_key="demo", base_url="https://quotes.test/query", timeout=5)


def test_get_quote_parses_global_quote(client):
    with patch("fintrack.services.quotes.requests.get", return_value=_response(GLOBAL_QUOTE)) as mock_get:
        quote = client.get_quote(" ibm ")

    assert quote.symbol == "IBM"
    assert quote.price == 187.42
    assert quote.change == -1.23
    assert quote.change_percent == -0.652
    assert quote.last_trading_day == "2024-03-01"
    params = mock_get.call_args.kwargs["params"]
    assert params == {"function": "GLOBAL_QUOTE", "symbol": "IBM", "apikey": "demo"}


def test_unknown_symbol_is_not_found(client):
    with patch("fintrack.services.quotes.requests.get", return_value=_response({"Global Quote": {}})):
        with pytest.raises(NotFoundError):
            client.get_quote("NOPE")


def test_rate_limit_note(client):
    payload = {"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."}
    with patch("fintrack.services.quotes.requests.get", return_value=_response(payload)):
        with pytest.raises(RateLimitError):
            client.get_quote("IBM")


def test_missing_api_key_is_an_external_error():
    with patch("fintrack.services.quotes.requests.get") as mock_get:
        with pytest.raises(ExternalServiceError):
            QuoteClient(api_key="").get_quote("IBM")
    mock_get.assert_not_called()


def test_search_maps_best_matches(client):
    payload = {"bestMatches": [
        {
            "1. symbol": "TSCO.LON",
            "2. name": "Tesco PLC",
            "3. type": "Equity",
            "4. region": "United Kingdom",
            "8. currency": "GBX",
        }
    ] * 12}
    with patch("fintrack.services.quotes.requests.get", return_value=_response(payload)):
        results = client.search_symbols("tesco")

    assert len(results) == 10
    assert results[0] == {
        "symbol": "TSCO.LON",
        "name": "Tesco PLC",
        "type": "Equity",
        "region": "United Kingdom",
        "currency": "GBX",
    }


def test_search_degrades_to_empty_list(client):
    with patch(
        "fintrack.services.quotes.requests.get",
        side_effect=requests.exceptions.Timeout("slow"),
    ):
        assert client.search_symbols("tesco") == []


def test_validate_symbol_fails_open(client):
    with patch(
        "fintrack.services.quotes.requests.get",
        side_effect=requests.exceptions.ConnectionError("down"),
    ):
        assert client.validate_symbol("IBM") is True


def test_validate_symbol_rejects_unknown(client):
    with patch(
        "fintrack.services.quotes.requests.get",
        return_value=_response({"Error Message": "Invalid API call."}),
    ):
        assert client.validate_symbol("NOPE") is False


@pytest.mark.parametrize("field,value", [
    ("05. price", "N/A"),
    ("09. change", "--"),
    ("10. change percent", "NaN%"),
])
def test_malformed_quote_field_is_an_external_error(client, field, value):
    payload = {"Global Quote": {**GLOBAL_QUOTE["Global Quote"], field: value}}
    with patch("fintrack.services.quotes.requests.get", return_value=_response(payload)):
        with pytest.raises(ExternalServiceError):
            client.get_quote("IBM")


def test_validate_symbol_fails_open_on_malformed_quote(client):
    payload = {"Global Quote": {**GLOBAL_QUOTE["Global Quote"], "05. price": "N/A"}}
    with patch("fintrack.services.quotes.requests.get", return_value=_response(payload)):
        assert client.validate_symbol("IBM") is True
