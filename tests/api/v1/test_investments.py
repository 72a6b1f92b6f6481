from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from fintrack.api.deps import get_investment_service, get_quote_client
from fintrack.main import app
from fintrack.models.investment import Investment, PriceUpdateResult
from fintrack.schemas.investment import PriceRefreshResponse


@pytest.fixture
def service():
    service = MagicMock()
    for name in ("create", "list_for", "update", "delete", "summary", "refresh_prices",
                 "list_transactions", "add_transaction"):
        setattr(service, name, AsyncMock())
    app.dependency_overrides[get_investment_service] = lambda: service
    return service


@pytest.fixture
def quotes():
    quotes = MagicMock()
    app.dependency_overrides[get_quote_client] = lambda: quotes
    return quotes


@pytest.mark.asyncio
async def test_create_investment(client, service, alice):
    service.create.return_value = Investment(
        user_id=alice.id, symbol="VTI", name="Vanguard", quantity="3",
        purchase_price="220.5", current_price="220.5", purchase_date=date(2024, 2, 1),
    )

    response = await client.post("/api/v1/investments/", json={
        "symbol": "vti", "name": "Vanguard", "quantity": 3,
        "purchase_price": 220.5, "purchase_date": "2024-02-01",
    })

    assert response.status_code == 201
    assert response.json()["symbol"] == "VTI"
    assert response.json()["current_price"] == 220.5


@pytest.mark.asyncio
async def test_refresh_reports_rate_limit(client, service):
    service.refresh_prices.return_value = PriceRefreshResponse(
        results=[PriceUpdateResult(
            symbol="AAPL", old_price=100, new_price=100, change=0, change_percent=0,
            success=False, error="Alpha Vantage API rate limit exceeded. Please try again later.",
        )],
        updated=0,
        rate_limited=True,
    )

    response = await client.post("/api/v1/investments/refresh-prices")

    assert response.status_code == 200
    assert response.json()["rate_limited"] is True
    assert response.json()["results"][0]["success"] is False


@pytest.mark.asyncio
async def test_search_and_validate(client, quotes):
    quotes.search_symbols.return_value = [{
        "symbol": "IBM", "name": "IBM", "type": "Equity", "region": "United States", "currency": "USD"
    }]
    quotes.validate_symbol.return_value = True

    search = await client.get("/api/v1/investments/search", params={"keywords": "ibm"})
    validate = await client.get("/api/v1/investments/validate/ibm")

    assert search.json()[0]["symbol"] == "IBM"
    assert validate.json() == {"symbol": "IBM", "valid": True}
    quotes.validate_symbol.assert_called_once_with("IBM")
