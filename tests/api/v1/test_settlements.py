from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from fintrack.api.deps import get_settlement_service
from fintrack.core.exceptions import InvalidAmountError, InvalidTransitionError
from fintrack.main import app
from fintrack.models.settlement import Settlement, SettlementStatus
from fintrack.services.notifications import NotificationOutcome


@pytest.fixture
def service():
    service = MagicMock()
    for name in ("create", "list_for", "complete", "cancel"):
        setattr(service, name, AsyncMock())
    app.dependency_overrides[get_settlement_service] = lambda: service
    return service


def _settlement(**kwargs):
    return Settlement(
        from_user_email="alice@example.com",
        to_user_email="bob@example.com",
        amount=Decimal("25.5"),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_create_settlement(client, service):
    service.create.return_value = _settlement()

    response = await client.post("/api/v1/settlements/", json={
        "to_user_email": "bob@example.com", "amount": 25.5
    })

    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    assert response.json()["amount"] == 25.5


@pytest.mark.asyncio
async def test_zero_amount_is_400(client, service):
    service.create.side_effect = InvalidAmountError("Settlement amount must be positive, got 0")

    response = await client.post("/api/v1/settlements/", json={
        "to_user_email": "bob@example.com", "amount": 0
    })

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_complete_settlement(client, service):
    settled_at = datetime(2024, 3, 5, tzinfo=timezone.utc)
    settlement = _settlement(status=SettlementStatus.COMPLETED, settled_at=settled_at)
    service.complete.return_value = (settlement, NotificationOutcome.skipped("bob@example.com", "off"))

    response = await client.post(f"/api/v1/settlements/{settlement.id}/complete")

    assert response.status_code == 200
    body = response.json()
    assert body["settlement"]["status"] == "completed"
    assert body["settlement"]["settled_at"].startswith("2024-03-05")
    assert body["notification"]["status"] == "skipped"


@pytest.mark.asyncio
async def test_cancel_after_complete_is_409(client, service):
    service.cancel.side_effect = InvalidTransitionError("Settlement is completed, cannot move to cancelled")

    response = await client.post("/api/v1/settlements/507f1f77bcf86cd799439033/cancel")

    assert response.status_code == 409
