from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fintrack.core.auth import get_current_user
from fintrack.main import app
from fintrack.models.shared_expense import Participant, SharedExpense, SplitMethod
from fintrack.models.user import CurrentUser
from fintrack.services.notifications import NotificationOutcome

ALICE_ID = "507f1f77bcf86cd799439011"
BOB_ID = "507f1f77bcf86cd799439022"


@pytest.fixture
def alice() -> CurrentUser:
    return CurrentUser(id=ALICE_ID, email="alice@example.com", name="Alice")


@pytest.fixture
def bob() -> CurrentUser:
    return CurrentUser(id=BOB_ID, email="bob@example.com", name="Bob")


@pytest.fixture
def make_expense(alice):
    """Build a shared expense created by Alice."""
    def _make(participants, total="100", created_by=None, creator_email=None, **kwargs):
        return SharedExpense(
            created_by=created_by or alice.id,
            creator_email=creator_email or alice.email,
            creator_name="Alice",
            title=kwargs.pop("title", "Dinner"),
            total_amount=total,
            category="food",
            date=date(2024, 3, 1),
            split_method=kwargs.pop("split_method", SplitMethod.CUSTOM),
            participants=[
                p if isinstance(p, Participant) else Participant(**p) for p in participants
            ],
            **kwargs,
        )
    return _make


@pytest.fixture
def notifier():
    """Notifier double that reports every email as sent."""
    mock = MagicMock()
    mock.send_expense_assignment.side_effect = lambda n: NotificationOutcome.sent(n.to_email, "msg-1")
    mock.send_settlement_confirmation.side_effect = lambda n: NotificationOutcome.sent(n.to_email, "msg-2")
    return mock


@pytest.fixture
def mock_repo():
    """Factory for repository doubles whose coroutines are AsyncMocks."""
    def _make(*methods):
        repo = MagicMock()
        for name in methods:
            setattr(repo, name, AsyncMock())
        return repo
    return _make


@pytest_asyncio.fixture
async def client(alice):
    """HTTP client against the app with authentication overridden.

    ASGITransport does not run startup events, so no MongoDB connection is made.
    """
    app.dependency_overrides[get_current_user] = lambda: alice
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
