from datetime import datetime, timezone
from decimal import Decimal

import pytest
from bson import ObjectId

from fintrack.models.user import UserInDB
from fintrack.services.balance_service import BalanceService


@pytest.mark.asyncio
async def test_balances_resolve_creator_names(mock_repo, alice, bob, make_expense):
    expenses = mock_repo("list_for_user")
    users = mock_repo("get_users_by_ids")
    expenses.list_for_user.return_value = [
        make_expense(
            [{"user_email": bob.email, "user_name": "Bob", "amount_owed": "25"}],
            creator_email="stale@example.com",
        )
    ]
    now = datetime.now(timezone.utc)
    users.get_users_by_ids.return_value = {
        alice.id: UserInDB(
            _id=ObjectId(alice.id),
            name="Alice Liddell",
            email=alice.email,
            password_hash="x",
            created_at=now,
            updated_at=now,
        )
    }

    balances = await BalanceService(expenses, users).balances_for(bob)

    expenses.list_for_user.assert_awaited_once_with(bob.id, bob.email)
    users.get_users_by_ids.assert_awaited_once_with({alice.id})
    assert len(balances) == 1
    assert balances[0].counterparty_email == alice.email
    assert balances[0].counterparty_name == "Alice Liddell"
    assert balances[0].net_amount == Decimal("-25")
