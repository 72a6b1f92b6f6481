from typing import List

from pydantic import BaseModel

from fintrack.models.base import Amount
from fintrack.services.balance_aggregator import Balance


class BalancesResponse(BaseModel):
    """Net balances; positive means the counterparty owes you."""
    balances: List[Balance]
    total_owed_to_you: Amount
    total_you_owe: Amount
