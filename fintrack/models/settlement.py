from datetime import datetime
from enum import Enum
from typing import Optional

from fintrack.models.base import Amount, MongoModel


class SettlementStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({SettlementStatus.COMPLETED, SettlementStatus.CANCELLED})


class Settlement(MongoModel):
    """A real-world payment from one person to another."""
    from_user_email: str   # payer
    to_user_email: str     # payee
    amount: Amount
    shared_expense_id: Optional[str] = None
    description: Optional[str] = None
    status: SettlementStatus = SettlementStatus.PENDING
    settled_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
