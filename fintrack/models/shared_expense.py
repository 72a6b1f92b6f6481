"""
Shared expense model - a bill divided among participants.

Design principles:
- Participants are embedded in the expense document; they have no life of
  their own and are replaced wholesale when the expense is edited
- total_amount and split_method only change through a full edit
- Participant settlement is one-way: owed -> settled

Invariant: sum(amount_owed) == total_amount within 0.01
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from fintrack.models.base import Amount, IsoDate, MongoModel, PyObjectId


class SplitMethod(str, Enum):
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    CUSTOM = "custom"
    SHARES = "shares"


class Participant(BaseModel):
    """One person's share of a shared expense."""
    id: PyObjectId = Field(default_factory=PyObjectId)
    user_email: str
    user_name: str
    amount_owed: Amount = Decimal("0")
    amount_paid: Amount = Decimal("0")
    percentage: Optional[float] = None  # percentage splits only, 0-100
    shares: Optional[int] = None        # shares splits only
    is_settled: bool = False

    def outstanding(self) -> Decimal:
        """What is still owed on this share."""
        return self.amount_owed - self.amount_paid


class SharedExpense(MongoModel):
    created_by: str          # owner user id
    creator_email: str
    creator_name: str = ""
    title: str
    description: Optional[str] = None
    total_amount: Amount
    category: str
    date: IsoDate
    split_method: SplitMethod
    currency: str = "USD"
    group_id: Optional[str] = None
    participants: List[Participant] = []

    @property
    def is_settled(self) -> bool:
        return bool(self.participants) and all(p.is_settled for p in self.participants)

    def find_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if str(participant.id) == participant_id:
                return participant
        return None

    def participant_for(self, email: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.user_email == email:
                return participant
        return None
