from typing import Optional

from fintrack.models.base import Amount, IsoDate, MongoModel


class Expense(MongoModel):
    """A personal expense logged by one user."""
    user_id: str
    title: str
    amount: Amount
    category: str
    description: Optional[str] = None
    date: IsoDate
