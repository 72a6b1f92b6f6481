from datetime import date, datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import UpdateOne

from fintrack.models.expense import Expense
from fintrack.schemas.expense import ExpensePrediction


class ExpenseRepository:
    """Personal expense log."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["expenses"]

    async def create(self, expense: Expense) -> Expense:
        result = await self.collection.insert_one(expense.to_document())
        expense.id = result.inserted_id
        return expense

    async def list_for_user(self, user_id: str, since: Optional[date] = None) -> List[Expense]:
        """Expenses newest first, optionally only those on or after ``since``."""
        query = {"user_id": user_id}
        if since is not None:
            query["date"] = {"$gte": since.isoformat()}
        docs = await self.collection.find(query).sort("date", -1).to_list(None)
        return [Expense(**doc) for doc in docs]

    async def delete(self, expense_id: str, user_id: str) -> bool:
        if not ObjectId.is_valid(expense_id):
            return False
        result = await self.collection.delete_one({"_id": ObjectId(expense_id), "user_id": user_id})
        return result.deleted_count > 0

    async def save_predictions(self, user_id: str, predictions: List[ExpensePrediction]) -> None:
        """Upsert forecasts keyed by (user, date, category, type)."""
        if not predictions:
            return
        operations = []
        for p in predictions:
            key = {
                "user_id": user_id,
                "date": p.date.isoformat(),
                "category": p.category,
                "type": p.type,
            }
            operations.append(UpdateOne(
                key,
                {"$set": {
                    "predicted_amount": p.predicted_amount,
                    "confidence": p.confidence,
                    "updated_at": datetime.now(timezone.utc),
                }},
                upsert=True,
            ))
        await self.db["expense_predictions"].bulk_write(operations, ordered=False)
