"""
SharedExpenseRepository - shared expenses with their embedded participants.

Replacing participants is a single $set on the expense document, so an edit
is atomic from the store's point of view.
"""

from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from fintrack.models.shared_expense import Participant, SharedExpense


class SharedExpenseRepository:
    """Repository for shared expenses."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["shared_expenses"]

    async def insert(self, expense: SharedExpense) -> SharedExpense:
        result = await self.collection.insert_one(expense.to_document())
        expense.id = result.inserted_id
        return expense

    async def get(self, expense_id: str) -> Optional[SharedExpense]:
        if not ObjectId.is_valid(expense_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(expense_id)})
        if doc:
            return SharedExpense(**doc)
        return None

    async def list_for_user(self, user_id: str, email: str) -> List[SharedExpense]:
        """Expenses the user created or takes part in, newest date first."""
        cursor = self.collection.find({
            "$or": [
                {"created_by": user_id},
                {"participants.user_email": email}
            ]
        }).sort([("date", -1), ("created_at", -1)])
        docs = await cursor.to_list(None)
        return [SharedExpense(**doc) for doc in docs]

    async def replace(self, expense: SharedExpense) -> Optional[SharedExpense]:
        """Overwrite editable fields and the whole participant list."""
        doc = expense.to_document()
        updates = {
            key: doc[key]
            for key in (
                "title", "description", "total_amount", "category", "date",
                "split_method", "group_id", "participants"
            )
        }
        updates["updated_at"] = datetime.now(timezone.utc)

        result = await self.collection.find_one_and_update(
            {"_id": expense.id, "created_by": expense.created_by},
            {"$set": updates},
            return_document=True
        )
        if result:
            return SharedExpense(**result)
        return None

    async def delete(self, expense_id: str, owner_id: str) -> bool:
        """Delete an expense and, with it, all of its participants."""
        if not ObjectId.is_valid(expense_id):
            return False
        result = await self.collection.delete_one({
            "_id": ObjectId(expense_id),
            "created_by": owner_id
        })
        return result.deleted_count > 0

    async def settle_participant(self, expense_id: str, participant: Participant) -> bool:
        """
        Persist a settled participant.

        Matches only while the participant is still unsettled, so a second
        concurrent attempt modifies nothing and returns False.
        """
        result = await self.collection.update_one(
            {
                "_id": ObjectId(expense_id),
                "participants": {"$elemMatch": {"id": participant.id, "is_settled": False}}
            },
            {
                "$set": {
                    "participants.$.amount_paid": float(participant.amount_paid),
                    "participants.$.is_settled": True,
                    "updated_at": datetime.now(timezone.utc)
                }
            }
        )
        return result.modified_count > 0
