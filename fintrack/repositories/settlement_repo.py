from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from fintrack.models.settlement import Settlement, SettlementStatus


class SettlementRepository:
    """Repository for peer-to-peer settlements."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["settlements"]

    async def insert(self, settlement: Settlement) -> Settlement:
        result = await self.collection.insert_one(settlement.to_document())
        settlement.id = result.inserted_id
        return settlement

    async def get(self, settlement_id: str) -> Optional[Settlement]:
        if not ObjectId.is_valid(settlement_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(settlement_id)})
        if doc:
            return Settlement(**doc)
        return None

    async def list_for(self, email: str) -> List[Settlement]:
        """Settlements where the user pays or is paid, newest first."""
        cursor = self.collection.find({
            "$or": [
                {"from_user_email": email},
                {"to_user_email": email}
            ]
        }).sort("created_at", -1)
        docs = await cursor.to_list(None)
        return [Settlement(**doc) for doc in docs]

    async def save_transition(self, settlement: Settlement) -> Optional[Settlement]:
        """
        Write a status change made from ``pending``.

        Returns None when the stored record is no longer pending.
        """
        result = await self.collection.find_one_and_update(
            {"_id": settlement.id, "status": SettlementStatus.PENDING.value},
            {
                "$set": {
                    "status": settlement.status.value,
                    "settled_at": settlement.settled_at,
                    "updated_at": settlement.updated_at or datetime.now(timezone.utc)
                }
            },
            return_document=ReturnDocument.AFTER
        )
        if result:
            return Settlement(**result)
        return None
