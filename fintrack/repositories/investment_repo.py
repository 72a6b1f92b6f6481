from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from fintrack.models.investment import Investment, InvestmentTransaction


class InvestmentRepository:
    """Investments and their buy/sell transactions."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["investments"]
        self.transactions = db["investment_transactions"]

    async def create(self, investment: Investment) -> Investment:
        result = await self.collection.insert_one(investment.to_document())
        investment.id = result.inserted_id
        return investment

    async def list_for_user(self, user_id: str) -> List[Investment]:
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", -1)
        docs = await cursor.to_list(None)
        return [Investment(**doc) for doc in docs]

    async def get(self, investment_id: str, user_id: str) -> Optional[Investment]:
        if not ObjectId.is_valid(investment_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(investment_id), "user_id": user_id})
        if doc:
            return Investment(**doc)
        return None

    async def update(self, investment_id: str, user_id: str, updates: dict) -> Optional[Investment]:
        if not ObjectId.is_valid(investment_id):
            return None
        updates = {**updates, "updated_at": datetime.now(timezone.utc)}
        result = await self.collection.find_one_and_update(
            {"_id": ObjectId(investment_id), "user_id": user_id},
            {"$set": updates},
            return_document=True
        )
        if result:
            return Investment(**result)
        return None

    async def delete(self, investment_id: str, user_id: str) -> bool:
        if not ObjectId.is_valid(investment_id):
            return False
        result = await self.collection.delete_one({"_id": ObjectId(investment_id), "user_id": user_id})
        if result.deleted_count:
            await self.transactions.delete_many({"investment_id": investment_id})
        return result.deleted_count > 0

    async def set_current_price(self, investment_id, price: float) -> bool:
        result = await self.collection.update_one(
            {"_id": investment_id},
            {"$set": {"current_price": price, "updated_at": datetime.now(timezone.utc)}}
        )
        return result.matched_count > 0

    async def add_transaction(self, transaction: InvestmentTransaction) -> InvestmentTransaction:
        result = await self.transactions.insert_one(transaction.to_document())
        transaction.id = result.inserted_id
        return transaction

    async def list_transactions(self, investment_id: str) -> List[InvestmentTransaction]:
        cursor = self.transactions.find({"investment_id": investment_id}).sort("transaction_date", -1)
        docs = await cursor.to_list(None)
        return [InvestmentTransaction(**doc) for doc in docs]
