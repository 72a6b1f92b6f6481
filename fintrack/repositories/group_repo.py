from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from fintrack.core.exceptions import InvalidInputError
from fintrack.models.group import Group, GroupExpense, GroupInvestment, GroupMember, MemberStatus


class GroupRepository:
    """Groups, their members and their shared books."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["groups"]
        self.members = db["group_members"]
        self.expenses = db["group_expenses"]
        self.investments = db["group_investments"]

    async def create(self, group: Group) -> Group:
        result = await self.collection.insert_one(group.to_document())
        group.id = result.inserted_id
        return group

    async def get(self, group_id: str) -> Optional[Group]:
        if not ObjectId.is_valid(group_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(group_id)})
        if doc:
            return Group(**doc)
        return None

    async def list_by_ids(self, group_ids: List[str]) -> List[Group]:
        ids = [ObjectId(g) for g in group_ids if ObjectId.is_valid(g)]
        if not ids:
            return []
        docs = await self.collection.find({"_id": {"$in": ids}}).sort("name", 1).to_list(None)
        return [Group(**doc) for doc in docs]

    async def update(self, group_id: str, updates: dict) -> Optional[Group]:
        if not ObjectId.is_valid(group_id):
            return None
        updates = {**updates, "updated_at": datetime.now(timezone.utc)}
        result = await self.collection.find_one_and_update(
            {"_id": ObjectId(group_id)},
            {"$set": updates},
            return_document=True
        )
        if result:
            return Group(**result)
        return None

    async def delete(self, group_id: str) -> bool:
        """Delete a group together with its members, expenses and investments."""
        if not ObjectId.is_valid(group_id):
            return False
        result = await self.collection.delete_one({"_id": ObjectId(group_id)})
        if result.deleted_count:
            for collection in (self.members, self.expenses, self.investments):
                await collection.delete_many({"group_id": group_id})
        return result.deleted_count > 0

    # Members

    async def add_member(self, member: GroupMember) -> GroupMember:
        try:
            result = await self.members.insert_one(member.to_document())
        except DuplicateKeyError as e:
            raise InvalidInputError(f"{member.user_email} is already a member of this group") from e
        member.id = result.inserted_id
        return member

    async def get_member(self, group_id: str, email: str) -> Optional[GroupMember]:
        doc = await self.members.find_one({
            "group_id": group_id,
            "user_email": email.lower(),
            "status": MemberStatus.ACTIVE.value
        })
        if doc:
            return GroupMember(**doc)
        return None

    async def list_members(self, group_id: str) -> List[GroupMember]:
        """Active members in the order they joined."""
        cursor = self.members.find({
            "group_id": group_id,
            "status": MemberStatus.ACTIVE.value
        }).sort("joined_at", 1)
        docs = await cursor.to_list(None)
        return [GroupMember(**doc) for doc in docs]

    async def remove_member(self, group_id: str, email: str) -> bool:
        result = await self.members.delete_one({"group_id": group_id, "user_email": email.lower()})
        return result.deleted_count > 0

    async def memberships_for(self, email: str) -> List[GroupMember]:
        cursor = self.members.find({"user_email": email.lower(), "status": MemberStatus.ACTIVE.value})
        docs = await cursor.to_list(None)
        return [GroupMember(**doc) for doc in docs]

    async def member_counts(self, group_ids: List[str]) -> Dict[str, int]:
        """Active member count per group, in one aggregation."""
        pipeline = [
            {"$match": {"group_id": {"$in": group_ids}, "status": MemberStatus.ACTIVE.value}},
            {"$group": {"_id": "$group_id", "count": {"$sum": 1}}},
        ]
        rows = await self.members.aggregate(pipeline).to_list(None)
        return {row["_id"]: row["count"] for row in rows}

    async def is_active_member(self, group_id: str, email: str) -> bool:
        count = await self.members.count_documents(
            {"group_id": group_id, "user_email": email.lower(), "status": MemberStatus.ACTIVE.value},
            limit=1
        )
        return count > 0

    # Shared books

    async def add_expense(self, expense: GroupExpense) -> GroupExpense:
        result = await self.expenses.insert_one(expense.to_document())
        expense.id = result.inserted_id
        return expense

    async def list_expenses(self, group_id: str) -> List[GroupExpense]:
        """Expenses newest first."""
        docs = await self.expenses.find({"group_id": group_id}).sort("date", -1).to_list(None)
        return [GroupExpense(**doc) for doc in docs]

    async def get_expense(self, group_id: str, expense_id: str) -> Optional[GroupExpense]:
        if not ObjectId.is_valid(expense_id):
            return None
        doc = await self.expenses.find_one({"_id": ObjectId(expense_id), "group_id": group_id})
        if doc:
            return GroupExpense(**doc)
        return None

    async def delete_expense(self, group_id: str, expense_id: str) -> bool:
        if not ObjectId.is_valid(expense_id):
            return False
        result = await self.expenses.delete_one({"_id": ObjectId(expense_id), "group_id": group_id})
        return result.deleted_count > 0

    async def add_investment(self, investment: GroupInvestment) -> GroupInvestment:
        result = await self.investments.insert_one(investment.to_document())
        investment.id = result.inserted_id
        return investment

    async def list_investments(self, group_id: str) -> List[GroupInvestment]:
        cursor = self.investments.find({"group_id": group_id}).sort("created_at", -1)
        docs = await cursor.to_list(None)
        return [GroupInvestment(**doc) for doc in docs]

    async def delete_investment(self, group_id: str, investment_id: str) -> bool:
        if not ObjectId.is_valid(investment_id):
            return False
        result = await self.investments.delete_one({"_id": ObjectId(investment_id), "group_id": group_id})
        return result.deleted_count > 0
