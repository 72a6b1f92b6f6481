from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from fintrack.core.exceptions import InvalidInputError
from fintrack.models.friend import Friend


class FriendRepository:
    """Friend list operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["friends"]

    async def add_friend(self, user_id: str, friend_email: str, friend_name: str) -> Friend:
        """Add a friend. Friends are accepted right away."""
        friend = Friend(
            user_id=user_id,
            friend_email=friend_email.lower(),
            friend_name=friend_name,
            status="accepted"
        )
        try:
            result = await self.collection.insert_one(friend.to_document())
        except DuplicateKeyError as e:
            raise InvalidInputError(f"{friend_email} is already in your friends list") from e
        friend.id = result.inserted_id
        return friend

    async def list_friends(self, user_id: str) -> List[Friend]:
        """Accepted friends ordered by name."""
        cursor = self.collection.find({
            "user_id": user_id,
            "status": "accepted"
        }).sort("friend_name", 1)
        docs = await cursor.to_list(None)
        return [Friend(**doc) for doc in docs]
