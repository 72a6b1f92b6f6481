from typing import Dict, Iterable
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from datetime import datetime, timezone
from fintrack.models.user import UserCreate, UserInDB
from fintrack.core.security import hash_password

class UserRepository:
    """User database operations."""
    
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]
    
    async def create_user(self, user_data: UserCreate) -> UserInDB:
        """Create a new user."""
        user_dict = {
            "name": user_data.name,
            "email": user_data.email.lower(),
            "password_hash": hash_password(user_data.password),
            "is_deleted": False,
            "created_at": datetime.now(timezone.utc),
            "updated_at": datetime.now(timezone.utc)
        }
        
        result = await self.collection.insert_one(user_dict)
        user_dict["_id"] = result.inserted_id
        return UserInDB(**user_dict)
    
    async def get_user_by_email(self, email: str) -> UserInDB | None:
        """Get user by email."""
        user = await self.collection.find_one({"email": email.lower(), "is_deleted": False})
        if user:
            return UserInDB(**user)
        return None
    
    async def get_user_by_id(self, user_id: str) -> UserInDB | None:
        """Get user by ID."""
        if not ObjectId.is_valid(user_id):
            return None
        user = await self.collection.find_one({
            "_id": ObjectId(user_id),
            "is_deleted": False
        })
        if user:
            return UserInDB(**user)
        return None

    async def get_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, UserInDB]:
        """Bulk lookup keyed by string id. Unknown ids are simply absent."""
        oids = [ObjectId(uid) for uid in set(user_ids) if ObjectId.is_valid(uid)]
        if not oids:
            return {}
        docs = await self.collection.find({"_id": {"$in": oids}}).to_list(None)
        return {str(doc["_id"]): UserInDB(**doc) for doc in docs}
