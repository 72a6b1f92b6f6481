import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from fintrack.core.config import settings

logger = structlog.get_logger(__name__)

class MongoDatabase:
    """MongoDB connection manager."""
    
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]
    
    await create_indexes()
    logger.info("mongo_connected", database=settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
        logger.info("mongo_disconnected")

async def create_indexes():
    """Create database indexes."""
    # User email unique index
    await mongodb.db["users"].create_index("email", unique=True)
    
    # Shared expense indexes
    await mongodb.db["shared_expenses"].create_index("created_by")
    await mongodb.db["shared_expenses"].create_index("participants.user_email")
    await mongodb.db["shared_expenses"].create_index("group_id")
    
    # Settlement indexes
    await mongodb.db["settlements"].create_index([("from_user_email", 1), ("status", 1)])
    await mongodb.db["settlements"].create_index([("to_user_email", 1), ("status", 1)])
    
    # Friends: one row per (user, friend email)
    await mongodb.db["friends"].create_index([("user_id", 1), ("friend_email", 1)], unique=True)
    
    # Groups: one membership row per (group, email)
    await mongodb.db["group_members"].create_index([("group_id", 1), ("user_email", 1)], unique=True)
    await mongodb.db["group_members"].create_index([("user_email", 1), ("status", 1)])
    await mongodb.db["group_expenses"].create_index([("group_id", 1), ("date", -1)])
    await mongodb.db["group_investments"].create_index("group_id")
    await mongodb.db["investments"].create_index("user_id")
    await mongodb.db["investment_transactions"].create_index("investment_id")
    await mongodb.db["expenses"].create_index([("user_id", 1), ("date", -1)])
    await mongodb.db["expense_predictions"].create_index(
        [("user_id", 1), ("date", 1), ("category", 1), ("type", 1)], unique=True
    )

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
