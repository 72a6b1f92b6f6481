from fintrack.models.base import MongoModel


class Friend(MongoModel):
    user_id: str
    friend_email: str
    friend_name: str
    status: str = "accepted"  # pending | accepted | blocked
