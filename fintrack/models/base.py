from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from bson import ObjectId
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PyObjectId(ObjectId):
    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any):
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(
            cls.validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: str(value), when_used="json"
            ),
        )

    @classmethod
    def validate(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError("Invalid ObjectId")


# Amounts are computed as Decimal but stored in MongoDB and sent over JSON as
# plain numbers.
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float)]

# Calendar dates are kept as ISO strings so they sort correctly in queries.
IsoDate = Annotated[date, PlainSerializer(lambda value: value.isoformat(), return_type=str)]


class MongoModel(BaseModel):
    id: PyObjectId = Field(default_factory=PyObjectId, alias="_id")
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        from_attributes=True
    )

    def to_document(self) -> dict:
        """Dump for insertion into MongoDB (``_id`` key, native types)."""
        return self.model_dump(by_alias=True)
