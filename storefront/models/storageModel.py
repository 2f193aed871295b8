from datetime import datetime
from typing import Optional
from beanie import Document, PydanticObjectId
from pydantic import Field, ConfigDict
from pymongo import ASCENDING, IndexModel


class StorageEntry(Document):
    """Durable key-value entry, namespaced per shop session"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    namespace: str
    key: str
    value: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "storage_entries"
        indexes = [
            IndexModel([("namespace", ASCENDING), ("key", ASCENDING)], unique=True),
        ]

    model_config = ConfigDict(populate_by_name=True)
