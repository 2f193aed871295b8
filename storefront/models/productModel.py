from datetime import datetime
from typing import Optional, List
from beanie import Document, PydanticObjectId
from pydantic import Field, ConfigDict


class Product(Document):
    """Product document in MongoDB"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    image_url: str = ""
    tags: List[str] = Field(default_factory=list)
    is_featured: bool = False

    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "products"
        indexes = [
            [("created_at", -1)],
            [("category", 1)],
        ]

    model_config = ConfigDict(
        populate_by_name=True,  # Enable from_orm to work with ORM models
        from_attributes=True,  # This allows Pydantic to use aliases
    )
