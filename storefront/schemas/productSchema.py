from datetime import datetime
from typing import Optional, List, Union
from pydantic import BaseModel, Field, ConfigDict


# ============= PRODUCT SCHEMAS =============
class ProductRead(BaseModel):
    """Schema for reading a product"""
    id: Union[int, str]
    name: str
    description: str = ""
    price: float
    category: str
    image_url: str = ""
    tags: List[str] = Field(default_factory=list)
    is_featured: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        populate_by_name=True,  # Enable from_orm to work with ORM models
        from_attributes=True,  # This allows Pydantic to use aliases
    )


class CategoryList(BaseModel):
    categories: List[str]


# ============= CART SCHEMAS =============
class CartAddItemRequest(BaseModel):
    """Request schema for adding to cart"""
    product_id: Union[int, str]


class CartLineRead(BaseModel):
    id: Union[int, str]
    name: str
    price: float
    image_url: str
    quantity: int


class CartRead(BaseModel):
    """Schema for reading cart"""
    items: List[CartLineRead]
    cart_count: int
    subtotal: float

