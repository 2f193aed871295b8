from typing import Union
from pydantic import BaseModel, Field


ProductId = Union[int, str]


class CartLine(BaseModel):
    """One distinct product held in the cart"""
    id: ProductId
    name: str
    price: float = Field(..., ge=0)
    image_url: str = ""
    quantity: int = Field(..., gt=0)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def matches(self, product_id: ProductId) -> bool:
        # Path parameters arrive as strings, stored ids may be ints
        return str(self.id) == str(product_id)
