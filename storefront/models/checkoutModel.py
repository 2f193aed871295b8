from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel, Field

from storefront.commonUtils.enumUtils import ShippingMethodId
from storefront.config.settings import settings
from storefront.models.cartModel import CartLine


class ContactInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name.strip()} {self.last_name.strip()}".strip()


class ShippingAddress(BaseModel):
    address_line: str = ""
    apartment: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: Optional[str] = None
    country: str = Field(default_factory=lambda: settings.DEFAULT_COUNTRY)


class PaymentDetails(BaseModel):
    """Held in memory for one checkout attempt, wiped once the order is placed"""
    card_holder_name: str = ""
    card_number: str = ""  # digits only
    expiry: str = ""  # MM/YY
    cvc: str = ""


class ShippingOption(BaseModel):
    id: ShippingMethodId
    label: str
    price: int = Field(..., gt=0)
    eta: str


SHIPPING_OPTIONS: List[ShippingOption] = [
    ShippingOption(id=ShippingMethodId.STANDARD, label="Standard Shipping", price=2500, eta="5–7 business days"),
    ShippingOption(id=ShippingMethodId.EXPRESS, label="Express Shipping", price=5000, eta="2–3 business days"),
    ShippingOption(id=ShippingMethodId.OVERNIGHT, label="Overnight Shipping", price=10000, eta="Next business day"),
]

SHIPPING_OPTIONS_BY_ID: Dict[ShippingMethodId, ShippingOption] = {option.id: option for option in SHIPPING_OPTIONS}

DEFAULT_SHIPPING_METHOD = ShippingMethodId.STANDARD


class OrderConfirmation(BaseModel):
    """Snapshot shown on the confirmation step"""
    order_reference: str
    email: str
    full_name: str
    shipping_method: ShippingOption
    shipping_address: ShippingAddress
    items: List[CartLine]
    subtotal: float
    shipping_cost: int
    total: float
    placed_at: datetime = Field(default_factory=datetime.utcnow)
