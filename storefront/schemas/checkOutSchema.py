from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Union
from datetime import datetime

from storefront.commonUtils.enumUtils import CheckoutStep, ShippingMethodId


class InformationUpdate(BaseModel):
    """Partial update of the information step; omitted fields are left alone"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address_line: Optional[str] = None
    apartment: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Ada",
                "last_name": "Obi",
                "email": "ada@example.com",
                "phone": "+2348012345678",
                "address_line": "12 Admiralty Way",
                "city": "Lekki",
                "state": "Lagos",
            }
        }


class PaymentUpdate(BaseModel):
    card_holder_name: Optional[str] = None
    card_number: Optional[str] = None
    expiry: Optional[str] = None
    cvc: Optional[str] = None


class ShippingMethodRequest(BaseModel):
    shipping_method_id: ShippingMethodId


class BackRequest(BaseModel):
    step: CheckoutStep


class StepRead(BaseModel):
    id: CheckoutStep
    label: str
    num: int


class ShippingOptionRead(BaseModel):
    id: ShippingMethodId
    label: str
    price: int
    eta: str


class ContactRead(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str


class ShippingAddressRead(BaseModel):
    address_line: str
    apartment: Optional[str] = None
    city: str
    state: str
    postal_code: Optional[str] = None
    country: str


class PaymentRead(BaseModel):
    """Card details as echoed back: number masked, no CVC"""
    card_holder_name: str
    card_number: str
    expiry: str


class CheckoutLineRead(BaseModel):
    id: Union[int, str]
    name: str
    price: float
    image_url: str
    quantity: int


class TotalsRead(BaseModel):
    subtotal: float
    shipping_cost: Optional[int] = None
    shipping_display: Optional[str] = None
    total: Optional[float] = None


class ConfirmationRead(BaseModel):
    order_reference: str
    email: str
    full_name: str
    shipping_method: ShippingOptionRead
    shipping_address: ShippingAddressRead
    items: List[CheckoutLineRead]
    subtotal: float
    shipping_cost: int
    total: float
    placed_at: datetime


class CheckoutRead(BaseModel):
    """Everything the checkout page renders"""
    step: CheckoutStep
    steps: List[StepRead]
    current_step_index: int
    processing: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    contact: ContactRead
    shipping_address: ShippingAddressRead
    shipping_method: ShippingOptionRead
    shipping_options: List[ShippingOptionRead]
    payment: PaymentRead
    items: List[CheckoutLineRead]
    totals: TotalsRead
    confirmation: Optional[ConfirmationRead] = None
    redirect_to: Optional[str] = None
