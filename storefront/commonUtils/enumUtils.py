from enum import Enum


class CheckoutStep(str, Enum):
    # Linear order matters: earlier members come first in the flow
    INFORMATION = "information"  # Contact + shipping address (initial)
    SHIPPING = "shipping"  # Shipping method selection
    PAYMENT = "payment"  # Card details, then simulated processing
    CONFIRMATION = "confirmation"  # Terminal, holds the order reference

    @property
    def position(self) -> int:
        return list(CheckoutStep).index(self)


class ShippingMethodId(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    OVERNIGHT = "overnight"


class AuthEvent(str, Enum):
    SIGNED_UP = "SIGNED_UP"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"
