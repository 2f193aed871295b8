import asyncio
import logging
import re
import secrets
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from fastapi import HTTPException, status

from storefront.commonUtils.enumUtils import CheckoutStep, ShippingMethodId
from storefront.commonUtils.formatUtils import (
    format_amount,
    format_expiry,
    mask_card_number,
    normalize_card_number,
    normalize_cvc,
    to_base36,
    BASE36_ALPHABET,
    CARD_NUMBER_MAX_DIGITS,
)
from storefront.config.settings import settings
from storefront.crud.cartService import CartStore
from storefront.models.checkoutModel import (
    ContactInfo,
    ShippingAddress,
    PaymentDetails,
    ShippingOption,
    OrderConfirmation,
    SHIPPING_OPTIONS,
    SHIPPING_OPTIONS_BY_ID,
    DEFAULT_SHIPPING_METHOD,
)

logger = logging.getLogger(__name__)

CART_REDIRECT_PATH = "/cart"
SHIPPING_PENDING_TEXT = "Calculated at next step"

CONTACT_FIELDS = ("first_name", "last_name", "email", "phone")
ADDRESS_FIELDS = ("address_line", "apartment", "city", "state", "postal_code")

# Required information fields, in display order
INFORMATION_REQUIRED = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "email": "Email is required",
    "phone": "Phone number is required",
    "address_line": "Address is required",
    "city": "City is required",
    "state": "State is required",
}

STEP_LABELS = [
    (CheckoutStep.INFORMATION, "Information"),
    (CheckoutStep.SHIPPING, "Shipping"),
    (CheckoutStep.PAYMENT, "Payment"),
]

_EXPIRY_PATTERN = re.compile(r"^\d{2}/\d{2}$")


def generate_order_reference(prefix: Optional[str] = None, now: Optional[float] = None) -> str:
    """
    Build a human-shareable order reference: PREFIX-<base36 epoch ms>-<4 random chars>.

    Uniqueness is best-effort: two references minted in the same millisecond
    only differ by the random suffix.
    """
    prefix = prefix or settings.ORDER_REFERENCE_PREFIX
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(4))
    return f"{prefix}-{to_base36(millis)}-{suffix}".upper()


def validate_information(contact: ContactInfo, address: ShippingAddress) -> Dict[str, str]:
    values = {**contact.model_dump(), **address.model_dump()}
    return {
        field: message
        for field, message in INFORMATION_REQUIRED.items()
        if not (values.get(field) or "").strip()
    }


def validate_payment(payment: PaymentDetails) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not payment.card_holder_name.strip():
        errors["card_holder_name"] = "Name on card is required"
    if len(re.sub(r"\D", "", payment.card_number)) < CARD_NUMBER_MAX_DIGITS:
        errors["card_number"] = "Enter a valid card number"
    if not _EXPIRY_PATTERN.match(payment.expiry):
        errors["expiry"] = "Use MM/YY format"
    if len(re.sub(r"\D", "", payment.cvc)) < 3:
        errors["cvc"] = "Enter a valid CVC"
    return errors


class CheckoutFlow:
    """
    One checkout attempt: information -> shipping -> payment -> confirmation.

    Totals are always derived from the live cart. The payment step waits a
    fixed delay standing in for authorization; while that is pending further
    submits are ignored, and cancel() drops the pending result.
    """

    def __init__(
            self,
            cart: CartStore,
            processing_delay: Optional[float] = None,
            reference_factory: Callable[[], str] = generate_order_reference,
    ):
        self.cart = cart
        self.processing_delay = (
            settings.CHECKOUT_PROCESSING_DELAY_SECONDS if processing_delay is None else processing_delay
        )
        self._reference_factory = reference_factory

        self.step = CheckoutStep.INFORMATION
        self.contact = ContactInfo()
        self.shipping_address = ShippingAddress()
        self.shipping_method_id: ShippingMethodId = DEFAULT_SHIPPING_METHOD
        self.payment = PaymentDetails()
        self.errors: Dict[str, str] = {}
        self.processing = False
        self.cancelled = False
        self.confirmation: Optional[OrderConfirmation] = None
        self._attempt = 0

    # ------------------------------------------------------------------ state

    @property
    def order_reference(self) -> Optional[str]:
        return self.confirmation.order_reference if self.confirmation else None

    @property
    def requires_redirect(self) -> bool:
        """Empty cart outside confirmation means checkout cannot be shown"""
        return self.cart.is_empty and self.step != CheckoutStep.CONFIRMATION

    @property
    def selected_shipping(self) -> ShippingOption:
        return SHIPPING_OPTIONS_BY_ID[self.shipping_method_id]

    def ensure_entry(self) -> None:
        if self.requires_redirect:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"message": "Your cart is empty", "redirect_to": CART_REDIRECT_PATH},
            )

    def _ensure_editable(self) -> None:
        if self.step == CheckoutStep.CONFIRMATION:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Checkout is already complete"
            )
        if self.processing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Payment is being processed"
            )

    def prefill_from_user(self, user: Any) -> None:
        """Seed contact details from an account profile, keeping anything already typed"""
        if user is None:
            return
        parts = (getattr(user, "full_name", None) or "").split(" ")
        prefilled = {
            "first_name": parts[0],
            "last_name": " ".join(parts[1:]),
            "email": getattr(user, "email", None) or "",
            "phone": getattr(user, "phone_number", None) or "",
        }
        for field, value in prefilled.items():
            if not getattr(self.contact, field):
                setattr(self.contact, field, value)

    # ------------------------------------------------------------------ edits

    def update_information(self, updates: Mapping[str, Any]) -> None:
        """Contact and address edits; only on the information step, go back first otherwise"""
        self._ensure_editable()
        if self.step != CheckoutStep.INFORMATION:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Contact and address can only be changed on the information step"
            )

        for field, value in updates.items():
            if field in CONTACT_FIELDS:
                setattr(self.contact, field, value or "")
            elif field in ADDRESS_FIELDS:
                setattr(self.shipping_address, field, value)
            else:
                continue
            self.errors.pop(field, None)

    def update_payment(self, updates: Mapping[str, Any]) -> None:
        self._ensure_editable()

        normalizers = {
            "card_holder_name": lambda v: v or "",
            "card_number": normalize_card_number,
            "expiry": format_expiry,
            "cvc": normalize_cvc,
        }
        for field, value in updates.items():
            if field not in normalizers:
                continue
            setattr(self.payment, field, normalizers[field](value))
            self.errors.pop(field, None)

    def select_shipping_method(self, method_id: str) -> ShippingOption:
        self._ensure_editable()

        try:
            method = ShippingMethodId(method_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown shipping method '{method_id}'"
            )

        self.shipping_method_id = method
        return self.selected_shipping

    # ------------------------------------------------------------ transitions

    def go_back(self, target: CheckoutStep) -> None:
        """Explicit navigation to a strictly earlier step"""
        self._ensure_editable()
        target = CheckoutStep(target)

        if target.position >= self.step.position:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot go back from '{self.step.value}' to '{target.value}'"
            )

        self.step = target
        self.errors = {}

    async def advance(self) -> bool:
        """
        Attempt the transition out of the current step.

        Returns True when the step changed. Validation failures leave the step
        as it was with errors populated; a submit while payment is processing
        is ignored.
        """
        if self.processing:
            return False

        if self.step == CheckoutStep.CONFIRMATION:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Checkout is already complete"
            )

        self.ensure_entry()

        if self.step == CheckoutStep.INFORMATION:
            self.errors = validate_information(self.contact, self.shipping_address)
            if self.errors:
                return False
            self.step = CheckoutStep.SHIPPING
            return True

        if self.step == CheckoutStep.SHIPPING:
            # A default method is always selected, nothing can fail here
            self.step = CheckoutStep.PAYMENT
            self.errors = {}
            return True

        return await self._place_order()

    async def _place_order(self) -> bool:
        self.errors = validate_payment(self.payment)
        if self.errors:
            return False

        self.processing = True
        self._attempt += 1
        attempt = self._attempt

        try:
            await asyncio.sleep(self.processing_delay)

            if self.cancelled or attempt != self._attempt:
                logger.info("Discarding payment result for an abandoned checkout")
                return False

            # The cart may have been emptied while the payment was pending
            self.ensure_entry()

            shipping = self.selected_shipping
            subtotal = self.cart.subtotal
            confirmation = OrderConfirmation(
                order_reference=self._reference_factory(),
                email=self.contact.email.strip(),
                full_name=self.contact.full_name,
                shipping_method=shipping,
                shipping_address=self.shipping_address.model_copy(),
                items=list(self.cart.lines),
                subtotal=subtotal,
                shipping_cost=shipping.price,
                total=round(subtotal + shipping.price, 2),
            )

            await self.cart.clear_cart()

            self.confirmation = confirmation
            self.payment = PaymentDetails()
            self.step = CheckoutStep.CONFIRMATION
            logger.info(f"✅ Order {confirmation.order_reference} placed, total {confirmation.total}")
            return True
        finally:
            if attempt == self._attempt:
                self.processing = False

    def cancel(self) -> None:
        """Leave checkout; a pending payment result is dropped, the cart is untouched"""
        self.cancelled = True
        self._attempt += 1
        self.processing = False
        self.payment = PaymentDetails()

    # ------------------------------------------------------------------ views

    def totals(self) -> Dict[str, Any]:
        if self.confirmation:
            return {
                "subtotal": self.confirmation.subtotal,
                "shipping_cost": self.confirmation.shipping_cost,
                "shipping_display": format_amount(self.confirmation.shipping_cost),
                "total": self.confirmation.total,
            }

        subtotal = self.cart.subtotal
        if self.step == CheckoutStep.INFORMATION:
            return {
                "subtotal": subtotal,
                "shipping_cost": None,
                "shipping_display": SHIPPING_PENDING_TEXT,
                "total": None,
            }

        shipping_cost = self.selected_shipping.price
        return {
            "subtotal": subtotal,
            "shipping_cost": shipping_cost,
            "shipping_display": format_amount(shipping_cost),
            "total": round(subtotal + shipping_cost, 2),
        }

    def steps(self) -> List[Dict[str, Any]]:
        return [
            {"id": step.value, "label": label, "num": index + 1}
            for index, (step, label) in enumerate(STEP_LABELS)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step.value,
            "steps": self.steps(),
            "current_step_index": self.step.position,
            "processing": self.processing,
            "errors": dict(self.errors),
            "contact": self.contact.model_dump(),
            "shipping_address": self.shipping_address.model_dump(),
            "shipping_method": self.selected_shipping.model_dump(),
            "shipping_options": [option.model_dump() for option in SHIPPING_OPTIONS],
            "payment": {
                "card_holder_name": self.payment.card_holder_name,
                "card_number": mask_card_number(self.payment.card_number),
                "expiry": self.payment.expiry,
            },
            "items": [line.model_dump() for line in self.cart.lines],
            "totals": self.totals(),
            "confirmation": self.confirmation.model_dump() if self.confirmation else None,
            "redirect_to": CART_REDIRECT_PATH if self.requires_redirect else None,
        }
