from __future__ import annotations

import asyncio
import re
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from storefront.commonUtils.enumUtils import CheckoutStep
from storefront.crud.cartService import CartStore
from storefront.crud.checkOutService import CheckoutFlow, generate_order_reference

VALID_INFORMATION = {
    "first_name": "Ada",
    "last_name": "Obi",
    "email": "ada@example.com",
    "phone": "+2348012345678",
    "address_line": "12 Admiralty Way",
    "city": "Lekki",
    "state": "Lagos",
}

VALID_PAYMENT = {
    "card_holder_name": "Ada Obi",
    "card_number": "4242 4242 4242 4242",
    "expiry": "12/29",
    "cvc": "123",
}


@pytest.fixture
async def stocked_cart(cart: CartStore, black_bay: dict, oyster: dict) -> CartStore:
    await cart.add_to_cart(black_bay)
    await cart.add_to_cart(black_bay)
    await cart.add_to_cart(oyster)
    return cart


@pytest.fixture
def flow(stocked_cart: CartStore) -> CheckoutFlow:
    return CheckoutFlow(stocked_cart, processing_delay=0)


async def _reach_payment(flow: CheckoutFlow) -> None:
    flow.update_information(VALID_INFORMATION)
    assert await flow.advance()
    assert await flow.advance()
    assert flow.step == CheckoutStep.PAYMENT


async def test_missing_fields_keep_information_step(flow: CheckoutFlow, storage) -> None:
    flow.update_information({**VALID_INFORMATION, "first_name": "", "email": "   "})
    writes_before = len(storage.writes)

    advanced = await flow.advance()

    assert not advanced
    assert flow.step == CheckoutStep.INFORMATION
    assert flow.errors == {"first_name": "First name is required", "email": "Email is required"}
    assert len(storage.writes) == writes_before


async def test_blank_form_reports_every_required_field(flow: CheckoutFlow) -> None:
    await flow.advance()

    assert set(flow.errors) == {"first_name", "last_name", "email", "phone", "address_line", "city", "state"}


async def test_optional_fields_and_country(flow: CheckoutFlow) -> None:
    flow.update_information(VALID_INFORMATION)

    assert await flow.advance()
    assert flow.shipping_address.apartment is None
    assert flow.shipping_address.postal_code is None
    assert flow.shipping_address.country == "Nigeria"


async def test_correcting_a_field_clears_only_its_error(flow: CheckoutFlow) -> None:
    await flow.advance()

    flow.update_information({"first_name": "Ada"})

    assert "first_name" not in flow.errors
    assert "last_name" in flow.errors


async def test_subtotal_and_express_total(flow: CheckoutFlow) -> None:
    assert flow.totals()["subtotal"] == 16400

    flow.update_information(VALID_INFORMATION)
    await flow.advance()
    flow.select_shipping_method("express")

    totals = flow.totals()
    assert totals["shipping_cost"] == 5000
    assert totals["total"] == 21400


async def test_shipping_is_unknown_before_shipping_step(flow: CheckoutFlow) -> None:
    totals = flow.totals()

    assert totals["shipping_cost"] is None
    assert totals["total"] is None
    assert totals["shipping_display"] == "Calculated at next step"


async def test_standard_shipping_is_preselected(flow: CheckoutFlow) -> None:
    flow.update_information(VALID_INFORMATION)
    await flow.advance()

    assert flow.selected_shipping.id == "standard"
    assert flow.totals()["total"] == 16400 + 2500


async def test_unknown_shipping_method_is_rejected(flow: CheckoutFlow) -> None:
    with pytest.raises(HTTPException) as exc:
        flow.select_shipping_method("teleport")

    assert exc.value.status_code == 400
    assert flow.selected_shipping.id == "standard"


async def test_totals_follow_live_cart(flow: CheckoutFlow, stocked_cart: CartStore) -> None:
    flow.update_information(VALID_INFORMATION)
    await flow.advance()

    await stocked_cart.remove_from_cart(1)

    assert flow.totals()["subtotal"] == 7900
    assert flow.totals()["total"] == 7900 + 2500


async def test_back_navigation_only_to_earlier_steps(flow: CheckoutFlow) -> None:
    await _reach_payment(flow)

    flow.go_back(CheckoutStep.SHIPPING)
    assert flow.step == CheckoutStep.SHIPPING

    with pytest.raises(HTTPException):
        flow.go_back(CheckoutStep.PAYMENT)
    with pytest.raises(HTTPException):
        flow.go_back(CheckoutStep.SHIPPING)

    flow.go_back(CheckoutStep.INFORMATION)
    assert flow.step == CheckoutStep.INFORMATION
    assert flow.totals()["total"] is None


async def test_payment_validation_errors(flow: CheckoutFlow, stocked_cart: CartStore) -> None:
    await _reach_payment(flow)
    flow.update_payment({"card_holder_name": " ", "card_number": "4242 4242", "expiry": "1", "cvc": "12"})

    advanced = await flow.advance()

    assert not advanced
    assert flow.step == CheckoutStep.PAYMENT
    assert flow.errors == {
        "card_holder_name": "Name on card is required",
        "card_number": "Enter a valid card number",
        "expiry": "Use MM/YY format",
        "cvc": "Enter a valid CVC",
    }
    assert stocked_cart.cart_count == 3
    assert flow.order_reference is None


async def test_payment_inputs_are_normalized(flow: CheckoutFlow) -> None:
    flow.update_payment({"card_number": "4242-4242-4242-4242-9999", "expiry": "1229", "cvc": "12a34"})

    assert flow.payment.card_number == "4242424242424242"
    assert flow.payment.expiry == "12/29"
    assert flow.payment.cvc == "1234"
    assert flow.to_dict()["payment"]["card_number"] == "•••• •••• •••• 4242"


async def test_end_to_end_places_order_and_empties_cart(flow: CheckoutFlow, stocked_cart: CartStore) -> None:
    await _reach_payment(flow)
    flow.select_shipping_method("overnight")
    flow.update_payment(VALID_PAYMENT)

    assert await flow.advance()

    assert flow.step == CheckoutStep.CONFIRMATION
    assert flow.order_reference
    assert stocked_cart.cart_count == 0
    assert flow.confirmation.email == "ada@example.com"
    assert flow.confirmation.shipping_method.id == "overnight"
    assert flow.confirmation.total == 16400 + 10000
    assert len(flow.confirmation.items) == 2
    assert flow.payment.card_number == ""
    assert not flow.requires_redirect


async def test_confirmation_is_terminal(flow: CheckoutFlow) -> None:
    await _reach_payment(flow)
    flow.update_payment(VALID_PAYMENT)
    await flow.advance()

    with pytest.raises(HTTPException):
        flow.go_back(CheckoutStep.PAYMENT)
    with pytest.raises(HTTPException):
        await flow.advance()
    with pytest.raises(HTTPException):
        flow.update_information({"first_name": "Bo"})


async def test_double_submit_places_one_order(stocked_cart: CartStore) -> None:
    flow = CheckoutFlow(stocked_cart, processing_delay=0.05)
    await _reach_payment(flow)
    flow.update_payment(VALID_PAYMENT)

    clears = []
    original_clear = stocked_cart.clear_cart

    async def counting_clear() -> None:
        clears.append(1)
        await original_clear()

    stocked_cart.clear_cart = counting_clear
    references = []

    def factory() -> str:
        references.append(generate_order_reference())
        return references[-1]

    flow._reference_factory = factory

    first, second = await asyncio.gather(flow.advance(), flow.advance())

    assert (first, second) == (True, False)
    assert len(references) == 1
    assert len(clears) == 1
    assert not flow.processing


async def test_cancel_during_processing_discards_result(stocked_cart: CartStore) -> None:
    flow = CheckoutFlow(stocked_cart, processing_delay=0.05)
    await _reach_payment(flow)
    flow.update_payment(VALID_PAYMENT)

    pending = asyncio.create_task(flow.advance())
    await asyncio.sleep(0.01)
    assert flow.processing
    flow.cancel()

    assert await pending is False
    assert flow.order_reference is None
    assert stocked_cart.cart_count == 3


async def test_edits_are_blocked_while_processing(stocked_cart: CartStore) -> None:
    flow = CheckoutFlow(stocked_cart, processing_delay=0.05)
    await _reach_payment(flow)
    flow.update_payment(VALID_PAYMENT)

    pending = asyncio.create_task(flow.advance())
    await asyncio.sleep(0.01)

    with pytest.raises(HTTPException) as exc:
        flow.update_payment({"cvc": "999"})
    assert exc.value.status_code == 409

    assert await pending is True


async def test_empty_cart_redirects_out_of_checkout(cart: CartStore) -> None:
    flow = CheckoutFlow(cart, processing_delay=0)
    flow.update_information(VALID_INFORMATION)

    assert flow.requires_redirect
    with pytest.raises(HTTPException) as exc:
        await flow.advance()

    assert exc.value.status_code == 409
    assert exc.value.detail["redirect_to"] == "/cart"
    assert flow.to_dict()["redirect_to"] == "/cart"


async def test_prefill_from_profile_keeps_typed_values(flow: CheckoutFlow) -> None:
    flow.update_information({"phone": "0800"})
    user = SimpleNamespace(full_name="Ada Chioma Obi", email="ada@example.com", phone_number="+234")

    flow.prefill_from_user(user)

    assert flow.contact.first_name == "Ada"
    assert flow.contact.last_name == "Chioma Obi"
    assert flow.contact.email == "ada@example.com"
    assert flow.contact.phone == "0800"


def test_order_reference_format() -> None:
    reference = generate_order_reference(prefix="ECL", now=1_700_000_000.0)

    assert re.fullmatch(r"ECL-[0-9A-Z]+-[0-9A-Z]{4}", reference)
    assert reference.startswith("ECL-LOYW3V28-")


def test_order_references_differ() -> None:
    references = {generate_order_reference() for _ in range(50)}

    assert len(references) == 50


async def test_information_is_locked_once_passed(flow: CheckoutFlow, stocked_cart: CartStore) -> None:
    await _reach_payment(flow)

    with pytest.raises(HTTPException) as exc:
        flow.update_information({"first_name": "", "email": "", "address_line": ""})
    assert exc.value.status_code == 400

    flow.update_payment(VALID_PAYMENT)
    assert await flow.advance()
    assert flow.confirmation.email == "ada@example.com"
    assert flow.confirmation.shipping_address.address_line == "12 Admiralty Way"


async def test_information_editable_again_after_going_back(flow: CheckoutFlow) -> None:
    await _reach_payment(flow)
    flow.go_back(CheckoutStep.INFORMATION)

    flow.update_information({"first_name": ""})
    advanced = await flow.advance()

    assert not advanced
    assert flow.errors == {"first_name": "First name is required"}


async def test_cart_emptied_during_processing_redirects(stocked_cart: CartStore) -> None:
    flow = CheckoutFlow(stocked_cart, processing_delay=0.05)
    await _reach_payment(flow)
    flow.update_payment(VALID_PAYMENT)

    pending = asyncio.create_task(flow.advance())
    await asyncio.sleep(0.01)
    await stocked_cart.clear_cart()

    with pytest.raises(HTTPException) as exc:
        await pending

    assert exc.value.status_code == 409
    assert exc.value.detail["redirect_to"] == "/cart"
    assert flow.order_reference is None
    assert flow.step == CheckoutStep.PAYMENT
    assert not flow.processing
