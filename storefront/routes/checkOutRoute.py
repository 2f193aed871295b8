from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import Optional

from storefront.models.userModel import User
from storefront.schemas.checkOutSchema import (
    CheckoutRead,
    InformationUpdate,
    PaymentUpdate,
    ShippingMethodRequest,
    BackRequest,
)
from storefront.crud.userService import optional_current_user
from storefront.crud.checkOutService import CheckoutFlow
from storefront.crud.sessionService import ShopSession
from storefront.dependencies.sessionDependencies import get_shop_session

router = APIRouter()


def get_checkout(session: ShopSession = Depends(get_shop_session)) -> CheckoutFlow:
    if session.checkout is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No checkout in progress"
        )
    return session.checkout


@router.post("/checkout", response_model=CheckoutRead, status_code=status.HTTP_201_CREATED, tags=["checkout"])
async def begin_checkout(
        session: ShopSession = Depends(get_shop_session),
        user: Optional[User] = Depends(optional_current_user),
):
    """Start checkout for the current cart. Refused when the cart is empty."""
    flow = session.begin_checkout()
    flow.prefill_from_user(user)
    return flow.to_dict()


@router.get("/checkout", response_model=CheckoutRead, tags=["checkout"])
async def get_checkout_state(flow: CheckoutFlow = Depends(get_checkout)):
    """Current step, errors and totals, recomputed from the live cart"""
    flow.ensure_entry()
    return flow.to_dict()


@router.patch("/checkout/information", response_model=CheckoutRead, tags=["checkout"])
async def update_information(update: InformationUpdate, flow: CheckoutFlow = Depends(get_checkout)):
    flow.update_information(update.model_dump(exclude_unset=True))
    return flow.to_dict()


@router.put("/checkout/shipping-method", response_model=CheckoutRead, tags=["checkout"])
async def select_shipping_method(request: ShippingMethodRequest, flow: CheckoutFlow = Depends(get_checkout)):
    flow.select_shipping_method(request.shipping_method_id)
    return flow.to_dict()


@router.patch("/checkout/payment", response_model=CheckoutRead, tags=["checkout"])
async def update_payment(update: PaymentUpdate, flow: CheckoutFlow = Depends(get_checkout)):
    flow.update_payment(update.model_dump(exclude_unset=True))
    return flow.to_dict()


@router.post("/checkout/continue", response_model=CheckoutRead, tags=["checkout"])
async def continue_checkout(response: Response, flow: CheckoutFlow = Depends(get_checkout)):
    """
    Move to the next step.

    422 with the per-field errors when validation fails (the step is unchanged),
    202 when a payment for this checkout is already being processed.
    """
    advanced = await flow.advance()

    if not advanced:
        if flow.cancelled:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Checkout was cancelled"
            )
        response.status_code = (
            status.HTTP_202_ACCEPTED if flow.processing else status.HTTP_422_UNPROCESSABLE_ENTITY
        )

    return flow.to_dict()


@router.post("/checkout/back", response_model=CheckoutRead, tags=["checkout"])
async def go_back(request: BackRequest, flow: CheckoutFlow = Depends(get_checkout)):
    flow.go_back(request.step)
    return flow.to_dict()


@router.delete("/checkout", status_code=status.HTTP_204_NO_CONTENT, tags=["checkout"])
async def leave_checkout(session: ShopSession = Depends(get_shop_session)):
    """Leave checkout (or dismiss the confirmation). The cart is not touched."""
    session.end_checkout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
