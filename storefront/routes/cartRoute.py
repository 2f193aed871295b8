from fastapi import APIRouter, Depends, HTTPException, status

from storefront.schemas.productSchema import CartRead, CartAddItemRequest
from storefront.crud.sessionService import ShopSession
from storefront.crud.productService import ProductService, get_product_service
from storefront.dependencies.sessionDependencies import get_shop_session

router = APIRouter()


# ============= CART ROUTES =============
@router.get("/cart", response_model=CartRead, tags=["cart"])
async def get_cart(session: ShopSession = Depends(get_shop_session)):
    """Get the visitor's cart"""
    return session.cart.to_dict()


@router.post("/cart/items", response_model=CartRead, tags=["cart"])
async def add_to_cart(
        item: CartAddItemRequest,
        session: ShopSession = Depends(get_shop_session),
        products: ProductService = Depends(get_product_service),
):
    """Add one unit of a product to the cart"""
    product = await products.get_product(item.product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    await session.cart.add_to_cart(product)
    return session.cart.to_dict()


@router.post("/cart/items/{product_id}/decrease", response_model=CartRead, tags=["cart"])
async def decrease_cart_item(product_id: str, session: ShopSession = Depends(get_shop_session)):
    """Take one unit off an item; the item disappears at zero"""
    await session.cart.decrease_quantity(product_id)
    return session.cart.to_dict()


@router.delete("/cart/items/{product_id}", response_model=CartRead, tags=["cart"])
async def remove_from_cart(product_id: str, session: ShopSession = Depends(get_shop_session)):
    """Remove item from cart"""
    await session.cart.remove_from_cart(product_id)
    return session.cart.to_dict()


@router.delete("/cart", response_model=CartRead, tags=["cart"])
async def clear_cart(session: ShopSession = Depends(get_shop_session)):
    """Clear entire cart"""
    await session.cart.clear_cart()
    return session.cart.to_dict()
