from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional

from storefront.schemas.productSchema import ProductRead, CategoryList
from storefront.crud.productService import ProductService, get_product_service

router = APIRouter()


# ============= PUBLIC ROUTES =============
@router.get("/products", response_model=List[ProductRead])
async def list_products(
        category: Optional[str] = None,
        limit: int = Query(20, ge=1, le=100),
        service: ProductService = Depends(get_product_service),
):
    """List products, optionally filtered by category"""
    return await service.list_products(category=category, limit=limit)


@router.get("/products/categories", response_model=CategoryList)
async def list_categories(service: ProductService = Depends(get_product_service)):
    return {"categories": await service.list_categories()}


@router.get("/products/{product_id}", response_model=ProductRead)
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    """Get a single product"""
    product = await service.get_product(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    return product


@router.get("/products/{product_id}/related", response_model=List[ProductRead])
async def list_related_products(
        product_id: str,
        limit: int = Query(4, ge=1, le=20),
        service: ProductService = Depends(get_product_service),
):
    """Products from the same category, excluding this one"""
    product = await service.get_product(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    return await service.list_related(product_id, category=product["category"], limit=limit)
