import logging
from typing import List, Optional, Union

from beanie import PydanticObjectId

from storefront.commonUtils.fallbackCatalog import FALLBACK_PRODUCTS
from storefront.config.settings import settings
from storefront.models.productModel import Product

logger = logging.getLogger(__name__)


def _serialize(product: Product) -> dict:
    product_dict = product.model_dump()
    product_dict["id"] = str(product.id)
    return product_dict


def _fallback(category: Optional[str] = None, exclude_id: Optional[Union[int, str]] = None) -> List[dict]:
    return [
        dict(product) for product in FALLBACK_PRODUCTS
        if (not category or product["category"] == category)
        and (exclude_id is None or str(product["id"]) != str(exclude_id))
    ]


class ProductService:
    """
    Read-only product catalog.

    Database failures never surface to the shopper: listings and lookups fall
    back to the bundled product set so browsing keeps working.
    """

    def __init__(self, fallback_only: bool = False):
        self.fallback_only = fallback_only

    async def _find(self, query: dict, limit: Optional[int]) -> List[dict]:
        if self.fallback_only:
            return []

        cursor = Product.find(query).sort(("created_at", -1))
        if limit:
            cursor = cursor.limit(limit)
        products = await cursor.to_list()
        return [_serialize(product) for product in products]

    async def list_products(self, category: Optional[str] = None, limit: Optional[int] = None) -> List[dict]:
        """List products, newest first, optionally filtered by category"""
        limit = settings.PRODUCT_LIST_LIMIT if limit is None else limit
        query = {"category": category} if category else {}

        try:
            products = await self._find(query, limit)
        except Exception as e:
            logger.warning(f"⚠️ Catalog query failed, serving bundled products: {str(e)}")
            products = []

        if not products:
            products = _fallback(category)[:limit] if limit else _fallback(category)
        return products

    async def get_product(self, product_id: Union[int, str]) -> Optional[dict]:
        if not self.fallback_only and PydanticObjectId.is_valid(str(product_id)):
            try:
                product = await Product.get(PydanticObjectId(str(product_id)))
                if product:
                    return _serialize(product)
            except Exception as e:
                logger.warning(f"⚠️ Product lookup for {product_id} failed: {str(e)}")

        return next(
            (dict(product) for product in FALLBACK_PRODUCTS if str(product["id"]) == str(product_id)),
            None
        )

    async def list_related(
            self,
            product_id: Union[int, str],
            category: Optional[str] = None,
            limit: Optional[int] = None
    ) -> List[dict]:
        """Products from the same category, excluding the one being viewed"""
        limit = settings.RELATED_PRODUCTS_LIMIT if limit is None else limit

        if category is None:
            product = await self.get_product(product_id)
            if not product:
                return []
            category = product["category"]

        related: List[dict] = []
        if not self.fallback_only:
            try:
                related = await self._find({"category": category}, limit + 1)
            except Exception as e:
                logger.warning(f"⚠️ Related products query failed: {str(e)}")

        related = [product for product in related if str(product["id"]) != str(product_id)]
        if not related:
            related = _fallback(category, exclude_id=product_id)
        return related[:limit]

    async def list_categories(self) -> List[str]:
        categories: List[str] = []
        if not self.fallback_only:
            try:
                categories = await Product.distinct("category")
            except Exception as e:
                logger.warning(f"⚠️ Category query failed: {str(e)}")

        if not categories:
            categories = [product["category"] for product in FALLBACK_PRODUCTS]
        return sorted(set(categories))


product_service = ProductService()


def get_product_service() -> ProductService:
    return product_service
