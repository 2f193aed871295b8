import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from storefront.config.settings import settings
from storefront.crud.cartStorage import KeyValueStorage
from storefront.models.cartModel import CartLine, ProductId

logger = logging.getLogger(__name__)

_lines_adapter = TypeAdapter(List[CartLine])


def _product_field(product: Any, *names: str, default: Any = None) -> Any:
    """Read the first present attribute/key of a product-like record"""
    for name in names:
        if isinstance(product, Mapping):
            if product.get(name) is not None:
                return product[name]
        elif getattr(product, name, None) is not None:
            return getattr(product, name)
    return default


class CartStore:
    """
    Authoritative list of cart lines for one shop session.

    Every operation mutates the in-memory lines and then awaits a write of the
    whole list to storage, so a reload right after any call sees the change.
    Lines are only ever changed through these operations, one at a time: the
    write of a mutation finishes before the next mutation starts, so storage
    always ends on the latest state.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: Optional[str] = None):
        self._storage = storage
        self._storage_key = storage_key or settings.CART_STORAGE_KEY
        self._lines: List[CartLine] = []
        self._lock = asyncio.Lock()

    @classmethod
    async def load(cls, storage: KeyValueStorage, storage_key: Optional[str] = None) -> "CartStore":
        """Restore a cart from storage, falling back to empty on missing or corrupt data"""
        store = cls(storage, storage_key)
        raw = await storage.get_item(store._storage_key)

        if not raw:
            return store

        try:
            lines = _lines_adapter.validate_python(json.loads(raw))
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"⚠️ Discarding unreadable cart data under '{store._storage_key}': {e}")
            return store

        for line in lines:
            existing = store._find(line.id)
            if existing:
                existing.quantity += line.quantity
            else:
                store._lines.append(line)

        return store

    # ------------------------------------------------------------------ reads

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(line.model_copy() for line in self._lines)

    @property
    def cart_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def subtotal(self) -> float:
        return round(sum(line.line_total for line in self._lines), 2)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def _find(self, product_id: ProductId) -> Optional[CartLine]:
        return next((line for line in self._lines if line.matches(product_id)), None)

    # -------------------------------------------------------------- mutations

    async def add_to_cart(self, product: Any) -> None:
        """Add one unit of a product, merging with an existing line of the same id"""
        product_id = _product_field(product, "id", "_id")

        async with self._lock:
            existing = self._find(product_id)
            if existing:
                existing.quantity += 1
            else:
                self._lines.append(CartLine(
                    id=product_id if isinstance(product_id, int) else str(product_id),
                    name=_product_field(product, "name", "title", default=""),
                    price=_product_field(product, "price", "unit_price", default=0),
                    image_url=_product_field(product, "image_url", "imageRef", "image", default=""),
                    quantity=1,
                ))
            await self.persist()

    async def remove_from_cart(self, product_id: ProductId) -> None:
        async with self._lock:
            self._lines = [line for line in self._lines if not line.matches(product_id)]
            await self.persist()

    async def decrease_quantity(self, product_id: ProductId) -> None:
        """Take one unit off a line; a line reaching zero is removed"""
        async with self._lock:
            existing = self._find(product_id)
            if existing:
                existing.quantity -= 1
            self._lines = [line for line in self._lines if line.quantity > 0]
            await self.persist()

    async def clear_cart(self) -> None:
        async with self._lock:
            self._lines = []
            await self.persist()

    async def persist(self) -> None:
        """Write the whole line list; called by each mutation while it holds the lock"""
        payload = json.dumps([line.model_dump(mode="json") for line in self._lines])
        await self._storage.set_item(self._storage_key, payload)

    def to_dict(self) -> dict:
        return {
            "items": [line.model_dump() for line in self._lines],
            "cart_count": self.cart_count,
            "subtotal": self.subtotal,
        }
