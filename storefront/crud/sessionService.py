import asyncio
import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from storefront.config.settings import settings
from storefront.crud.cartService import CartStore
from storefront.crud.cartStorage import KeyValueStorage, MemoryStorage, MongoKeyValueStorage
from storefront.crud.checkOutService import CheckoutFlow

logger = logging.getLogger(__name__)


class ShopSession:
    """Owns the cart and the (optional) in-progress checkout for one visitor"""

    def __init__(self, session_id: str, cart: CartStore, processing_delay: Optional[float] = None):
        self.session_id = session_id
        self.cart = cart
        self.checkout: Optional[CheckoutFlow] = None
        self.last_seen = 0.0
        self._processing_delay = processing_delay

    @property
    def busy(self) -> bool:
        return self.checkout is not None and self.checkout.processing

    def begin_checkout(self) -> CheckoutFlow:
        """Start a fresh checkout attempt, dropping any previous one"""
        self.end_checkout()
        flow = CheckoutFlow(self.cart, processing_delay=self._processing_delay)
        flow.ensure_entry()
        self.checkout = flow
        return flow

    def end_checkout(self) -> None:
        if self.checkout is not None:
            self.checkout.cancel()
            self.checkout = None


def default_storage_factory(session_id: str) -> KeyValueStorage:
    if settings.CART_STORAGE_BACKEND == "memory":
        return MemoryStorage()
    return MongoKeyValueStorage(namespace=session_id)


class SessionRegistry:
    """
    Session id -> ShopSession.

    A session is created on first use by restoring its cart from storage, so
    a new registry over the same storage behaves like a page reload. Sessions
    idle for longer than ``idle_ttl`` are dropped, and the least recently used
    ones go once more than ``max_size`` are held; a dropped session's cart is
    restored from storage on its next request. Sessions with a payment being
    processed are never dropped.
    """

    def __init__(
            self,
            storage_factory: Callable[[str], KeyValueStorage] = default_storage_factory,
            processing_delay: Optional[float] = None,
            idle_ttl: Optional[float] = None,
            max_size: Optional[int] = None,
            clock: Callable[[], float] = time.monotonic,
    ):
        self._storage_factory = storage_factory
        self._processing_delay = processing_delay
        self._idle_ttl = settings.SESSION_IDLE_TTL_SECONDS if idle_ttl is None else idle_ttl
        self._max_size = settings.SESSION_REGISTRY_MAX_SIZE if max_size is None else max_size
        self._clock = clock
        # Least recently used first
        self._sessions: "OrderedDict[str, ShopSession]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get_session(self, session_id: str) -> ShopSession:
        session = self._touch(session_id)
        if session:
            self._evict(keep=session_id)
            return session

        async with self._lock:
            # Another request may have created it while we waited
            session = self._touch(session_id)
            if not session:
                cart = await CartStore.load(self._storage_factory(session_id))
                session = ShopSession(session_id, cart, processing_delay=self._processing_delay)
                session.last_seen = self._clock()
                self._sessions[session_id] = session
                logger.debug(f"Opened shop session {session_id} with {cart.cart_count} item(s)")

        self._evict(keep=session_id)
        return session

    def _touch(self, session_id: str) -> Optional[ShopSession]:
        session = self._sessions.get(session_id)
        if session:
            session.last_seen = self._clock()
            self._sessions.move_to_end(session_id)
        return session

    def _evict(self, keep: str) -> None:
        now = self._clock()
        overflow = len(self._sessions) - self._max_size

        for session_id, session in list(self._sessions.items()):
            idle = now - session.last_seen > self._idle_ttl
            if not idle and overflow <= 0:
                break
            if session.busy or session_id == keep:
                continue
            self.discard(session_id)
            overflow -= 1

    def discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session:
            session.end_checkout()
            logger.debug(f"Released shop session {session_id}")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


session_registry = SessionRegistry()
