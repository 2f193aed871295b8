"""Shared fixtures: in-memory storage doubles and an API client with no database."""
from __future__ import annotations

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.crud.cartService import CartStore
from storefront.crud.cartStorage import MemoryStorage
from storefront.crud.productService import ProductService, get_product_service
from storefront.crud.sessionService import SessionRegistry
from storefront.crud.userService import optional_current_user
from storefront.dependencies.sessionDependencies import get_session_registry


class RecordingStorage(MemoryStorage):
    """MemoryStorage that remembers every write, in order"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__(initial)
        self.writes: List[tuple[str, str]] = []

    async def set_item(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        await super().set_item(key, value)


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
async def cart(storage: RecordingStorage) -> CartStore:
    return await CartStore.load(storage)


@pytest.fixture
def black_bay() -> dict:
    return {"id": 6, "name": "Black Bay 58", "price": 3950, "image_url": "bb58.jpg", "category": "Diver"}


@pytest.fixture
def oyster() -> dict:
    return {"id": 1, "name": "Oyster Perpetual", "price": 8500, "image_url": "oyster.jpg", "category": "Luxury"}


@pytest.fixture
def session_storages() -> Dict[str, RecordingStorage]:
    """Storage per session id, shared across registries to simulate reloads"""
    return {}


@pytest.fixture
def registry(session_storages: Dict[str, RecordingStorage]) -> SessionRegistry:
    return SessionRegistry(
        storage_factory=lambda session_id: session_storages.setdefault(session_id, RecordingStorage()),
        processing_delay=0,
    )


@pytest.fixture
def client(registry: SessionRegistry):
    from storefront.main import app

    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_product_service] = lambda: ProductService(fallback_only=True)
    app.dependency_overrides[optional_current_user] = lambda: None

    # No context manager: the lifespan (MongoDB, Redis) is not started
    yield TestClient(app)

    app.dependency_overrides.clear()
