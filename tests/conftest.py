"""
Pytest configuration and shared fixtures for the outfit generator tests.
"""
import os
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))


# ============================================================================
# Fakes: Product Stores
# ============================================================================

class FakeCatalogSession:
    def __init__(self, catalog: "FakeCatalog"):
        self._catalog = catalog

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        self._catalog.lookups.append(product_id)
        if self._catalog.fail_on_query:
            from services.errors import DataAccessError
            raise DataAccessError("catalog query failed")
        record = self._catalog.records.get(product_id)
        return dict(record) if record else None

    def sample_titled(self, count: int) -> List[Dict[str, Any]]:
        self._catalog.sample_requests.append(count)
        if self._catalog.fail_on_query:
            from services.errors import DataAccessError
            raise DataAccessError("catalog query failed")
        titled = [dict(r) for r in self._catalog.sample_pool if r.get("title")]
        return titled[:count]


class FakeCatalog:
    """In-memory stand-in for PublicCatalog that records every access."""

    def __init__(self, records=None, sample_pool=None):
        self.records: Dict[str, Dict[str, Any]] = {r["product_id"]: r for r in (records or [])}
        self.sample_pool: List[Dict[str, Any]] = list(sample_pool or [])
        self.table = "product_look_dim"
        self.fail_on_connect = False
        self.fail_on_query = False
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.lookups: List[str] = []
        self.sample_requests: List[int] = []

    @contextmanager
    def session(self) -> Iterator[FakeCatalogSession]:
        if self.fail_on_connect:
            from services.errors import DataAccessError
            raise DataAccessError("could not connect to catalog")
        self.sessions_opened += 1
        try:
            yield FakeCatalogSession(self)
        finally:
            self.sessions_closed += 1


class FakePrivateStore:
    """In-memory stand-in for PrivateProductStore."""

    def __init__(self, records=None):
        self.records: Dict[str, Dict[str, Any]] = {r["product_id"]: r for r in (records or [])}
        self.lookups: List[str] = []

    def get_owned_product(self, product_id: str, owner_id: str) -> Optional[Dict[str, Any]]:
        self.lookups.append(product_id)
        record = self.records.get(product_id)
        if record is None or record.get("user_id") != owner_id:
            return None
        return dict(record)


def catalog_record(product_id: str, title: Optional[str] = None, category: str = "t-shirt", **extra) -> Dict[str, Any]:
    record = {
        "product_id": product_id,
        "title": title if title is not None else f"Product {product_id}",
        "category": category,
        "price": 19.99,
        "color": "black",
        "brand": "TestBrand",
    }
    record.update(extra)
    return record


# ============================================================================
# Fixtures: Test Data
# ============================================================================

@pytest.fixture
def public_records() -> List[Dict[str, Any]]:
    return [
        catalog_record("p1", "White Cotton Tee", "t-shirt"),
        catalog_record("p2", "Slim Jeans", "jeans"),
        catalog_record("p3", "Leather Boots", "boots"),
        catalog_record("shared", "Public Version", "jacket"),
    ]


@pytest.fixture
def sample_pool() -> List[Dict[str, Any]]:
    return [
        catalog_record(f"s{i}", f"Sampled {i}", category)
        for i, category in enumerate(
            ["hat", "belt", "watch", "scarf", "sunglasses", "ring", "earrings",
             "socks", "coat", "bra", "briefs", "tights", "sneakers", "skirt",
             "blouse", "necklace"]
        )
    ]


@pytest.fixture
def private_records() -> List[Dict[str, Any]]:
    return [
        {"product_id": "p1", "title": "My Own Tee", "category": "t-shirt", "user_id": "u1"},
        {"product_id": "mine", "title": "Vintage Blazer", "category": "blazer", "user_id": "u1"},
        {"product_id": "shared", "title": "Someone Else's Jacket", "category": "jacket", "user_id": "u2"},
    ]


@pytest.fixture
def fake_catalog(public_records, sample_pool) -> FakeCatalog:
    return FakeCatalog(public_records, sample_pool)


@pytest.fixture
def fake_private_store(private_records) -> FakePrivateStore:
    return FakePrivateStore(private_records)


@pytest.fixture
def resolver(fake_catalog, fake_private_store):
    from services.product_resolver import ProductResolver
    return ProductResolver(fake_catalog, fake_private_store)


@pytest.fixture
def sampler(fake_catalog):
    from services.complementary_sampler import ComplementarySampler
    return ComplementarySampler(fake_catalog)


@pytest.fixture
def assembler(resolver, sampler):
    from services.outfit_assembler import OutfitAssembler
    return OutfitAssembler(resolver, sampler)


# ============================================================================
# Fixtures: Mock Clients
# ============================================================================

@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()
    query = mock_client.table.return_value.select.return_value.eq.return_value.limit.return_value
    query.execute.return_value.data = []
    return mock_client


@pytest.fixture
def mock_pg_connection():
    """Mock psycopg2 connection whose cursor returns no rows by default."""
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchall.return_value = []
    return conn


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app(assembler):
    """FastAPI application wired to the in-memory stores."""
    from api.app import create_app
    from services.outfit_assembler import get_outfit_assembler

    application = create_app()
    application.dependency_overrides[get_outfit_assembler] = lambda: assembler
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "api: marks tests that exercise the HTTP boundary")
