"""
DocStore API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped):
    ├── mock_firestore_client: MagicMock standing in for the async Firestore client
    ├── firestore_service: FirestoreService bound to the mock client
    ├── make_snapshot: Factory for fake DocumentSnapshot objects
    └── test_client: HTTPX AsyncClient against the app, service dependency overridden

No fixture talks to Firebase; the app lifespan does not run under ASGITransport.
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["FIREBASE_SERVICE_ACCOUNT_PATH"] = "/nonexistent/firebase-service-account.json"
os.environ["FIREBASE_SERVICE_ACCOUNT_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.services.firestore_service import FirestoreService, get_firestore_service


@pytest.fixture
def make_snapshot():
    """
    Factory for fake Firestore DocumentSnapshot objects.

    Usage:
        snap = make_snapshot("abc", {"name": "Ada"})
        missing = make_snapshot("nope", None, exists=False)
    """

    def _make(doc_id, data, exists=True):
        snapshot = MagicMock()
        snapshot.id = doc_id
        snapshot.exists = exists
        snapshot.to_dict.return_value = data if exists else None
        return snapshot

    return _make


@pytest.fixture
def mock_firestore_client():
    """
    Mock async Firestore client.

    collection(...) and document(...) always return the same child mocks, so a
    test can configure e.g. `client.collection.return_value.get` once and
    assert on it afterwards. Every awaited SDK method is an AsyncMock.
    """
    client = MagicMock()
    collection = client.collection.return_value
    collection.get = AsyncMock(return_value=[])
    collection.add = AsyncMock()
    collection.where.return_value.get = AsyncMock(return_value=[])
    collection.limit.return_value.get = AsyncMock(return_value=[])

    document = collection.document.return_value
    document.get = AsyncMock()
    document.update = AsyncMock()
    document.delete = AsyncMock()
    return client


@pytest.fixture
def firestore_service(mock_firestore_client):
    return FirestoreService(client=mock_firestore_client)


@pytest_asyncio.fixture
async def test_client(firestore_service):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    The FirestoreService dependency is replaced with the mock-backed
    `firestore_service` fixture for the duration of the test.
    """
    from app.main import app

    app.dependency_overrides[get_firestore_service] = lambda: firestore_service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
