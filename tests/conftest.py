"""
Inkwell Backend - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the test suite.
How:   MongoDB is never contacted. Services receive a MagicMock standing in for
       the Motor collection; async methods are AsyncMocks and find()/aggregate()
       return fake cursors. Route tests override the `get_blog_collection`
       dependency with the same mock.

Fixtures:
    ├── make_cursor:      factory for fake Motor cursors
    ├── mock_collection:  mock blog collection, empty by default
    ├── sample_blog_doc:  a stored blog document as MongoDB returns it
    └── test_client:      HTTPX AsyncClient bound to the FastAPI app
"""

import os

# Must be set before inkwell.config is imported anywhere
os.environ["DB_URL"] = "mongodb://localhost:27017"
os.environ["DB_NAME"] = "BlogDB_test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient


def _cursor(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def make_cursor():
    """
    Factory for fake Motor cursors.

    Usage:
        mock_collection.find.return_value = make_cursor([doc1, doc2])
    """
    return _cursor


@pytest.fixture
def mock_collection():
    """A Motor collection double. Every query finds nothing until configured."""
    collection = MagicMock()
    collection.find = MagicMock(return_value=_cursor([]))
    collection.aggregate = MagicMock(return_value=_cursor([]))
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def sample_blog_doc():
    return {
        "_id": ObjectId("65f1a2b3c4d5e6f708192a3b"),
        "id": "blog-001",
        "title": "Getting Started with FastAPI",
        "blog": {
            "time": 1710000000000,
            "version": "2.29.0",
            "blocks": [
                {"id": "h1", "type": "header", "data": {"text": "Intro", "level": 2}},
                {"id": "p1", "type": "paragraph", "data": {"text": "FastAPI is a web framework."}},
            ],
        },
        "thumbnail": "https://img.example.com/fastapi.png",
        "category": "Tech",
        "tags": ["python", "web"],
        "authorName": "Sam Lee",
        "authorEmail": "sam@example.com",
        "createdAt": datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc),
        "reactCount": 1,
        "reactedUsers": ["reader@example.com"],
    }


@pytest_asyncio.fixture
async def test_client(mock_collection):
    """
    HTTPX AsyncClient talking to the app through ASGITransport, with the blog
    collection dependency replaced by `mock_collection`.
    """
    from inkwell.database import get_blog_collection
    from inkwell.main import app

    app.dependency_overrides[get_blog_collection] = lambda: mock_collection
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
