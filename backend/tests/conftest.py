"""
Larder Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every API test gets a fresh app built by `create_app()` around an
       in-memory SQLite repository, fake OCR/label collaborators and a
       Spoonacular client on httpx.MockTransport. Nothing leaves the
       process: no Tesseract binary, no AWS, no network.

Fixture Hierarchy (all function-scoped):
    test_settings ─┬─ repository (in-memory SQLite, schema created)
                   ├─ text_extractor / label_detector (fakes)
                   ├─ recipe_upstream → recipe_service (MockTransport)
                   └─ app → test_client (httpx AsyncClient over ASGI)
    make_user:  registers + logs in a user through the API, returns the
                login body (id, email, username, token)
    set_score:  writes a user's score directly (no endpoint mutates it)
"""

import os
import tempfile
from typing import Any, Dict, List, Optional

# Override settings for testing BEFORE any larder imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="larder_test_")
os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef0123"
os.environ["SPOONACULAR_API_KEY"] = "test-spoonacular-key"
os.environ["AWS_REGION"] = "eu-west-1"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update

from larder.config import Settings
from larder.database import session_scope
from larder.main import create_app
from larder.models import User
from larder.repository import SqlRepository
from larder.services.recipe_service import RecipeService
from larder.services.vision_base import LabelDetector, TextExtractor

TEST_SECRET = os.environ["SECRET_KEY"]
SPOONACULAR_BASE = "https://spoonacular.test"


# ══════════════════════════════════════════════════════════════════════════
# Fake Image Collaborators
# ══════════════════════════════════════════════════════════════════════════


class FakeTextExtractor(TextExtractor):
    """Returns canned text, or raises `error`; records what it was given."""

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def extract_text(self, image_path: str) -> str:
        with open(image_path, "rb") as f:
            content = f.read()
        self.calls.append({"path": image_path, "content": content})
        if self.error is not None:
            raise self.error
        return self.text


class FakeLabelDetector(LabelDetector):
    def __init__(self, labels: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.labels = labels or []
        self.error = error
        self.paths: List[str] = []

    async def detect_food_labels(self, image_path: str) -> List[str]:
        self.paths.append(image_path)
        if self.error is not None:
            raise self.error
        return list(self.labels)


class RecipeUpstream:
    """Scriptable stand-in for the Spoonacular API."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {
            "results": [
                {"id": 716429, "title": "Pasta with Garlic", "image": "https://img.test/1.jpg"},
                {"id": 715538, "title": "Bruschetta", "image": "https://img.test/2.jpg"},
            ],
            "offset": 0,
            "number": 10,
            "totalResults": 2,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def upload_dir(tmp_path):
    """Fresh upload directory per test, so leftovers are easy to detect."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(upload_dir) -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        upload_dir=str(upload_dir),
        spoonacular_api_key="test-spoonacular-key",
        spoonacular_base_url=SPOONACULAR_BASE,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def repository():
    """In-memory SQLite repository with all tables created."""
    repo = SqlRepository.from_url("sqlite+aiosqlite://")
    await repo.create_schema()
    yield repo
    await repo.close()


@pytest.fixture
def text_extractor():
    return FakeTextExtractor(text="MILK 1L\nBest before 12/03/2025\nKeep refrigerated")


@pytest.fixture
def label_detector():
    return FakeLabelDetector(labels=["Milk", "Dairy"])


@pytest.fixture
def recipe_upstream():
    return RecipeUpstream()


@pytest_asyncio.fixture
async def recipe_service(recipe_upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(recipe_upstream.handler))
    service = RecipeService(
        http_client=client,
        api_key="test-spoonacular-key",
        base_url=SPOONACULAR_BASE,
    )
    yield service
    await service.close()


@pytest.fixture
def app(test_settings, repository, text_extractor, label_detector, recipe_service):
    return create_app(
        settings=test_settings,
        repository=repository,
        text_extractor=text_extractor,
        label_detector=label_detector,
        recipe_service=recipe_service,
    )


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not run the lifespan; the repository fixture has
    already created the schema. test_lifespan.py enters it explicitly.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_user(test_client):
    """
    Factory: register and log in a user, returning the login body.

    Usage:
        alice = await make_user("alice")
        headers = {"Authorization": alice["token"]}
    """

    async def _make_user(
        username: str = "alice",
        email: Optional[str] = None,
        password: str = "correct-horse",
    ) -> Dict[str, Any]:
        email = email or f"{username}@example.com"
        response = await test_client.post(
            "/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        response = await test_client.post(
            "/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _make_user


@pytest.fixture
def set_score(repository):
    """Set a user's score directly; there is no endpoint for it."""

    async def _set_score(user_id: int, score: int) -> None:
        async with session_scope(repository.session_factory) as session:
            await session.execute(
                update(User).where(User.id == user_id).values(score=score)
            )

    return _set_score
