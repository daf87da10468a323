"""Pytest configuration and fixtures for provider portal tests.

The database-backed ProfileStore and the Redis client are replaced by
in-memory doubles through FastAPI dependency overrides, so the suite runs
without PostgreSQL or Redis.
"""

import uuid
from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from provider_portal.auth.jwt import create_access_token
from provider_portal.main import app
from provider_portal.models.provider_profile import ProviderProfile
from provider_portal.services.store import SlugConflict, StoreError, get_profile_store
from provider_portal.utils.cache import DraftCache, get_draft_cache

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ID = "22222222-2222-2222-2222-222222222222"


# ── Collaborator doubles ─────────────────────────────────────────

class InMemoryProfileStore:
    """ProfileStore over a dict keyed by slug.

    `fail_with` makes every call raise that StoreError; `writes` counts
    successful inserts and updates.
    """

    def __init__(self):
        self.rows: dict[str, ProviderProfile] = {}
        self.writes = 0
        self.fail_with: StoreError | None = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def select_by_slug(self, slug):
        self._check()
        return self.rows.get(slug)

    async def select_public_by_slug(self, slug):
        self._check()
        profile = self.rows.get(slug)
        return profile if profile is not None and profile.is_public else None

    async def select_by_owner(self, user_id):
        self._check()
        return [p for p in self.rows.values() if p.user_id == user_id]

    async def insert(self, values):
        self._check()
        if values["slug"] in self.rows:
            raise SlugConflict(values["slug"])
        now = datetime.utcnow()
        profile = ProviderProfile(
            id=str(uuid.uuid4()), created_at=now, updated_at=now, **values
        )
        self.rows[profile.slug] = profile
        self.writes += 1
        return profile

    async def update_by_id(self, profile_id, values):
        self._check()
        for profile in self.rows.values():
            if profile.id == profile_id:
                for key, value in values.items():
                    setattr(profile, key, value)
                profile.updated_at = datetime.utcnow()
                self.writes += 1
                return profile
        return None


class FakeRedis:
    """The subset of redis.asyncio.Redis used by DraftCache."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed


@pytest.fixture
def owner_id() -> str:
    return OWNER_ID


@pytest.fixture
def other_id() -> str:
    return OTHER_ID


# ── Sample input ─────────────────────────────────────────────────

@pytest.fixture
def basic_info() -> dict:
    return {
        "full_name": "Jane Doe",
        "email": "Jane@X.com",
        "phone": "5551234567",
        "specialty": "Neurosciences",
        "license_number": "NE-12345",
    }


@pytest.fixture
def preferences() -> dict:
    return {
        "preferred_locations": "Lakeside",
        "availability": "full-time",
        "years_experience": "10",
    }


@pytest.fixture
def complete_draft(basic_info, preferences) -> dict:
    return {**basic_info, "email": "jane@x.com", **preferences}


# ── Collaborator fixtures ────────────────────────────────────────

@pytest.fixture
def store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def draft_cache(fake_redis) -> DraftCache:
    return DraftCache(fake_redis, ttl=600)


@pytest_asyncio.fixture
async def client(store, draft_cache) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the store and draft cache overridden."""

    async def override_store():
        return store

    async def override_cache():
        return draft_cache

    app.dependency_overrides[get_profile_store] = override_store
    app.dependency_overrides[get_draft_cache] = override_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {create_access_token(OWNER_ID)}"}


@pytest.fixture
def other_auth_headers() -> dict:
    return {"Authorization": f"Bearer {create_access_token(OTHER_ID)}"}


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP endpoint tests")
    config.addinivalue_line("markers", "cache: Draft cache tests")
