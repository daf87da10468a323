"""Redis-backed wizard draft cache.

Each signed-in user has at most one in-progress wizard, stored as a JSON
snapshot under `wizard:draft:{user_id}`. It is a plain snapshot (last
write wins) that expires after `draft_cache_ttl_seconds`; it only exists
so that leaving the wizard and coming back restores where the user was.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError

from provider_portal.config import settings
from provider_portal.schemas.wizard import WizardSnapshot

logger = logging.getLogger(__name__)

KEY_PREFIX = "wizard:draft"

# Global Redis connection pool
_redis_client: Optional[redis.Redis] = None


async def get_redis() -> redis.Redis:
    """Get or create Redis client connection."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=50,
        )
    return _redis_client


async def close_redis():
    """Close Redis connection (call on app shutdown)."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def draft_key(owner_id: str) -> str:
    return f"{KEY_PREFIX}:{owner_id}"


class DraftCache:
    def __init__(self, client: redis.Redis, ttl: int = settings.draft_cache_ttl_seconds):
        self.client = client
        self.ttl = ttl

    async def load(self, owner_id: str) -> WizardSnapshot | None:
        key = draft_key(owner_id)
        raw = await self.client.get(key)
        if not raw:
            logger.debug(f"Draft MISS: {key}")
            return None
        try:
            return WizardSnapshot.model_validate_json(raw)
        except ValidationError:
            # Written by an incompatible version; start the wizard over
            logger.warning(f"Discarding unreadable draft snapshot: {key}")
            await self.client.delete(key)
            return None

    async def save(self, owner_id: str, snapshot: WizardSnapshot) -> None:
        key = draft_key(owner_id)
        await self.client.set(key, snapshot.model_dump_json(), ex=self.ttl)
        logger.debug(f"Draft saved: {key} (step {snapshot.current_step})")

    async def clear(self, owner_id: str) -> None:
        await self.client.delete(draft_key(owner_id))
        logger.debug(f"Draft cleared: {draft_key(owner_id)}")


async def get_draft_cache() -> DraftCache:
    return DraftCache(await get_redis())
