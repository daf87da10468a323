"""Persistence collaborator for published profiles.

`ProfileStore` is the contract the publish workflow relies on: a single
table keyed by a unique slug. `SqlProfileStore` implements it on top of an
AsyncSession. Every SQLAlchemy failure is translated into `StoreError` so
callers never depend on driver exceptions; a unique-slug violation becomes
the more specific `SlugConflict`.
"""

import logging
from typing import Protocol

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from provider_portal.database import get_db
from provider_portal.models.provider_profile import ProviderProfile

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """The store could not complete a read or write."""


class SlugConflict(StoreError):
    """Insert rejected by the unique slug constraint."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"slug already exists: {slug}")


class ProfileStore(Protocol):
    async def select_by_slug(self, slug: str) -> ProviderProfile | None: ...

    async def select_public_by_slug(self, slug: str) -> ProviderProfile | None: ...

    async def select_by_owner(self, user_id: str) -> list[ProviderProfile]: ...

    async def insert(self, values: dict) -> ProviderProfile: ...

    async def update_by_id(self, profile_id: str, values: dict) -> ProviderProfile | None: ...


class SqlProfileStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def select_by_slug(self, slug: str) -> ProviderProfile | None:
        return await self._one(
            select(ProviderProfile).where(ProviderProfile.slug == slug)
        )

    async def select_public_by_slug(self, slug: str) -> ProviderProfile | None:
        return await self._one(
            select(ProviderProfile).where(
                ProviderProfile.slug == slug,
                ProviderProfile.is_public == True,  # noqa: E712
            )
        )

    async def select_by_owner(self, user_id: str) -> list[ProviderProfile]:
        query = (
            select(ProviderProfile)
            .where(ProviderProfile.user_id == user_id)
            .order_by(ProviderProfile.created_at.desc())
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return list(result.scalars().all())

    async def insert(self, values: dict) -> ProviderProfile:
        profile = ProviderProfile(**values)
        try:
            # Savepoint so a constraint violation leaves the session usable
            async with self.db.begin_nested():
                self.db.add(profile)
            await self.db.refresh(profile)
        except IntegrityError as exc:
            if "slug" in str(exc.orig).lower():
                logger.warning(f"Unique slug violation on insert: {values.get('slug')}")
                raise SlugConflict(values.get("slug", "")) from exc
            raise StoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return profile

    async def update_by_id(self, profile_id: str, values: dict) -> ProviderProfile | None:
        profile = await self._one(
            select(ProviderProfile).where(ProviderProfile.id == profile_id)
        )
        if profile is None:
            return None
        for key, value in values.items():
            setattr(profile, key, value)
        try:
            await self.db.flush()
            await self.db.refresh(profile)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return profile

    async def _one(self, query) -> ProviderProfile | None:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return result.scalar_one_or_none()


async def get_profile_store(db: AsyncSession = Depends(get_db)) -> ProfileStore:
    return SqlProfileStore(db)
