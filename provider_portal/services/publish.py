"""Publish workflow: turn a confirmed draft into a PublishedProfile.

publish() order of checks (nothing is written until all pass):
  1. an owner must be signed in                → UnauthenticatedError
  2. slug must survive normalization           → InvalidSlugError
  3. the draft must have every required field  → DraftIncompleteError
  4. slug lookup: free → insert; ours → update in place;
     someone else's → SlugTakenError

The lookup-then-write is not atomic. The unique index on `slug` is the
real guard: a SlugConflict from the store on insert is reported as
SlugTakenError as well. Any other store failure becomes PersistenceError
and is not retried here.
"""

import logging
from dataclasses import dataclass

from provider_portal.middleware.exceptions import (
    DraftIncompleteError,
    InvalidSlugError,
    PersistenceError,
    ProfileNotFoundError,
    SlugTakenError,
    UnauthenticatedError,
)
from provider_portal.models.provider_profile import ProviderProfile
from provider_portal.services.slugs import normalize
from provider_portal.services.store import ProfileStore, SlugConflict, StoreError
from provider_portal.wizard.steps import validate_draft

logger = logging.getLogger(__name__)

PUBLIC_PATH = "/p"


@dataclass
class PublishResult:
    id: str
    slug: str
    url: str
    is_public: bool
    created: bool


def public_url(base_url: str, slug: str) -> str:
    return f"{base_url.rstrip('/')}{PUBLIC_PATH}/{slug}"


class PublishCoordinator:
    """Publish and visibility workflow over a `ProfileStore`.

    `published_id` and `abandon()` only matter to a caller that keeps one
    coordinator across a whole session (a worker or a long-lived client).
    The HTTP routes build a fresh coordinator per request and use neither.
    """

    def __init__(self, store: ProfileStore, public_base_url: str):
        self.store = store
        self.public_base_url = public_base_url
        # Transient reference to the last profile written by this flow
        self.published_id: str | None = None
        self._generation = 0

    def abandon(self) -> None:
        """The user left the flow; ignore in-flight results from now on."""
        self._generation += 1

    async def publish(
        self,
        draft: dict,
        slug: str | None,
        is_public: bool,
        owner_id: str | None,
    ) -> PublishResult:
        generation = self._generation

        if not owner_id:
            raise UnauthenticatedError()

        normalized = normalize(slug)
        if not normalized:
            raise InvalidSlugError(slug)

        verdict = validate_draft(draft)
        if not verdict.ok:
            raise DraftIncompleteError(verdict.errors)

        values = {**verdict.data, "is_public": is_public}

        try:
            existing = await self.store.select_by_slug(normalized)
            if existing is None:
                profile = await self.store.insert(
                    {**values, "slug": normalized, "user_id": owner_id}
                )
                created = True
            elif existing.user_id == owner_id:
                profile = await self.store.update_by_id(existing.id, values)
                if profile is None:
                    raise StoreError(f"profile {existing.id} disappeared during update")
                created = False
            else:
                logger.warning(
                    f"Slug '{normalized}' already owned by another user",
                    extra={"slug": normalized},
                )
                raise SlugTakenError(normalized)
        except SlugConflict:
            logger.warning(
                f"Slug '{normalized}' claimed concurrently",
                extra={"slug": normalized},
            )
            raise SlugTakenError(normalized)
        except StoreError as exc:
            logger.error(f"Publish of '{normalized}' failed: {exc}")
            raise PersistenceError(str(exc)) from exc

        logger.info(
            f"{'Published' if created else 'Republished'} profile '{normalized}'",
            extra={"profile_id": profile.id, "is_public": profile.is_public},
        )

        if generation == self._generation:
            self.published_id = profile.id
        else:
            logger.debug(f"Discarding stale publish result for '{normalized}'")

        return PublishResult(
            id=profile.id,
            slug=profile.slug,
            url=public_url(self.public_base_url, profile.slug),
            is_public=profile.is_public,
            created=created,
        )

    async def set_visibility(
        self,
        slug: str,
        is_public: bool,
        owner_id: str | None,
    ) -> ProviderProfile:
        if not owner_id:
            raise UnauthenticatedError("Sign in to change profile visibility")

        try:
            existing = await self.store.select_by_slug(normalize(slug))
            if existing is None or existing.user_id != owner_id:
                raise ProfileNotFoundError()
            profile = await self.store.update_by_id(existing.id, {"is_public": is_public})
        except StoreError as exc:
            logger.error(f"Visibility change for '{slug}' failed: {exc}")
            raise PersistenceError(str(exc)) from exc

        if profile is None:
            raise ProfileNotFoundError()
        logger.info(
            f"Profile '{profile.slug}' is now {'public' if is_public else 'private'}",
            extra={"profile_id": profile.id},
        )
        return profile
