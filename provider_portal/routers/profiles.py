"""Publishing and managing your own provider profiles.

Endpoints:
    GET   /api/profiles/slug-suggestion     Slug derived from the draft + availability
    GET   /api/profiles/slug-check?slug=    Normalized slug + availability
    POST  /api/profiles/publish             Publish (insert or update) the draft
    PATCH /api/profiles/{slug}/visibility   Make one of your profiles public/private
    GET   /api/profiles/mine                Your published profiles (private included)
"""

from fastapi import APIRouter, Depends

from provider_portal.auth.deps import get_current_user_id, get_optional_user_id
from provider_portal.config import settings
from provider_portal.schemas.profile import (
    ProviderProfileOut,
    PublishOut,
    PublishRequest,
    SlugCheckOut,
    VisibilityUpdate,
)
from provider_portal.services.publish import PublishCoordinator
from provider_portal.services.slugs import check_availability, derive_candidate, normalize
from provider_portal.services.store import ProfileStore, get_profile_store
from provider_portal.schemas.wizard import WizardSnapshot
from provider_portal.utils.cache import DraftCache, get_draft_cache

router = APIRouter()


def get_publish_coordinator(
    store: ProfileStore = Depends(get_profile_store),
) -> PublishCoordinator:
    return PublishCoordinator(store, settings.public_base_url)


def _default_slug(snapshot: WizardSnapshot | None) -> str:
    """The slug the draft was published under, else one derived from it."""
    if snapshot is None:
        return derive_candidate({})
    if snapshot.published_slug:
        return snapshot.published_slug
    return derive_candidate(snapshot.draft)


async def _slug_check(store: ProfileStore, slug: str, user_id: str | None) -> SlugCheckOut:
    if not slug:
        return SlugCheckOut(slug="", availability=None)
    return SlugCheckOut(
        slug=slug,
        availability=await check_availability(store, slug, user_id),
    )


@router.get("/slug-suggestion", response_model=SlugCheckOut)
async def suggest_slug(
    cache: DraftCache = Depends(get_draft_cache),
    store: ProfileStore = Depends(get_profile_store),
    user_id: str = Depends(get_current_user_id),
):
    """Default public address for the current draft."""
    snapshot = await cache.load(user_id)
    return await _slug_check(store, _default_slug(snapshot), user_id)


@router.get("/slug-check", response_model=SlugCheckOut)
async def check_slug(
    slug: str,
    store: ProfileStore = Depends(get_profile_store),
    user_id: str | None = Depends(get_optional_user_id),
):
    """Normalize user-typed text and report whether it can be used.

    Advisory only: the publish call is the authoritative check.
    """
    return await _slug_check(store, normalize(slug), user_id)


@router.post("/publish", response_model=PublishOut)
async def publish_profile(
    body: PublishRequest,
    cache: DraftCache = Depends(get_draft_cache),
    coordinator: PublishCoordinator = Depends(get_publish_coordinator),
    user_id: str | None = Depends(get_optional_user_id),
):
    """Publish the wizard draft under `slug`.

    Without a slug, a draft that was published before (or opened for editing)
    goes back to the same record; otherwise the slug is derived from the name.
    """
    snapshot = await cache.load(user_id) if user_id is not None else None
    draft = snapshot.draft if snapshot else {}

    slug = body.slug if body.slug is not None else _default_slug(snapshot)
    result = await coordinator.publish(draft, slug, body.is_public, user_id)

    if snapshot is not None:
        await cache.save(user_id, snapshot.model_copy(update={"published_slug": result.slug}))
    return PublishOut(
        id=result.id,
        slug=result.slug,
        url=result.url,
        is_public=result.is_public,
        created=result.created,
    )


@router.patch("/{slug}/visibility", response_model=ProviderProfileOut)
async def update_visibility(
    slug: str,
    body: VisibilityUpdate,
    coordinator: PublishCoordinator = Depends(get_publish_coordinator),
    user_id: str = Depends(get_current_user_id),
):
    profile = await coordinator.set_visibility(slug, body.is_public, user_id)
    return ProviderProfileOut.model_validate(profile)


@router.get("/mine", response_model=list[ProviderProfileOut])
async def list_my_profiles(
    store: ProfileStore = Depends(get_profile_store),
    user_id: str = Depends(get_current_user_id),
):
    profiles = await store.select_by_owner(user_id)
    return [ProviderProfileOut.model_validate(p) for p in profiles]
