"""Anonymous, read-only access to published profiles."""

from fastapi import APIRouter, Depends

from provider_portal.middleware.exceptions import ProfileNotFoundError
from provider_portal.schemas.profile import PublicProfileOut
from provider_portal.services.store import ProfileStore, get_profile_store

router = APIRouter()


@router.get("/profiles/{slug}", response_model=PublicProfileOut)
async def get_public_profile(
    slug: str,
    store: ProfileStore = Depends(get_profile_store),
):
    """Public view of a profile.

    Private and non-existent profiles both return the same 404 so the
    existence of a private profile is not revealed.
    """
    profile = await store.select_public_by_slug(slug)
    if profile is None:
        raise ProfileNotFoundError()
    return PublicProfileOut.model_validate(profile)
