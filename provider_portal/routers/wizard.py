"""Provider profile wizard: 3-step progressive form with save/resume.

Endpoints:
  GET    /api/wizard/            → current progress + draft
  PATCH  /api/wizard/pending     → save unvalidated input for the active step
  POST   /api/wizard/advance     → validate the active step and move forward
  POST   /api/wizard/retreat     → back one step
  POST   /api/wizard/jump/{n}    → jump to a completed / earlier step
  DELETE /api/wizard/            → start over
  POST   /api/wizard/edit/{slug} → load one of your published profiles

Design:
  - Wizard state + draft live in the Redis draft cache, one per user,
    and are saved after every operation (including rejected advances,
    so typed input is never lost).
  - The WizardController owns all transition rules; this module only
    loads, dispatches and saves.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from provider_portal.auth.deps import get_current_user_id
from provider_portal.middleware.exceptions import ProfileNotFoundError, StepValidationError
from provider_portal.schemas.wizard import DraftProfile, DraftProfileComplete, WizardProgress
from provider_portal.services.store import ProfileStore, get_profile_store
from provider_portal.utils.cache import DraftCache, get_draft_cache
from provider_portal.wizard.controller import WizardController

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Helpers ──────────────────────────────────────────────────

async def _load_controller(
    cache: DraftCache,
    user_id: str,
) -> WizardController:
    def _on_complete(profile: DraftProfileComplete) -> None:
        logger.info(
            f"Wizard completed for user {user_id}",
            extra={"user_id": user_id, "full_name": profile.full_name},
        )

    snapshot = await cache.load(user_id)
    return WizardController.restore(snapshot, on_complete=_on_complete)


async def _save(
    cache: DraftCache,
    user_id: str,
    wizard: WizardController,
) -> WizardProgress:
    await cache.save(user_id, wizard.snapshot())
    return wizard.progress()


# ── GET /api/wizard/ ─────────────────────────────────────────

@router.get("/", response_model=WizardProgress)
async def get_progress(
    cache: DraftCache = Depends(get_draft_cache),
    user_id: str = Depends(get_current_user_id),
):
    wizard = await _load_controller(cache, user_id)
    return wizard.progress()


# ── PATCH /api/wizard/pending ────────────────────────────────

@router.patch("/pending", response_model=WizardProgress)
async def save_pending(
    body: dict[str, Any] = Body(...),
    cache: DraftCache = Depends(get_draft_cache),
    user_id: str = Depends(get_current_user_id),
):
    """Save partially typed input for the active step without validating."""
    wizard = await _load_controller(cache, user_id)
    wizard.save_pending(body)
    return await _save(cache, user_id, wizard)


# ── Transitions ──────────────────────────────────────────────

@router.post("/advance", response_model=WizardProgress)
async def advance(
    body: dict[str, Any] | None = Body(None),
    cache: DraftCache = Depends(get_draft_cache),
    user_id: str = Depends(get_current_user_id),
):
    """Validate the active step's input; 422 with field errors on failure.

    On the Confirm step the body is ignored and the whole draft is checked.
    """
    wizard = await _load_controller(cache, user_id)
    result = wizard.advance(body)
    progress = await _save(cache, user_id, wizard)
    if not result.ok:
        raise StepValidationError(result.step, result.errors)
    return progress


@router.post("/retreat", response_model=WizardProgress)
async def retreat(
    cache: DraftCache = Depends(get_draft_cache),
    user_id: str = Depends(get_current_user_id),
):
    wizard = await _load_controller(cache, user_id)
    wizard.retreat()
    return await _save(cache, user_id, wizard)


@router.post("/jump/{step}", response_model=WizardProgress)
async def jump(
    step: int,
    cache: DraftCache = Depends(get_draft_cache),
    user_id: str = Depends(get_current_user_id),
):
    wizard = await _load_controller(cache, user_id)
    wizard.jump_to(step)
    return await _save(cache, user_id, wizard)


# ── DELETE /api/wizard/ ──────────────────────────────────────

@router.delete("/", response_model=WizardProgress)
async def start_over(
    cache: DraftCache = Depends(get_draft_cache),
    user_id: str = Depends(get_current_user_id),
):
    """Discard the draft and wizard progress."""
    await cache.clear(user_id)
    return WizardController().progress()


# ── POST /api/wizard/edit/{slug} ─────────────────────────────

@router.post("/edit/{slug}", response_model=WizardProgress, status_code=status.HTTP_200_OK)
async def edit_published(
    slug: str,
    cache: DraftCache = Depends(get_draft_cache),
    store: ProfileStore = Depends(get_profile_store),
    user_id: str = Depends(get_current_user_id),
):
    """Load one of your published profiles into the wizard for editing."""
    profile = await store.select_by_slug(slug)
    if profile is None or profile.user_id != user_id:
        raise ProfileNotFoundError()

    draft = DraftProfile.model_validate(profile).model_dump()
    wizard = WizardController.for_existing_profile(draft, published_slug=profile.slug)
    return await _save(cache, user_id, wizard)
