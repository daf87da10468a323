"""Slug derivation, normalization and availability checks.

A slug only ever contains [a-z0-9-], never starts or ends with a hyphen and
never contains two hyphens in a row. `normalize` is idempotent, so it is
safe to apply to values that are already slugs.
"""

import re
import unicodedata

from provider_portal.schemas.profile import SlugAvailability
from provider_portal.services.store import ProfileStore

MAX_SLUG_LENGTH = 120

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")


def normalize(text: str | None) -> str:
    """Turn arbitrary user text into a URL-safe slug (possibly empty).

    "  Dr. José  O'Neil " → "dr-jose-oneil"
    """
    if not text:
        return ""
    # Fold accented letters to their ASCII base before stripping
    folded = unicodedata.normalize("NFKD", text)
    folded = folded.encode("ascii", "ignore").decode("ascii")
    slug = _WHITESPACE_RE.sub("-", folded.strip().lower())
    slug = _DISALLOWED_RE.sub("", slug)
    slug = _HYPHEN_RUN_RE.sub("-", slug).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def derive_candidate(draft: dict) -> str:
    """Default slug for a draft: its full name, normalized."""
    return normalize(draft.get("full_name"))


async def check_availability(
    store: ProfileStore,
    slug: str,
    owner_id: str | None,
) -> SlugAvailability:
    """Look the slug up; store errors propagate to the caller."""
    existing = await store.select_by_slug(slug)
    if existing is None:
        return SlugAvailability.AVAILABLE
    if owner_id is not None and existing.user_id == owner_id:
        return SlugAvailability.OWNED_BY_SELF
    return SlugAvailability.TAKEN_BY_OTHER
