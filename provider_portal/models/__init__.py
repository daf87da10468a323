"""Aggregate model imports for Alembic auto-detection."""

from provider_portal.models.provider_profile import ProviderProfile  # noqa: F401
