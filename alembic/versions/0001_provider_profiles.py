"""Create provider_profiles table and the public read-only view.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS provider_profiles (
            id VARCHAR(36) NOT NULL PRIMARY KEY,
            slug VARCHAR(120) NOT NULL,
            user_id VARCHAR(36) NOT NULL,
            full_name VARCHAR(100) NOT NULL,
            email VARCHAR(255) NOT NULL,
            phone VARCHAR(20) NOT NULL,
            specialty VARCHAR(255) NOT NULL,
            license_number VARCHAR(100) NOT NULL,
            license_state VARCHAR(50),
            preferred_locations VARCHAR(255) NOT NULL,
            availability VARCHAR(20) NOT NULL,
            years_experience VARCHAR(50) NOT NULL,
            session_types JSON,
            accepts_insurance VARCHAR(50),
            languages JSON,
            therapeutic_approaches JSON,
            notes TEXT,
            is_public BOOLEAN DEFAULT false NOT NULL,
            created_at TIMESTAMP WITHOUT TIME ZONE DEFAULT now() NOT NULL,
            updated_at TIMESTAMP WITHOUT TIME ZONE DEFAULT now() NOT NULL
        )
    """)

    # Uniqueness is enforced here; the app-level slug check is advisory only
    op.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ix_provider_profiles_slug
        ON provider_profiles (slug)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_provider_profiles_user_id
        ON provider_profiles (user_id)
    """)

    # Public projection: no contact details, license identifiers or owner id
    op.execute("""
        CREATE OR REPLACE VIEW provider_profiles_public AS
        SELECT
            id, slug, full_name, specialty, preferred_locations, availability,
            years_experience, session_types, accepts_insurance, languages,
            therapeutic_approaches, notes, is_public, created_at, updated_at
        FROM provider_profiles
        WHERE is_public = true
    """)


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS provider_profiles_public")
    op.drop_index("ix_provider_profiles_user_id", table_name="provider_profiles")
    op.drop_index("ix_provider_profiles_slug", table_name="provider_profiles")
    op.drop_table("provider_profiles")
