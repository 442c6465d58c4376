"""initial sitehub schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import text

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None

LIVE_INVITE_INDEX = "uq_invites_unused_email"


def _id() -> sa.Column:
    return sa.Column("id", sa.Uuid(), primary_key=True, nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _site_fk(index: bool = True) -> sa.Column:
    return sa.Column(
        "site_id",
        sa.Uuid(),
        sa.ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=index,
    )


def upgrade() -> None:
    # -----------------------------------------------------
    # 1) Identity
    # -----------------------------------------------------
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("image", sa.String(length=1000), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="USER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_invited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("invited_by", sa.Uuid(), nullable=True),
        sa.Column("invited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_site_id", sa.Uuid(), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "invites",
        _id(),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="USER"),
        sa.Column("token", sa.String(length=128), nullable=False, unique=True),
        sa.Column(
            "invited_by_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_invites_email", "invites", ["email"])
    # at most one unconsumed invite per email
    op.create_index(
        LIVE_INVITE_INDEX,
        "invites",
        [text("lower(email)")],
        unique=True,
        postgresql_where=text("is_used = false"),
        sqlite_where=text("is_used = 0"),
    )

    # -----------------------------------------------------
    # 2) Sites, memberships, features
    # -----------------------------------------------------
    op.create_table(
        "sites",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("domain", sa.String(length=255), nullable=True, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("logo", sa.String(length=1000), nullable=True),
        sa.Column("cover_image", sa.String(length=1000), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "site_memberships",
        _id(),
        _site_fk(),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "user_id", name="uq_site_memberships_site_user"),
    )

    op.create_table(
        "site_features",
        _id(),
        _site_fk(index=False),
        sa.Column("feature", sa.String(length=50), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_name", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("config", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "feature", name="uq_site_features_site_feature"),
    )

    # -----------------------------------------------------
    # 3) Content
    # -----------------------------------------------------
    for table in ("pages", "blog_posts"):
        extra = [sa.Column("excerpt", sa.Text(), nullable=True)] if table == "blog_posts" else []
        op.create_table(
            table,
            _id(),
            _site_fk(),
            sa.Column(
                "author_id",
                sa.Uuid(),
                sa.ForeignKey("users.id", ondelete="SET NULL"),
                nullable=True,
            ),
            sa.Column("title", sa.String(length=300), nullable=False),
            sa.Column("slug", sa.String(length=200), nullable=False),
            *extra,
            sa.Column("content", sa.Text(), nullable=False, server_default=""),
            sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(),
            sa.UniqueConstraint("site_id", "slug", name=f"uq_{table}_site_slug"),
        )

    op.create_table(
        "media_files",
        _id(),
        _site_fk(),
        sa.Column("filename", sa.String(length=500), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=True),
        sa.Column("size", sa.BigInteger(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "sponsors",
        _id(),
        _site_fk(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=True),
        sa.Column("logo", sa.String(length=1000), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    # -----------------------------------------------------
    # 4) Contact forms
    # -----------------------------------------------------
    op.create_table(
        "contact_forms",
        _id(),
        sa.Column(
            "site_id",
            sa.Uuid(),
            sa.ForeignKey("sites.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("name", sa.String(length=200), nullable=False, server_default="Contact Form"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "contact_form_fields",
        _id(),
        sa.Column(
            "contact_form_id",
            sa.Uuid(),
            sa.ForeignKey("contact_forms.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("field_label", sa.String(length=200), nullable=False),
        sa.Column("field_type", sa.String(length=20), nullable=False, server_default="TEXT"),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("placeholder", sa.String(length=300), nullable=True),
        sa.Column("help_text", sa.String(length=500), nullable=True),
        sa.Column("options", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "contact_submissions",
        _id(),
        _site_fk(),
        sa.Column(
            "contact_form_id",
            sa.Uuid(),
            sa.ForeignKey("contact_forms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("ip_address", sa.String(length=100), nullable=True),
        sa.Column("user_agent", sa.String(length=1000), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "contact_submission_data",
        _id(),
        sa.Column(
            "submission_id",
            sa.Uuid(),
            sa.ForeignKey("contact_submissions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "field_id",
            sa.Uuid(),
            sa.ForeignKey("contact_form_fields.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("field_label", sa.String(length=200), nullable=False),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
    )

    # -----------------------------------------------------
    # 5) Job board
    # -----------------------------------------------------
    op.create_table(
        "companies",
        _id(),
        _site_fk(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website", sa.String(length=1000), nullable=True),
        sa.Column("logo", sa.String(length=1000), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("industry", sa.String(length=200), nullable=True),
        sa.Column("size", sa.String(length=50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("site_id", "name", name="uq_companies_site_name"),
    )

    op.create_table(
        "job_listings",
        _id(),
        _site_fk(),
        sa.Column(
            "company_id",
            sa.Uuid(),
            sa.ForeignKey("companies.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("benefits", sa.Text(), nullable=True),
        sa.Column("job_type", sa.String(length=20), nullable=False),
        sa.Column("experience_level", sa.String(length=20), nullable=True),
        sa.Column("remote_work_type", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE", index=True),
        sa.Column("salary_min", sa.Integer(), nullable=True),
        sa.Column("salary_max", sa.Integer(), nullable=True),
        sa.Column("salary_currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("application_url", sa.String(length=1000), nullable=True),
        sa.Column("image", sa.String(length=1000), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # -----------------------------------------------------
    # 6) Social media
    # -----------------------------------------------------
    op.create_table(
        "social_media_channels",
        _id(),
        _site_fk(),
        sa.Column("platform", sa.String(length=20), nullable=False),
        sa.Column("channel_id", sa.String(length=200), nullable=False),
        sa.Column("channel_name", sa.String(length=300), nullable=False),
        sa.Column("channel_url", sa.String(length=1000), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=1000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint(
            "site_id", "platform", "channel_id", name="uq_social_channels_site_platform_channel"
        ),
    )

    op.create_table(
        "social_media_channel_stats",
        _id(),
        sa.Column(
            "channel_id",
            sa.Uuid(),
            sa.ForeignKey("social_media_channels.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("stat_type", sa.String(length=20), nullable=False),
        sa.Column("value", sa.String(length=50), nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("channel_id", "stat_type", name="uq_social_stats_channel_type"),
    )


def downgrade() -> None:
    for table in (
        "social_media_channel_stats",
        "social_media_channels",
        "job_listings",
        "companies",
        "contact_submission_data",
        "contact_submissions",
        "contact_form_fields",
        "contact_forms",
        "sponsors",
        "media_files",
        "blog_posts",
        "pages",
        "site_features",
        "site_memberships",
        "sites",
    ):
        op.drop_table(table)

    op.drop_index(LIVE_INVITE_INDEX, table_name="invites")
    op.drop_index("ix_invites_email", table_name="invites")
    op.drop_table("invites")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
