"""initial schema: users, content, catalogs, leads, uploads

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

JSONDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _user_ref(name: str) -> sa.Column:
    return sa.Column(name, sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "content",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("section_key", sa.String(100), nullable=False),
        sa.Column("section_name", sa.String(255), nullable=False),
        sa.Column("content_data", JSONDocument, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="published"),
        _user_ref("created_by"),
        _user_ref("updated_by"),
        *_timestamps(),
    )
    op.create_index("ix_content_section_key", "content", ["section_key"], unique=True)

    op.create_table(
        "services",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("service_id", sa.String(100), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("features", JSONDocument, nullable=False),
        sa.Column("benefits", JSONDocument, nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        _user_ref("created_by"),
        *_timestamps(),
    )
    op.create_index("ix_services_service_id", "services", ["service_id"], unique=True)

    op.create_table(
        "plans",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("plan_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("billing_period", sa.String(50), nullable=False, server_default="mes"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("features", JSONDocument, nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("cta_text", sa.String(100), nullable=False, server_default="Comenzar Ahora"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        _user_ref("created_by"),
        *_timestamps(),
    )
    op.create_index("ix_plans_plan_id", "plans", ["plan_id"], unique=True)
    op.create_index(
        "uq_plans_single_featured",
        "plans",
        ["is_featured"],
        unique=True,
        postgresql_where=sa.text("is_featured"),
        sqlite_where=sa.text("is_featured = 1"),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(50), nullable=False, server_default="product"),
        *_timestamps(),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("product_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("discount_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("price_currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("features", JSONDocument, nullable=False),
        sa.Column("includes", JSONDocument, nullable=False),
        sa.Column(
            "category_id",
            sa.Uuid(),
            sa.ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        _user_ref("created_by"),
        *_timestamps(),
    )
    op.create_index("ix_products_product_id", "products", ["product_id"], unique=True)
    op.create_index("ix_products_category_id", "products", ["category_id"])

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("episode_id", sa.String(100), nullable=False),
        sa.Column("episode_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("publish_date", sa.Date(), nullable=True),
        sa.Column("duration", sa.String(20), nullable=True),
        sa.Column("guest_name", sa.String(255), nullable=True),
        sa.Column("guest_title", sa.String(255), nullable=True),
        sa.Column("cover_image_url", sa.Text(), nullable=True),
        sa.Column("audio_url", sa.Text(), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("topics", JSONDocument, nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        _user_ref("author_id"),
        *_timestamps(),
    )
    op.create_index("ix_blog_posts_episode_id", "blog_posts", ["episode_id"], unique=True)
    op.create_index("ix_blog_posts_publish_date", "blog_posts", ["publish_date"])

    op.create_table(
        "leads",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("nombre", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("telefono", sa.String(50), nullable=False),
        sa.Column("empresa", sa.String(255), nullable=True),
        sa.Column("servicio_interes", sa.String(255), nullable=False),
        sa.Column("presupuesto", sa.String(100), nullable=True),
        sa.Column("mensaje", sa.Text(), nullable=True),
        sa.Column("origen", sa.String(100), nullable=False, server_default="formulario-web"),
        sa.Column("estado", sa.String(20), nullable=False, server_default="nuevo"),
        sa.Column("fecha", sa.DateTime(timezone=True), nullable=False),
        _user_ref("assigned_to"),
        *_timestamps(),
    )
    op.create_index("ix_leads_email", "leads", ["email"])
    op.create_index("ix_leads_estado", "leads", ["estado"])
    op.create_index("ix_leads_fecha", "leads", ["fecha"])

    op.create_table(
        "uploads",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("filename", sa.String(255), nullable=False, unique=True),
        sa.Column("original_filename", sa.String(255), nullable=False),
        sa.Column("file_path", sa.Text(), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("alt_text", sa.Text(), nullable=True),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("folder", sa.String(50), nullable=False, server_default="otros"),
        _user_ref("uploaded_by"),
        *_timestamps(),
    )
    op.create_index("ix_uploads_folder", "uploads", ["folder"])


def downgrade() -> None:
    op.drop_table("uploads")
    op.drop_table("leads")
    op.drop_table("blog_posts")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_index("uq_plans_single_featured", table_name="plans")
    op.drop_table("plans")
    op.drop_table("services")
    op.drop_table("content")
    op.drop_table("users")
