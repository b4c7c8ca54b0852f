"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `app/db/models/<table_name>.py`
    2. Import it here
"""

from app.db.models.base import Base
from app.db.models.blog_post import BlogPost
from app.db.models.category import Category
from app.db.models.content import Content
from app.db.models.lead import Lead
from app.db.models.plan import Plan
from app.db.models.product import Product
from app.db.models.service import Service
from app.db.models.upload import Upload
from app.db.models.user import User

__all__ = [
    "Base",
    "BlogPost",
    "Category",
    "Content",
    "Lead",
    "Plan",
    "Product",
    "Service",
    "Upload",
    "User",
]
