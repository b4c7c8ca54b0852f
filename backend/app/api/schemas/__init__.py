"""Request/response models for the BOOST API."""

from app.api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from app.api.schemas.content import ContentPartialUpdate, ContentResponse, ContentUpsert
from app.api.schemas.leads import LeadCreate, LeadResponse
from app.api.schemas.uploads import UploadResponse

__all__ = [
    "ContentPartialUpdate",
    "ContentResponse",
    "ContentUpsert",
    "LeadCreate",
    "LeadResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UploadResponse",
    "UserResponse",
]
