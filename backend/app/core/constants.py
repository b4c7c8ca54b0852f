"""Shared constants and enums used across the application."""

from enum import StrEnum


class UserRole(StrEnum):
    """Roles for authenticated back-office users."""

    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"


class UserStatus(StrEnum):
    """Account status; only ACTIVE users may authenticate."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class CatalogStatus(StrEnum):
    """Visibility of services, plans and products."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class EpisodeStatus(StrEnum):
    """Publication status of a podcast episode."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ContentStatus(StrEnum):
    """Publication status of a content section."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class LeadStatus(StrEnum):
    """Sales pipeline stage of a lead. Transitions are unrestricted."""

    NUEVO = "nuevo"
    CONTACTADO = "contactado"
    CALIFICADO = "calificado"
    CERRADO = "cerrado"


class UploadCategory(StrEnum):
    """Storage folder a file lands in, derived from its MIME type."""

    IMAGENES = "imagenes"
    AUDIO = "audio"
    VIDEO = "video"
    DOCUMENTOS = "documentos"
    OTROS = "otros"


EDITORS = frozenset({UserRole.ADMIN, UserRole.EDITOR})
ADMINS = frozenset({UserRole.ADMIN})

DEFAULT_LEAD_ORIGIN = "formulario-web"

SECTION_NAMES = {
    "inicio": "Página de Inicio",
    "nosotros": "Sobre Nosotros",
    "contacto": "Contacto",
    "footer": "Pie de Página",
    "fundacion": "Fundación BOOST",
    "boostcast": "Podcast BOOSTCAST",
    "planes_info": "Información de Planes",
    "tienda_info": "Información de Tienda",
}

BUSINESS_KEY_PATTERN = r"^[a-z0-9-]+$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

ALLOWED_UPLOAD_EXTENSIONS = frozenset(
    {".jpeg", ".jpg", ".png", ".gif", ".webp", ".svg", ".pdf", ".doc", ".docx", ".mp3", ".mp4", ".webm", ".wav"}
)
ALLOWED_UPLOAD_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "audio/mpeg",
        "audio/mp3",
        "audio/wav",
        "audio/x-wav",
        "audio/wave",
        "video/mp4",
        "video/webm",
        "audio/webm",
    }
)
