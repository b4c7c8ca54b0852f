"""Request/response schemas for services, plans, products and podcast episodes."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import BUSINESS_KEY_PATTERN


class StatusRequest(BaseModel):
    status: str = Field(..., min_length=1)


class FeaturedRequest(BaseModel):
    featured: bool


# ── Services ──────────────────────────────────
class ServiceCreate(BaseModel):
    service_id: str = Field(..., min_length=1, max_length=100, pattern=BUSINESS_KEY_PATTERN)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image_url: str | None = None
    features: list[Any] = Field(default_factory=list)
    benefits: list[Any] = Field(default_factory=list)
    display_order: int = 0
    status: str | None = None


class ServiceUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None
    features: list[Any] | None = None
    benefits: list[Any] | None = None
    display_order: int | None = None
    status: str | None = None


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    service_id: str
    title: str
    description: str
    image_url: str | None
    features: list[Any]
    benefits: list[Any]
    display_order: int
    status: str
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class ServiceReorderItem(BaseModel):
    service_id: str = Field(..., min_length=1)
    order: int


class ServiceReorderRequest(BaseModel):
    order: list[ServiceReorderItem] = Field(..., min_length=1)


# ── Plans ─────────────────────────────────────
class PlanCreate(BaseModel):
    plan_id: str = Field(..., min_length=1, max_length=100, pattern=BUSINESS_KEY_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    price_currency: str = Field(default="USD", min_length=3, max_length=3)
    billing_period: str = "mes"
    description: str | None = None
    features: list[Any] = Field(default_factory=list)
    is_featured: bool = False
    cta_text: str = "Comenzar Ahora"
    notes: str | None = None
    display_order: int = 0
    status: str | None = None


class PlanUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    price: float | None = Field(default=None, ge=0)
    price_currency: str | None = Field(default=None, min_length=3, max_length=3)
    billing_period: str | None = None
    description: str | None = None
    features: list[Any] | None = None
    is_featured: bool | None = None
    cta_text: str | None = None
    notes: str | None = None
    display_order: int | None = None
    status: str | None = None


class PlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    plan_id: str
    name: str
    price: float
    price_currency: str
    billing_period: str
    description: str | None
    features: list[Any]
    is_featured: bool
    cta_text: str
    notes: str | None
    display_order: int
    status: str
    created_at: datetime
    updated_at: datetime


class PlanReorderItem(BaseModel):
    plan_id: str = Field(..., min_length=1)
    order: int


class PlanReorderRequest(BaseModel):
    order: list[PlanReorderItem] = Field(..., min_length=1)


# ── Products & categories ─────────────────────
class ProductCreate(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=100, pattern=BUSINESS_KEY_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    price_currency: str = Field(default="USD", min_length=3, max_length=3)
    image_url: str | None = None
    is_featured: bool = False
    features: list[Any] = Field(default_factory=list)
    includes: list[Any] = Field(default_factory=list)
    category_id: uuid.UUID | None = None
    display_order: int = 0
    status: str | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    price_currency: str | None = Field(default=None, min_length=3, max_length=3)
    image_url: str | None = None
    is_featured: bool | None = None
    features: list[Any] | None = None
    includes: list[Any] | None = None
    category_id: uuid.UUID | None = None
    display_order: int | None = None
    status: str | None = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: str
    name: str
    description: str | None
    price: float
    discount_price: float | None
    price_currency: str
    image_url: str | None
    is_featured: bool
    features: list[Any]
    includes: list[Any]
    category_id: uuid.UUID | None
    display_order: int
    status: str
    created_at: datetime
    updated_at: datetime


class ProductReorderItem(BaseModel):
    product_id: str = Field(..., min_length=1)
    order: int


class ProductReorderRequest(BaseModel):
    order: list[ProductReorderItem] = Field(..., min_length=1)


class CategoryCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100, pattern=BUSINESS_KEY_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    name: str
    description: str | None
    type: str


# ── Podcast episodes ──────────────────────────
class EpisodeCreate(BaseModel):
    episode_id: str = Field(..., min_length=1, max_length=100, pattern=BUSINESS_KEY_PATTERN)
    episode_number: int = Field(..., ge=0)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    publish_date: date | None = None
    duration: str | None = None
    guest_name: str | None = None
    guest_title: str | None = None
    cover_image_url: str | None = None
    audio_url: str | None = None
    is_featured: bool = False
    topics: list[Any] = Field(default_factory=list)
    display_order: int = 0
    status: str | None = None


class EpisodeUpdate(BaseModel):
    episode_number: int | None = Field(default=None, ge=0)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    publish_date: date | None = None
    duration: str | None = None
    guest_name: str | None = None
    guest_title: str | None = None
    cover_image_url: str | None = None
    audio_url: str | None = None
    is_featured: bool | None = None
    topics: list[Any] | None = None
    display_order: int | None = None
    status: str | None = None


class EpisodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    episode_id: str
    episode_number: int
    title: str
    description: str | None
    publish_date: date | None
    duration: str | None
    guest_name: str | None
    guest_title: str | None
    cover_image_url: str | None
    audio_url: str | None
    is_featured: bool
    topics: list[Any]
    display_order: int
    status: str
    views_count: int
    author_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class EpisodeReorderItem(BaseModel):
    episode_id: str = Field(..., min_length=1)
    order: int


class EpisodeReorderRequest(BaseModel):
    order: list[EpisodeReorderItem] = Field(..., min_length=1)
