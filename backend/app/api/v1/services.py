"""Agency services catalog endpoints."""

from fastapi import APIRouter

from app.api.schemas.catalog import (
    ServiceCreate,
    ServiceReorderRequest,
    ServiceResponse,
    ServiceUpdate,
)
from app.api.v1.catalog import CatalogResource, register_catalog_routes
from app.repositories import services as service_repository

router = APIRouter(prefix="/servicios", tags=["Services"])

register_catalog_routes(
    router,
    CatalogResource(
        repository=service_repository.repository,
        label="Service",
        create_schema=ServiceCreate,
        update_schema=ServiceUpdate,
        response_schema=ServiceResponse,
        reorder_schema=ServiceReorderRequest,
    ),
)
