"""Form endpoints."""

from fastapi import APIRouter

from orgforms.application.schemas import FormCreate, FormUpdate
from orgforms.infrastructure.dependencies import get_form_service
from orgforms.presentation.api.v1.endpoints.resource_routes import add_crud_routes

router = APIRouter(prefix="/forms", tags=["Forms"])

add_crud_routes(
    router,
    resource_type="forms",
    get_service=get_form_service,
    create_schema=FormCreate,
    update_schema=FormUpdate,
)
