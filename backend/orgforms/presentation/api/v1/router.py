"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from orgforms.presentation.api.v1.endpoints.health import router as health_router
from orgforms.presentation.api.v1.endpoints.forms import router as forms_router
from orgforms.presentation.api.v1.endpoints.subforms import router as subforms_router
from orgforms.presentation.api.v1.endpoints.records import router as records_router
from orgforms.presentation.api.v1.endpoints.subrecords import router as subrecords_router
from orgforms.presentation.api.v1.endpoints.logs import router as logs_router
from orgforms.presentation.api.v1.endpoints.users import router as users_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(forms_router)
router.include_router(subforms_router)
router.include_router(records_router)
router.include_router(subrecords_router)
router.include_router(logs_router)
router.include_router(users_router)
