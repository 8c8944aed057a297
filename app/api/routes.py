from fastapi import APIRouter
from app.api.routes_health import router as health_router
from app.api.routes_ui_schema import router as ui_schema_router
from app.api.routes_mock import router as mock_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(ui_schema_router, tags=["ui-schema"])
router.include_router(mock_router, tags=["mock"])
