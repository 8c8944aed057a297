import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, HTTPException, Request
from app.schemas.ui import UiSchemaResponse
from app.ui_schema.errors import UnsupportedOpenApiVersionError
from app.ui_schema.parser import compile_to_dict

log = logging.getLogger(__name__)

router = APIRouter(prefix="/ui-schema")

@router.post("", response_model=UiSchemaResponse)
def compile_document(document: Dict[str, Any] = Body(..., examples=[{"openapi": "3.0.3", "paths": {}}])):
    try:
        return compile_to_dict(document)
    except UnsupportedOpenApiVersionError as e:
        log.warning(f"Rejected document: {e}")
        raise HTTPException(status_code=422, detail=str(e))

@router.get("", response_model=UiSchemaResponse)
def get_loaded_ui_schema(request: Request):
    return request.app.state.ui_schema.to_dict()
