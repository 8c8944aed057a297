import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.core.logging import configure_logging
from app.api.routes import router as api_router
from app.mock.store import MockBackend
from app.ui_schema.loader import load_document, load_sample_document
from app.ui_schema.parser import parse_openapi_to_ui_schema

configure_logging(settings.log_level)
log = logging.getLogger(__name__)


def load_ui_schema():
    """Load the configured OpenAPI document (or the bundled sample) and compile it."""
    if settings.document_path:
        document = load_document(settings.document_path)
    else:
        log.info("No document_path configured, serving the bundled sample document")
        document = load_sample_document()
    return parse_openapi_to_ui_schema(document)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    log.info("Starting API server...")
    try:
        ui = load_ui_schema()
        app.state.ui_schema = ui
        app.state.mock_backend = MockBackend.from_ui_schema(ui, settings.mock_seed_rows)
        log.info(f"API server startup complete, entities: {', '.join(sorted(ui.entities)) or '-'}")
    except Exception as e:
        log.error("API startup failed: %s", e, exc_info=True)
        raise
    yield
    # Shutdown
    log.info("Shutting down API server...")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan
)
app.include_router(api_router, prefix="/v1")
