"""OpenAPI v3 to UI schema compiler.

Given an already-parsed OpenAPI 3.x document, infers CRUD entities, their
fields, endpoints, and default list/detail/form views. The compile is pure:
the document is never mutated and no state survives the call.
"""
import logging
from typing import Any, Dict, List

from app.core.workflow import CompileStage
from app.ui_schema.classifier import classified_operations
from app.ui_schema.entities import EntityDraft, accumulate_entities, describe_operation
from app.ui_schema.errors import UnsupportedOpenApiVersionError
from app.ui_schema.fields import extract_fields
from app.ui_schema.naming import humanize
from app.ui_schema.resolver import component_schemas, schema_ref
from app.ui_schema.types import UiEntitySchema, UiField, UiSchema
from app.ui_schema.views import build_views, infer_primary_key

log = logging.getLogger(__name__)


def check_openapi_version(document: Any) -> str:
    """Fail fast unless `document` is a mapping declaring an OpenAPI 3.x version."""
    version = document.get("openapi") if isinstance(document, dict) else None
    if not isinstance(version, str) or not version.startswith("3."):
        raise UnsupportedOpenApiVersionError(version)
    return version


def _schema_sources(draft: EntityDraft) -> List[Any]:
    """Schemas to take fields from, best first."""
    sources: List[Any] = []
    if draft.schema_name is not None:
        sources.append(schema_ref(draft.schema_name))
    sources.extend(draft.candidates)
    return sources


def entity_fields(draft: EntityDraft, schemas: Dict[str, Any]) -> List[UiField]:
    for source in _schema_sources(draft):
        fields = extract_fields(source, schemas)
        if fields:
            return fields
    log.debug(
        "No usable schema; entity has no fields",
        extra={"entity": draft.id, "stage": CompileStage.EXTRACT_FIELDS.value},
    )
    return []


def build_entity(draft: EntityDraft, schemas: Dict[str, Any]) -> UiEntitySchema:
    fields = entity_fields(draft, schemas)
    primary_key = infer_primary_key([f.name for f in fields])
    views = build_views(fields, primary_key)
    log.debug(
        f"Built entity with {len(fields)} fields, primary key {primary_key}",
        extra={"entity": draft.id, "stage": CompileStage.BUILD_VIEWS.value},
    )
    return UiEntitySchema(
        id=draft.id,
        title=humanize(draft.id),
        resource_path=draft.resource_path,
        primary_key=primary_key,
        fields=tuple(fields),
        endpoints=dict(draft.endpoints),
        views=views,
    )


def parse_openapi_to_ui_schema(document: Dict[str, Any]) -> UiSchema:
    """Compile an OpenAPI 3.x document into a UiSchema.

    Args:
        document: Parsed OpenAPI document (e.g. from YAML or JSON)

    Returns:
        UiSchema with one entity per inferred CRUD resource

    Raises:
        UnsupportedOpenApiVersionError: if the `openapi` marker is missing or not 3.x
    """
    check_openapi_version(document)
    schemas = component_schemas(document)

    operations = (
        describe_operation(document, action, walked)
        for action, walked in classified_operations(document)
    )
    drafts = accumulate_entities(operations)

    entities = {
        entity_id: build_entity(drafts[entity_id], schemas)
        for entity_id in sorted(drafts)
    }
    log.info(f"Compiled UI schema with {len(entities)} entities", extra={"stage": CompileStage.WALK.value})
    return UiSchema(entities=entities)


def compile_to_dict(document: Dict[str, Any]) -> Dict[str, Any]:
    """Compile and return the JSON-serializable form."""
    return parse_openapi_to_ui_schema(document).to_dict()
