"""Entity resolver: groups classified operations into entities.

Each operation is reduced to an immutable EntityDraft and folded into a
call-local map keyed by entity id. Nothing here outlives a single compile.
"""
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

from app.core.workflow import CompileStage
from app.ui_schema.classifier import WalkedOperation, is_templated, path_segments
from app.ui_schema.naming import singularize, to_pascal_case
from app.ui_schema.resolver import ref_name
from app.ui_schema.types import UiEndpoint

log = logging.getLogger(__name__)

FALLBACK_ENTITY_ID = "Entity"

_SUCCESS_STATUS = re.compile(r"^2(\d\d|XX)$", re.IGNORECASE)
_STRUCTURED_JSON = re.compile(r"^application/[^/]*\+json$")


@dataclass(frozen=True)
class OperationInfo:
    """Everything the entity resolver needs from one classified operation."""
    action: str
    method: str
    path: str
    operation_id: Optional[str]
    tags: Tuple[str, ...]
    response_schema: Optional[Dict[str, Any]]
    request_schema: Optional[Dict[str, Any]]


@dataclass(frozen=True)
class EntityDraft:
    id: str
    resource_path: str
    schema_name: Optional[str] = None
    endpoints: Dict[str, UiEndpoint] = field(default_factory=dict)
    candidates: Tuple[Dict[str, Any], ...] = ()


def resource_path(path: str) -> str:
    """First non-templated segment, e.g. /accounts/{id}/users -> /accounts."""
    for segment in path_segments(path):
        if not is_templated(segment):
            return f"/{segment}"
    return "/"


def narrower_resource_path(current: str, candidate: str) -> str:
    """Shorter path wins; equal lengths fall back to lexicographic order."""
    return min(current, candidate, key=lambda p: (len(p), p))


def _follow_component(document: Dict[str, Any], node: Any, section: str) -> Any:
    """Follow a `#/components/<section>/<name>` reference one level."""
    if not isinstance(node, dict):
        return None
    ref = node.get("$ref")
    if not isinstance(ref, str):
        return node
    prefix = f"#/components/{section}/"
    if not ref.startswith(prefix):
        return None
    components = document.get("components") or {}
    section_map = components.get(section) if isinstance(components, dict) else None
    if not isinstance(section_map, dict):
        return None
    target = section_map.get(ref[len(prefix):])
    return target if isinstance(target, dict) else None


def pick_success_status(responses: Dict[str, Any]) -> Optional[str]:
    codes = [str(code) for code in responses]
    if "200" in codes:
        return "200"
    success = sorted(c for c in codes if _SUCCESS_STATUS.match(c))
    return success[0] if success else None


def pick_content_type(content: Dict[str, Any]) -> Optional[str]:
    if not content:
        return None
    if "application/json" in content:
        return "application/json"
    structured = sorted(ct for ct in content if _STRUCTURED_JSON.match(ct))
    if structured:
        return structured[0]
    if "application/vnd.api+json" in content:
        return "application/vnd.api+json"
    return sorted(content)[0]


def _body_schema(body: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(body, dict):
        return None
    content = body.get("content")
    if not isinstance(content, dict):
        return None
    content = {str(k): v for k, v in content.items()}
    media = content.get(pick_content_type(content))
    if not isinstance(media, dict):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, dict) else None


def response_schema(document: Dict[str, Any], operation: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None
    responses = {str(k): v for k, v in responses.items()}
    status = pick_success_status(responses)
    if status is None:
        return None
    return _body_schema(_follow_component(document, responses[status], "responses"))


def request_schema(document: Dict[str, Any], operation: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _body_schema(_follow_component(document, operation.get("requestBody"), "requestBodies"))


def schema_name(schema: Optional[Dict[str, Any]]) -> Optional[str]:
    """Component name a body schema refers to; inline arrays are unwrapped first."""
    if not isinstance(schema, dict):
        return None
    if "$ref" not in schema and schema.get("type") == "array":
        schema = schema.get("items")
    return ref_name(schema)


def describe_operation(document: Dict[str, Any], action: str, walked: WalkedOperation) -> OperationInfo:
    operation = walked.operation
    tags = operation.get("tags")
    operation_id = operation.get("operationId")
    return OperationInfo(
        action=action,
        method=walked.method,
        path=walked.path,
        operation_id=operation_id if isinstance(operation_id, str) else None,
        tags=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
        response_schema=response_schema(document, operation),
        request_schema=request_schema(document, operation),
    )


def _id_from_response(op: OperationInfo) -> Optional[str]:
    return schema_name(op.response_schema)


def _id_from_request(op: OperationInfo) -> Optional[str]:
    return schema_name(op.request_schema)


def _id_from_tag(op: OperationInfo) -> Optional[str]:
    if op.tags:
        return to_pascal_case(op.tags[0]) or None
    return None


def _id_from_path(op: OperationInfo) -> Optional[str]:
    names = [s for s in path_segments(op.path) if not is_templated(s)]
    if not names:
        return FALLBACK_ENTITY_ID
    return to_pascal_case(singularize(names[-1])) or FALLBACK_ENTITY_ID


# Tried in order; the first non-None result is the entity id
ENTITY_ID_STRATEGIES: Sequence[Callable[[OperationInfo], Optional[str]]] = (
    _id_from_response,
    _id_from_request,
    _id_from_tag,
    _id_from_path,
)


def entity_id(op: OperationInfo) -> str:
    for strategy in ENTITY_ID_STRATEGIES:
        result = strategy(op)
        if result:
            return result
    return FALLBACK_ENTITY_ID


def merge_operation(draft: Optional[EntityDraft], op: OperationInfo) -> EntityDraft:
    """Fold one operation into an entity draft, returning a new draft."""
    identity = entity_id(op)
    path = resource_path(op.path)
    endpoint = UiEndpoint(method=op.method, path=op.path, operation_id=op.operation_id)
    found_name = _id_from_response(op) or _id_from_request(op)
    candidates = tuple(s for s in (op.response_schema, op.request_schema) if s is not None)

    if draft is None:
        return EntityDraft(
            id=identity,
            resource_path=path,
            schema_name=found_name,
            endpoints={op.action: endpoint},
            candidates=candidates,
        )

    return replace(
        draft,
        resource_path=narrower_resource_path(draft.resource_path, path),
        schema_name=draft.schema_name or found_name,
        endpoints={**draft.endpoints, op.action: endpoint},
        candidates=draft.candidates + candidates,
    )


def accumulate_entities(operations: Iterable[OperationInfo]) -> Dict[str, EntityDraft]:
    drafts: Dict[str, EntityDraft] = {}
    for op in operations:
        identity = entity_id(op)
        drafts[identity] = merge_operation(drafts.get(identity), op)
        log.debug(
            f"{op.method} {op.path} -> {identity}.{op.action}",
            extra={"entity": identity, "stage": CompileStage.RESOLVE_ENTITY.value},
        )
    return drafts
