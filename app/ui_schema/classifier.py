"""Path/operation walker and CRUD classifier."""
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from app.core.workflow import CompileStage

log = logging.getLogger(__name__)

# Path item keys that hold operations, in OpenAPI path-item order
PATH_ITEM_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

_TEMPLATED_SEGMENT = re.compile(r"^\{[^}]+\}$")

# (method, is_item_path) -> CRUD action
_CRUD_TABLE = {
    ("GET", False): "list",
    ("GET", True): "read",
    ("POST", False): "create",
    ("PUT", True): "update",
    ("PATCH", True): "update",
    ("DELETE", True): "delete",
}


@dataclass(frozen=True)
class WalkedOperation:
    """An operation object together with where it was declared."""
    method: str
    path: str
    operation: Dict[str, Any]


def path_segments(path: str) -> List[str]:
    return [s for s in path.split("/") if s]


def is_templated(segment: str) -> bool:
    return bool(_TEMPLATED_SEGMENT.match(segment))


def is_item_path(path: str) -> bool:
    """True when the last path segment is a templated parameter, e.g. /users/{id}."""
    segments = path_segments(path)
    return bool(segments) and is_templated(segments[-1])


def is_collection_path(path: str) -> bool:
    return not is_item_path(path)


def classify(method: str, path: str) -> Optional[str]:
    """Map an HTTP method and path shape to a CRUD action, or None to discard."""
    return _CRUD_TABLE.get((method.upper(), is_item_path(path)))


def walk_operations(document: Dict[str, Any]) -> Iterator[WalkedOperation]:
    """Yield every declared operation: paths in declared order, methods in path-item order."""
    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        declared = {str(k).lower(): v for k, v in path_item.items()}
        for method in PATH_ITEM_METHODS:
            operation = declared.get(method)
            if not isinstance(operation, dict):
                continue
            yield WalkedOperation(method=method.upper(), path=path, operation=operation)


def classified_operations(document: Dict[str, Any]) -> Iterator[tuple]:
    """Yield (action, WalkedOperation) for every operation with a CRUD action."""
    for walked in walk_operations(document):
        action = classify(walked.method, walked.path)
        if action is None:
            log.debug(
                f"Skipping {walked.method} {walked.path}: no CRUD action",
                extra={"stage": CompileStage.CLASSIFY.value},
            )
            continue
        yield action, walked
