"""Document loading and UI schema serialization."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from app.ui_schema.types import UiSchema

log = logging.getLogger(__name__)

SAMPLE_DOCUMENT = Path(__file__).parent / "samples" / "todo_openapi.yaml"


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Read an OpenAPI document from a JSON or YAML file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            document = json.load(f)
        else:
            document = yaml.safe_load(f)

    if not isinstance(document, dict):
        raise ValueError(f"{path} does not contain a mapping at the top level")

    log.info(f"Loaded OpenAPI document from {path}")
    return document


def load_sample_document() -> Dict[str, Any]:
    """The bundled Todo CRUD document."""
    return load_document(SAMPLE_DOCUMENT)


def dump_ui_schema(ui: UiSchema, indent: int = 2) -> str:
    return json.dumps(ui.to_dict(), indent=indent, ensure_ascii=False)
