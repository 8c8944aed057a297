"""Command line interface for the UI schema compiler.

Usage:
    ui-schema compile openapi.yaml -o ui-schema.json
    ui-schema sample
    ui-schema preview openapi.yaml --entity User --rows 3
    ui-schema serve --port 8080
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from app.core.config import settings
from app.core.logging import configure_logging
from app.mock.records import create_seed_row, format_value
from app.ui_schema.errors import UnsupportedOpenApiVersionError
from app.ui_schema.loader import dump_ui_schema, load_document, load_sample_document
from app.ui_schema.parser import parse_openapi_to_ui_schema
from app.ui_schema.types import UiEntitySchema


def render_list_view(entity: UiEntitySchema, rows: int) -> str:
    """Plain-text table of seeded rows using the entity's list columns."""
    columns = list(entity.views.list_columns)
    if not columns:
        return f"{entity.title}: no list columns"

    headers = [entity.field(c).label if entity.field(c) else c for c in columns]
    body = []
    for i in range(rows):
        row = create_seed_row(entity, i)
        body.append([format_value(entity.field(c), row.get(c)) for c in columns])

    widths = [max(len(h), *(len(r[n]) for r in body)) if body else len(h) for n, h in enumerate(headers)]
    lines = [
        "  ".join(h.ljust(w) for h, w in zip(headers, widths)),
        "  ".join("-" * w for w in widths),
    ]
    for r in body:
        lines.append("  ".join(v.ljust(w) for v, w in zip(r, widths)))
    return "\n".join(lines)


def cmd_compile(args) -> int:
    ui = parse_openapi_to_ui_schema(load_document(args.document))
    text = dump_ui_schema(ui, indent=args.indent)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(ui.entities)} entities to {args.output}")
    else:
        print(text)
    return 0


def cmd_sample(args) -> int:
    print(dump_ui_schema(parse_openapi_to_ui_schema(load_sample_document()), indent=args.indent))
    return 0


def cmd_preview(args) -> int:
    ui = parse_openapi_to_ui_schema(load_document(args.document))
    entity = ui.entities.get(args.entity)
    if entity is None:
        known = ", ".join(sorted(ui.entities)) or "none"
        print(f"ERROR: unknown entity {args.entity!r} (known: {known})", file=sys.stderr)
        return 1
    print(render_list_view(entity, args.rows))
    return 0


def cmd_serve(args) -> int:
    import uvicorn
    uvicorn.run("app.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ui-schema", description="Compile OpenAPI v3 documents into UI schemas")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compile", help="Compile an OpenAPI document (YAML or JSON)")
    p.add_argument("document", help="Path to the OpenAPI document")
    p.add_argument("-o", "--output", help="Write the UI schema to this file instead of stdout")
    p.add_argument("--indent", type=int, default=2)
    p.set_defaults(func=cmd_compile)

    p = sub.add_parser("sample", help="Compile the bundled Todo sample document")
    p.add_argument("--indent", type=int, default=2)
    p.set_defaults(func=cmd_sample)

    p = sub.add_parser("preview", help="Print the list view of an entity with mock rows")
    p.add_argument("document", help="Path to the OpenAPI document")
    p.add_argument("--entity", required=True, help="Entity id, e.g. User")
    p.add_argument("--rows", type=int, default=3)
    p.set_defaults(func=cmd_preview)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default=settings.api_host)
    p.add_argument("--port", type=int, default=settings.api_port)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except UnsupportedOpenApiVersionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
