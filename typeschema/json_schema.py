"""JSON Schema renderer.

Maps a parsed file to a JSON Schema document in one of three dialects:

- Draft 07 (``definitions``, ``items``/``additionalItems`` tuples)
- Draft 2019-09 (``$defs``, ``unevaluatedProperties``)
- Draft 2020-12 (``$defs``, ``prefixItems`` tuples), the default

The transform is pure: no I/O happens here and the same AST with the same
options always yields the same text.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .annotations import to_annotations, to_constraints, to_default, to_read_only
from .definitions import Definition, Group, is_reference, is_strict_object
from .errors import InvalidSpecError, RenderError, UnhandledNodeError
from .models import (
    ArrayNode,
    ChildNode,
    DictionaryNode,
    EnumerationNode,
    ExportAssignmentNode,
    GroupNode,
    IntersectionNode,
    LiteralNode,
    RecordNode,
    ReferenceNode,
    RootNode,
    StatementNode,
    TokenKind,
    TokenNode,
    TupleNode,
    TypeDefinitionNode,
    UnionNode,
    is_reference_node,
)
from .references import (
    get_aliased_import_name,
    get_fully_qualified_name_as_path,
    get_relative_external_path,
    ignore_node,
)
from .renderer import RenderContext, Renderer

logger = logging.getLogger(__name__)

IGNORE_ENV = "json-schema"
FILE_EXTENSION = ".schema.json"

INTERSECTION_WARNING = (
    'The requested JSON Schema spec does not support intersecting record types with '
    '"additionalProperties" set to false, which will likely result in unexpected '
    'validation errors. Consider switching to a newer JSON Schema spec or do not use '
    'intersection types.'
)


class JsonSchemaSpec(str, Enum):
    DRAFT_07 = "Draft_07"
    DRAFT_2019_09 = "Draft_2019_09"
    DRAFT_2020_12 = "Draft_2020_12"


def parse_spec(value: Any) -> JsonSchemaSpec:
    try:
        return JsonSchemaSpec(value)
    except ValueError:
        raise InvalidSpecError(value) from None


@dataclass(frozen=True)
class JsonSchemaRendererOptions:
    spec: JsonSchemaSpec = JsonSchemaSpec.DRAFT_2020_12
    allow_additional_properties: bool = False

    def __post_init__(self):
        # Accept plain identifiers, reject anything outside the three dialects.
        object.__setattr__(self, "spec", parse_spec(self.spec))


# ---------------------------------------------------------------------------
# Dialect tables
# ---------------------------------------------------------------------------

def defs_key(spec: JsonSchemaSpec) -> str:
    if spec is JsonSchemaSpec.DRAFT_07:
        return "definitions"
    if spec in (JsonSchemaSpec.DRAFT_2019_09, JsonSchemaSpec.DRAFT_2020_12):
        return "$defs"
    raise InvalidSpecError(spec)


def schema_uri(spec: JsonSchemaSpec) -> str:
    if spec is JsonSchemaSpec.DRAFT_07:
        return "https://json-schema.org/draft-07/schema"
    if spec is JsonSchemaSpec.DRAFT_2019_09:
        return "https://json-schema.org/draft/2019-09/schema"
    if spec is JsonSchemaSpec.DRAFT_2020_12:
        return "https://json-schema.org/draft/2020-12/schema"
    raise InvalidSpecError(spec)


def is_unevaluated_properties_supported(spec: JsonSchemaSpec) -> bool:
    if spec is JsonSchemaSpec.DRAFT_07:
        return False
    if spec in (JsonSchemaSpec.DRAFT_2019_09, JsonSchemaSpec.DRAFT_2020_12):
        return True
    raise InvalidSpecError(spec)


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

def reference_to_pointer(node: ReferenceNode, file: RootNode, spec: JsonSchemaSpec) -> str:
    external_file_path = get_relative_external_path(node, file, FILE_EXTENSION)
    name = get_aliased_import_name(node, file) or get_fully_qualified_name_as_path(node, file)
    return f"{external_file_path}#/{defs_key(spec)}/{name}"


def node_to_definition(
    node: ChildNode,
    file: RootNode,
    options: JsonSchemaRendererOptions,
    is_read_only: bool = False,
) -> Definition:
    """Map one AST node to one schema definition.

    *is_read_only* comes from the enclosing record member and applies to this
    node only; nested calls compute their own.
    """
    spec = options.spec
    doc = getattr(node, "doc", None)

    if isinstance(node, RecordNode):
        members = [m for m in node.members if not ignore_node(m, IGNORE_ENV)]
        return {
            **to_annotations(doc),
            "type": "object",
            **to_default(doc),
            "properties": {
                member.identifier: node_to_definition(
                    member.value, file, options, is_read_only=member.is_read_only
                )
                for member in members
            },
            "required": [m.identifier for m in members if m.is_required],
            **to_constraints(doc, "object"),
            **to_read_only(is_read_only),
            "additionalProperties": options.allow_additional_properties,
        }

    if isinstance(node, DictionaryNode):
        if node.pattern is not None:
            return {
                **to_annotations(doc),
                "type": "object",
                **to_default(doc),
                "patternProperties": {
                    node.pattern: node_to_definition(node.children, file, options),
                },
                **to_constraints(doc, "object"),
                **to_read_only(is_read_only),
                "additionalProperties": options.allow_additional_properties,
            }
        return {
            **to_annotations(doc),
            "type": "object",
            **to_default(doc),
            "additionalProperties": node_to_definition(node.children, file, options),
            **to_constraints(doc, "object"),
            **to_read_only(is_read_only),
        }

    if isinstance(node, ArrayNode):
        return {
            **to_annotations(doc),
            "type": "array",
            **to_default(doc),
            "items": node_to_definition(node.children, file, options),
            **to_constraints(doc, "array"),
            **to_read_only(is_read_only),
        }

    if isinstance(node, TupleNode):
        return _tuple_to_definition(node, file, options, is_read_only)

    if isinstance(node, UnionNode):
        return {
            **to_annotations(doc),
            "oneOf": [node_to_definition(child, file, options) for child in node.children],
            **to_default(doc),
            **to_read_only(is_read_only),
        }

    if isinstance(node, IntersectionNode):
        return _intersection_to_definition(node, file, options, is_read_only)

    if isinstance(node, LiteralNode):
        return {
            **to_annotations(doc),
            "const": node.value,
            **to_default(doc),
            **to_read_only(is_read_only),
        }

    if isinstance(node, EnumerationNode):
        return _enumeration_to_definition(node, is_read_only)

    if isinstance(node, ReferenceNode):
        return {
            **to_annotations(doc),
            "$ref": reference_to_pointer(node, file, spec),
            **to_default(doc),
            **to_read_only(is_read_only),
        }

    if isinstance(node, TokenNode):
        return _token_to_definition(node, is_read_only)

    raise UnhandledNodeError(node)


def _tuple_to_definition(
    node: TupleNode,
    file: RootNode,
    options: JsonSchemaRendererOptions,
    is_read_only: bool,
) -> Definition:
    items = [node_to_definition(child, file, options) for child in node.children]
    spec = options.spec

    if spec in (JsonSchemaSpec.DRAFT_07, JsonSchemaSpec.DRAFT_2019_09):
        return {
            **to_annotations(node.doc),
            "type": "array",
            "items": items,
            **to_default(node.doc),
            "minItems": len(items),
            "maxItems": len(items),
            "additionalItems": False,
            **to_read_only(is_read_only),
        }
    if spec is JsonSchemaSpec.DRAFT_2020_12:
        return {
            **to_annotations(node.doc),
            "type": "array",
            "prefixItems": items,
            **to_default(node.doc),
            "minItems": len(items),
            "maxItems": len(items),
            "items": False,
            **to_read_only(is_read_only),
        }
    raise InvalidSpecError(spec)


def _intersection_to_definition(
    node: IntersectionNode,
    file: RootNode,
    options: JsonSchemaRendererOptions,
    is_read_only: bool,
) -> Definition:
    all_of: List[Definition] = [node_to_definition(child, file, options) for child in node.children]

    if all(is_strict_object(d) or is_reference(d) for d in all_of):
        if is_unevaluated_properties_supported(options.spec):
            # Each member's own closing flag would reject its siblings' properties;
            # the combined schema closes over all of them instead.
            narrowed = [
                {k: v for k, v in d.items() if not (k == "additionalProperties" and isinstance(v, bool))}
                for d in all_of
            ]
            return {
                **to_annotations(node.doc),
                "allOf": narrowed,
                **to_default(node.doc),
                **to_read_only(is_read_only),
                "type": "object",
                "unevaluatedProperties": not options.allow_additional_properties,
            }
        logger.warning(INTERSECTION_WARNING)

    return {
        **to_annotations(node.doc),
        "allOf": all_of,
        **to_default(node.doc),
        **to_read_only(is_read_only),
    }


def _enumeration_to_definition(node: EnumerationNode, is_read_only: bool = False) -> Definition:
    return {
        **to_annotations(node.doc),
        "enum": [case.value for case in node.children],
        **to_default(node.doc),
        **to_read_only(is_read_only),
    }


def _token_to_definition(node: TokenNode, is_read_only: bool) -> Definition:
    doc = getattr(node, "doc", None)

    if node.token is TokenKind.NUMBER:
        return {
            **to_annotations(doc),
            "type": "integer" if doc is not None and doc.tag("integer") else "number",
            **to_default(doc),
            **to_constraints(doc, "number"),
            **to_read_only(is_read_only),
        }
    if node.token is TokenKind.STRING:
        return {
            **to_annotations(doc),
            "type": "string",
            **to_default(doc),
            **to_constraints(doc, "string"),
            **to_read_only(is_read_only),
        }
    if node.token is TokenKind.BOOLEAN:
        return {
            **to_annotations(doc),
            "type": "boolean",
            **to_default(doc),
            **to_read_only(is_read_only),
        }
    raise UnhandledNodeError(node.token, "unhandled token kind")


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def statement_to_definition(
    node: StatementNode,
    file: RootNode,
    options: JsonSchemaRendererOptions,
) -> Optional[Definition]:
    """Map a top-level statement; ``None`` means it contributes no entry."""
    if isinstance(node, ExportAssignmentNode):
        return None

    if isinstance(node, TypeDefinitionNode):
        if ignore_node(node, IGNORE_ENV):
            return None
        return node_to_definition(node.definition, file, options)

    if isinstance(node, EnumerationNode):
        if ignore_node(node, IGNORE_ENV):
            return None
        return _enumeration_to_definition(node)

    if isinstance(node, GroupNode):
        if ignore_node(node, IGNORE_ENV):
            return None
        return Group(_collect_definitions(node.children.items(), file, options))

    raise UnhandledNodeError(node, "invalid statement")


def _collect_definitions(
    entries: Iterable[Tuple[str, StatementNode]],
    file: RootNode,
    options: JsonSchemaRendererOptions,
) -> Dict[str, Definition]:
    definitions: Dict[str, Definition] = {}
    for name, statement in entries:
        definition = statement_to_definition(statement, file, options)
        if definition is not None:
            definitions[name] = definition
    return definitions


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def to_forward_slash_absolute_path(path: str) -> str:
    parts = [p for p in path.replace("\\", "/").split("/") if p not in ("", ".")]
    return "/" + "/".join(parts)


def get_main_ref(file: RootNode, spec: JsonSchemaSpec) -> Optional[str]:
    """Top-level ``$ref``: the ``main`` tag wins, then a default export of a reference."""
    if file.doc is not None and file.doc.has_tag("main"):
        return f"#/{defs_key(spec)}/{file.doc.tag('main')}"

    default_export = file.default_export()
    if default_export is not None and is_reference_node(default_export.expression):
        return reference_to_pointer(default_export.expression, file, spec)

    return None


def build_document(file: RootNode, context: RenderContext, options: JsonSchemaRendererOptions) -> Dict[str, Any]:
    spec = options.spec
    document: Dict[str, Any] = {
        "$schema": schema_uri(spec),
        "$id": to_forward_slash_absolute_path(context.relative_path),
    }

    main_ref = get_main_ref(file, spec)
    if main_ref is not None:
        document["$ref"] = main_ref

    document[defs_key(spec)] = _collect_definitions(
        ((node.name, node) for node in file.children), file, options
    )
    return document


def serialize_document(document: Dict[str, Any]) -> str:
    try:
        text = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise RenderError(f"document is not valid JSON: {exc}") from exc
    return text.replace("\n", os.linesep) + os.linesep


def ast_to_json_schema(options: JsonSchemaRendererOptions):
    """Return a transformer bound to *options*."""

    def transform(file: RootNode, context: RenderContext) -> str:
        logger.debug("Rendering %s as %s", context.relative_path, options.spec.value)
        return serialize_document(build_document(file, context, options))

    return transform


def json_schema_renderer(
    spec: JsonSchemaSpec = JsonSchemaSpec.DRAFT_2020_12,
    allow_additional_properties: bool = False,
) -> Renderer:
    options = JsonSchemaRendererOptions(spec=spec, allow_additional_properties=allow_additional_properties)
    return Renderer(
        transformer=ast_to_json_schema(options),
        file_extension=FILE_EXTENSION,
        resolve_type_parameters=True,
    )
