"""Load serialized AST files (JSON, as written by the parser) into node models."""

from __future__ import annotations

import json
import logging
import math
import posixpath
from pathlib import Path, PureWindowsPath
from typing import Any, Callable, Dict, List, Optional

from .errors import AstLoadError
from .models import (
    ArrayNode,
    ChildNode,
    DictionaryNode,
    Doc,
    EnumerationCase,
    EnumerationNode,
    ExportAssignmentNode,
    GroupNode,
    ImportBinding,
    IntersectionNode,
    LiteralNode,
    MemberNode,
    NodeKind,
    RecordNode,
    ReferenceNode,
    RootNode,
    StatementNode,
    TokenKind,
    TokenNode,
    TupleNode,
    TypeDefinitionNode,
    UnionNode,
)

logger = logging.getLogger(__name__)


def _require(data: Dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        raise AstLoadError(f"expected an object, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise AstLoadError(f"{data.get('kind', 'node')} is missing required field '{key}'") from None


def _require_list(data: Dict[str, Any], key: str) -> List[Any]:
    value = _require(data, key)
    if not isinstance(value, list):
        raise AstLoadError(f"{data.get('kind', 'node')} field '{key}' must be a list")
    return value


def _reject_constant(name: str) -> Any:
    raise AstLoadError(f"non-finite number {name} is not valid JSON")


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise AstLoadError(f"number {text} is out of range")
    return value


def _file_name(data: Dict[str, Any]) -> str:
    file_name = _require(data, "fileName")
    if not isinstance(file_name, str) or not file_name:
        raise AstLoadError("fileName must be a non-empty string")
    posix = file_name.replace("\\", "/")
    normalized = posixpath.normpath(posix)
    if posixpath.isabs(posix) or PureWindowsPath(file_name).drive or normalized == ".." or normalized.startswith("../"):
        raise AstLoadError(f"fileName must be relative to the project root: {file_name!r}")
    return file_name


def load_doc(data: Optional[Dict[str, Any]]) -> Optional[Doc]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise AstLoadError(f"jsDoc must be an object, got {type(data).__name__}")
    comment = data.get("comment")
    if comment is not None and not isinstance(comment, str):
        raise AstLoadError("jsDoc comment must be a string")
    tags = data.get("tags") or {}
    if not isinstance(tags, dict):
        raise AstLoadError("jsDoc tags must be an object")
    if comment is not None:
        comment = comment.replace("\r\n", "\n")
    try:
        return Doc(comment=comment, tags=dict(tags))
    except ValueError as exc:
        raise AstLoadError(str(exc)) from exc


def _children(data: Dict[str, Any]) -> List[ChildNode]:
    return [load_child_node(child) for child in _require_list(data, "children")]


def _load_record(data: Dict[str, Any]) -> RecordNode:
    members = [
        MemberNode(
            identifier=_require(m, "identifier"),
            value=load_child_node(_require(m, "value")),
            is_required=bool(m.get("isRequired", True)),
            is_read_only=bool(m.get("isReadOnly", False)),
            doc=load_doc(m.get("jsDoc")),
        )
        for m in _require_list(data, "members")
    ]
    return RecordNode(members=members, doc=load_doc(data.get("jsDoc")))


def _load_token(data: Dict[str, Any]) -> TokenNode:
    raw = _require(data, "token")
    try:
        token = TokenKind(raw)
    except ValueError:
        raise AstLoadError(f"Unknown token kind: {raw!r}") from None
    return TokenNode(token=token, doc=load_doc(data.get("jsDoc")))


def _load_reference(data: Dict[str, Any]) -> ReferenceNode:
    qualified = data.get("qualifiedName") or []
    if isinstance(qualified, str):
        qualified = qualified.split("/")
    if not isinstance(qualified, list):
        raise AstLoadError("Reference field 'qualifiedName' must be a list or a slash-separated string")
    return ReferenceNode(
        name=_require(data, "name"),
        qualified_name=list(qualified),
        source_file=data.get("sourceFile"),
        doc=load_doc(data.get("jsDoc")),
    )


def _load_enumeration(data: Dict[str, Any]) -> EnumerationNode:
    return EnumerationNode(
        name=_require(data, "name"),
        children=[
            EnumerationCase(value=_require(c, "value"), name=c.get("name"), doc=load_doc(c.get("jsDoc")))
            for c in _require_list(data, "children")
        ],
        doc=load_doc(data.get("jsDoc")),
    )


_CHILD_LOADERS: Dict[str, Callable[[Dict[str, Any]], ChildNode]] = {
    NodeKind.RECORD.value: _load_record,
    NodeKind.DICTIONARY.value: lambda d: DictionaryNode(
        children=load_child_node(_require(d, "children")),
        pattern=d.get("pattern"),
        doc=load_doc(d.get("jsDoc")),
    ),
    NodeKind.ARRAY.value: lambda d: ArrayNode(
        children=load_child_node(_require(d, "children")), doc=load_doc(d.get("jsDoc"))
    ),
    NodeKind.TUPLE.value: lambda d: TupleNode(children=_children(d), doc=load_doc(d.get("jsDoc"))),
    NodeKind.UNION.value: lambda d: UnionNode(children=_children(d), doc=load_doc(d.get("jsDoc"))),
    NodeKind.INTERSECTION.value: lambda d: IntersectionNode(children=_children(d), doc=load_doc(d.get("jsDoc"))),
    NodeKind.LITERAL.value: lambda d: LiteralNode(value=_require(d, "value"), doc=load_doc(d.get("jsDoc"))),
    NodeKind.REFERENCE.value: _load_reference,
    NodeKind.TOKEN.value: _load_token,
    NodeKind.ENUMERATION.value: _load_enumeration,
}


def load_child_node(data: Dict[str, Any]) -> ChildNode:
    kind = data.get("kind") if isinstance(data, dict) else None
    loader = _CHILD_LOADERS.get(kind) if isinstance(kind, str) else None
    if loader is None:
        raise AstLoadError(f"Unknown child node kind: {kind!r}")
    return loader(data)


def load_statement_node(data: Dict[str, Any]) -> StatementNode:
    kind = data.get("kind") if isinstance(data, dict) else None

    if kind == NodeKind.TYPE_DEFINITION.value:
        return TypeDefinitionNode(
            name=_require(data, "name"),
            definition=load_child_node(_require(data, "definition")),
            doc=load_doc(data.get("jsDoc")),
        )
    if kind == NodeKind.ENUMERATION.value:
        return _load_enumeration(data)
    if kind == NodeKind.EXPORT_ASSIGNMENT.value:
        return ExportAssignmentNode(
            name=_require(data, "name"),
            expression=load_child_node(_require(data, "expression")),
            doc=load_doc(data.get("jsDoc")),
        )
    if kind == NodeKind.GROUP.value:
        children = _require(data, "children")
        if not isinstance(children, dict):
            raise AstLoadError("Group field 'children' must be an object keyed by name")
        return GroupNode(
            name=_require(data, "name"),
            children={key: load_statement_node(child) for key, child in children.items()},
            doc=load_doc(data.get("jsDoc")),
        )
    raise AstLoadError(f"Unknown statement kind: {kind!r}")


def load_root_node(data: Dict[str, Any]) -> RootNode:
    file_name = _file_name(data)
    imports = data.get("imports") or []
    if not isinstance(imports, list):
        raise AstLoadError("imports must be a list")
    return RootNode(
        file_name=file_name,
        children=[load_statement_node(child) for child in _require_list(data, "children")],
        doc=load_doc(data.get("jsDoc")),
        imports=[
            ImportBinding(
                local_name=_require(i, "localName"),
                imported_name=i.get("importedName", i.get("localName")),
                source_file=_require(i, "sourceFile"),
            )
            for i in imports
        ],
    )


def load_root_file(path: Path) -> RootNode:
    """Read and load one serialized AST file."""
    try:
        data = json.loads(
            path.read_text(encoding="utf-8"),
            parse_constant=_reject_constant,
            parse_float=_parse_float,
        )
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise AstLoadError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise AstLoadError(f"{path}: expected a JSON object at the top level")
    logger.debug("Loaded AST for %s", data.get("fileName", path))
    return load_root_node(data)
