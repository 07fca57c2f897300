"""AST data models consumed by the renderers.

Nodes are produced upstream by the type-declaration parser and are treated as
read-only for the duration of a render pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union


class NodeKind(str, Enum):
    RECORD = "Record"
    MEMBER = "Member"
    DICTIONARY = "Dictionary"
    ARRAY = "Array"
    TUPLE = "Tuple"
    UNION = "Union"
    INTERSECTION = "Intersection"
    LITERAL = "Literal"
    REFERENCE = "Reference"
    TOKEN = "Token"
    ENUMERATION = "Enumeration"
    ENUMERATION_CASE = "EnumerationCase"
    GROUP = "Group"
    TYPE_DEFINITION = "TypeDefinition"
    EXPORT_ASSIGNMENT = "ExportAssignment"


class TokenKind(str, Enum):
    NUMBER = "Number"
    STRING = "String"
    BOOLEAN = "Boolean"


# Closed set of doc-comment tags the parser types and the renderers read.
DOC_TAG_NAMES = frozenset({
    "title",
    "default",
    "integer",
    "main",
    "ignore",
    # number
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    # string
    "minLength",
    "maxLength",
    "pattern",
    "format",
    # object
    "minProperties",
    "maxProperties",
    # array
    "minItems",
    "maxItems",
    "uniqueItems",
})


@dataclass(frozen=True)
class Doc:
    """Doc-comment attachment: free text plus typed tag values."""
    comment: Optional[str] = None
    tags: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        unknown = set(self.tags) - DOC_TAG_NAMES
        if unknown:
            raise ValueError(f"Unrecognized doc tags: {', '.join(sorted(unknown))}")

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    def tag(self, name: str, default: Any = None) -> Any:
        return self.tags.get(name, default)


@dataclass(frozen=True)
class RecordNode:
    members: List[MemberNode] = field(default_factory=list)
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.RECORD


@dataclass(frozen=True)
class MemberNode:
    identifier: str
    value: ChildNode
    is_required: bool = True
    is_read_only: bool = False
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.MEMBER


@dataclass(frozen=True)
class DictionaryNode:
    children: ChildNode
    pattern: Optional[str] = None
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.DICTIONARY


@dataclass(frozen=True)
class ArrayNode:
    children: ChildNode
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.ARRAY


@dataclass(frozen=True)
class TupleNode:
    children: List[ChildNode] = field(default_factory=list)
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.TUPLE


@dataclass(frozen=True)
class UnionNode:
    children: List[ChildNode] = field(default_factory=list)
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.UNION


@dataclass(frozen=True)
class IntersectionNode:
    children: List[ChildNode] = field(default_factory=list)
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.INTERSECTION


@dataclass(frozen=True)
class LiteralNode:
    value: Union[str, int, float, bool]
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.LITERAL


@dataclass(frozen=True)
class ReferenceNode:
    """Reference to a declaration in this or another file.

    ``qualified_name`` names the target inside its declaring file, one segment
    per enclosing group. ``source_file`` is ``None`` for same-file targets.
    """
    name: str
    qualified_name: List[str] = field(default_factory=list)
    source_file: Optional[str] = None
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.REFERENCE

    @property
    def segments(self) -> List[str]:
        return list(self.qualified_name) or self.name.split(".")


@dataclass(frozen=True)
class TokenNode:
    token: TokenKind
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.TOKEN


@dataclass(frozen=True)
class EnumerationCase:
    value: Union[str, int, float]
    name: Optional[str] = None
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.ENUMERATION_CASE


@dataclass(frozen=True)
class EnumerationNode:
    name: str
    children: List[EnumerationCase] = field(default_factory=list)
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.ENUMERATION


@dataclass(frozen=True)
class TypeDefinitionNode:
    name: str
    definition: ChildNode
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.TYPE_DEFINITION


@dataclass(frozen=True)
class ExportAssignmentNode:
    name: str
    expression: ChildNode
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.EXPORT_ASSIGNMENT


@dataclass(frozen=True)
class GroupNode:
    """Named namespace of nested statements (keys are unique)."""
    name: str
    children: Dict[str, StatementNode] = field(default_factory=dict)
    doc: Optional[Doc] = None
    kind: ClassVar[NodeKind] = NodeKind.GROUP


@dataclass(frozen=True)
class ImportBinding:
    local_name: str
    imported_name: str
    source_file: str


@dataclass(frozen=True)
class RootNode:
    """A single parsed source file."""
    file_name: str
    children: List[StatementNode] = field(default_factory=list)
    doc: Optional[Doc] = None
    imports: List[ImportBinding] = field(default_factory=list)

    def default_export(self) -> Optional[ExportAssignmentNode]:
        for node in self.children:
            if isinstance(node, ExportAssignmentNode) and node.name == "default":
                return node
        return None

    def find_import(self, local_name: str) -> Optional[ImportBinding]:
        for binding in self.imports:
            if binding.local_name == local_name:
                return binding
        return None


ChildNode = Union[
    RecordNode,
    DictionaryNode,
    ArrayNode,
    TupleNode,
    UnionNode,
    IntersectionNode,
    LiteralNode,
    ReferenceNode,
    TokenNode,
    EnumerationNode,
]

StatementNode = Union[
    TypeDefinitionNode,
    EnumerationNode,
    GroupNode,
    ExportAssignmentNode,
]


def is_reference_node(node: Any) -> bool:
    return isinstance(node, ReferenceNode)
