"""JSON Schema definition shapes produced by the JSON Schema renderer.

Definitions are plain JSON-compatible dicts at runtime. The ``TypedDict``
classes below document the closed set of shapes; each mapped node yields
exactly one of them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, TypedDict, Union


class Annotated(TypedDict, total=False):
    title: str
    description: str
    default: Any
    readOnly: bool


class ObjectConstraints(TypedDict, total=False):
    minProperties: int
    maxProperties: int


class ArrayConstraints(TypedDict, total=False):
    minItems: int
    maxItems: int
    uniqueItems: bool


class NumberConstraints(TypedDict, total=False):
    minimum: float
    maximum: float
    exclusiveMinimum: float
    exclusiveMaximum: float
    multipleOf: float


class StringConstraints(TypedDict, total=False):
    minLength: int
    maxLength: int
    pattern: str
    format: str


class StrictObject(Annotated, ObjectConstraints, total=False):
    type: Literal["object"]
    properties: Dict[str, "Definition"]
    required: List[str]
    additionalProperties: bool


class PatternDictionary(Annotated, ObjectConstraints, total=False):
    type: Literal["object"]
    patternProperties: Dict[str, "Definition"]
    additionalProperties: bool


class Dictionary(Annotated, ObjectConstraints, total=False):
    type: Literal["object"]
    additionalProperties: "Definition"


class ArrayDefinition(Annotated, ArrayConstraints, total=False):
    type: Literal["array"]
    items: "Definition"


class Tuple07(Annotated, total=False):
    type: Literal["array"]
    items: List["Definition"]
    minItems: int
    maxItems: int
    additionalItems: bool


class Tuple202012(Annotated, total=False):
    type: Literal["array"]
    prefixItems: List["Definition"]
    minItems: int
    maxItems: int
    items: Literal[False]


class NumberDefinition(Annotated, NumberConstraints, total=False):
    type: Literal["number", "integer"]


class StringDefinition(Annotated, StringConstraints, total=False):
    type: Literal["string"]


class BooleanDefinition(Annotated, total=False):
    type: Literal["boolean"]


class UnionDefinition(Annotated, total=False):
    oneOf: List["Definition"]


class IntersectionDefinition(Annotated, total=False):
    type: Literal["object"]
    allOf: List["Definition"]
    unevaluatedProperties: bool


class Constant(Annotated, total=False):
    const: Union[str, int, float, bool]


class EnumDefinition(Annotated, total=False):
    enum: List[Union[str, int, float]]


# "$ref" is not a valid identifier, hence the functional form.
Reference = TypedDict("Reference", {"$ref": str}, total=False)


class Group(Dict[str, Any]):
    """Nested map of sibling definitions produced for a group statement.

    Not a schema itself; serializes as a plain JSON object.
    """


Definition = Union[
    StrictObject,
    PatternDictionary,
    Dictionary,
    ArrayDefinition,
    Tuple07,
    Tuple202012,
    NumberDefinition,
    StringDefinition,
    BooleanDefinition,
    UnionDefinition,
    IntersectionDefinition,
    Constant,
    EnumDefinition,
    Reference,
    Group,
]


def is_strict_object(definition: Any) -> bool:
    return isinstance(definition, dict) and not isinstance(definition, Group) and "properties" in definition


def is_reference(definition: Any) -> bool:
    return isinstance(definition, dict) and "$ref" in definition
