"""Extraction of descriptive annotations and constraints from doc metadata."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .models import DOC_TAG_NAMES, Doc

# Closed key-set per constraint category. Keys must be recognized doc tags.
CONSTRAINTS_BY_TYPE: Dict[str, tuple] = {
    "number": ("maximum", "minimum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf"),
    "string": ("minLength", "maxLength", "format", "pattern"),
    "object": ("minProperties", "maxProperties"),
    "array": ("minItems", "maxItems", "uniqueItems"),
}

_untyped = {key for keys in CONSTRAINTS_BY_TYPE.values() for key in keys} - DOC_TAG_NAMES
if _untyped:
    raise RuntimeError(f"Constraint keys without a doc tag: {', '.join(sorted(_untyped))}")
del _untyped


def to_annotations(doc: Optional[Doc]) -> Dict[str, Any]:
    """``title`` and ``description``, each only when present."""
    result: Dict[str, Any] = {}
    if doc is None:
        return result
    if doc.tag("title") is not None:
        result["title"] = doc.tag("title")
    if doc.comment is not None:
        result["description"] = doc.comment
    return result


def to_default(doc: Optional[Doc]) -> Dict[str, Any]:
    # An explicit default of null is still a default.
    if doc is None or not doc.has_tag("default"):
        return {}
    return {"default": doc.tag("default")}


def to_read_only(is_read_only: bool) -> Dict[str, Any]:
    return {"readOnly": True} if is_read_only else {}


def to_constraints(doc: Optional[Doc], category: str) -> Dict[str, Any]:
    """Constraint keys of *category* that are present on *doc*, in declaration order."""
    try:
        keys = CONSTRAINTS_BY_TYPE[category]
    except KeyError:
        raise ValueError(f"Unknown constraint category: {category!r}") from None

    if doc is None:
        return {}
    return {key: doc.tag(key) for key in keys if doc.tag(key) is not None}
