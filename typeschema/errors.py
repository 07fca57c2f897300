"""Exception types raised while loading and rendering type declarations."""

from __future__ import annotations

from enum import Enum
from typing import Any


class RenderError(Exception):
    """Base class for failures that abort a render pass."""


class UnhandledNodeError(RenderError, TypeError):
    """A node, statement, or option value outside the closed set reached a dispatch point."""

    def __init__(self, value: Any, message: str = "unhandled node"):
        self.value = value
        kind = getattr(value, "kind", None)
        if isinstance(kind, Enum):
            shown = f"{type(value).__name__} (kind {kind.value})"
        else:
            shown = repr(value)
        super().__init__(f"{message}: {shown}")


class InvalidSpecError(RenderError, ValueError):
    """Unknown JSON Schema dialect identifier."""

    def __init__(self, spec: Any):
        self.spec = spec
        super().__init__(f"invalid spec: {spec!r}")


class AstLoadError(RenderError, ValueError):
    """Serialized AST input could not be turned into nodes."""
