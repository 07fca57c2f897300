"""Renderer contract shared by every output format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from .models import RootNode
from .references import strip_source_extension


@dataclass(frozen=True)
class RenderContext:
    """Per-file information passed to a transformer alongside the AST."""
    relative_path: str


AstTransformer = Callable[[RootNode, RenderContext], str]


@dataclass(frozen=True)
class Renderer:
    """An output format: a transformer plus the metadata the orchestrator needs.

    ``resolve_type_parameters`` asks the orchestrator to substitute generic
    type parameters before ``transformer`` runs.
    """
    transformer: AstTransformer
    file_extension: str
    resolve_type_parameters: bool = False


def output_path(relative_path: str, file_extension: str) -> str:
    """Replace the source extension of *relative_path* with *file_extension*."""
    return strip_source_extension(relative_path.replace("\\", "/")) + file_extension


def render_file(renderer: Renderer, file: RootNode) -> Tuple[str, str]:
    """Run *renderer* on *file*; returns ``(output relative path, text)``.

    The context carries the output path, which JSON Schema uses as ``$id``.
    """
    relative_path = output_path(file.file_name, renderer.file_extension)
    return relative_path, renderer.transformer(file, RenderContext(relative_path=relative_path))
