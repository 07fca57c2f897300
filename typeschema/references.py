"""Reference resolution helpers shared by the renderers.

Everything here works on static path/name information already embedded in the
AST, so resolving a reference never depends on another file's render output.
"""

from __future__ import annotations

import posixpath
from typing import Any, List, Optional, Union

from .models import ReferenceNode, RootNode

_SOURCE_EXTENSIONS = (".d.ts", ".ts", ".tsx", ".mts", ".cts", ".json")


def strip_source_extension(path: str) -> str:
    for ext in _SOURCE_EXTENSIONS:
        if path.endswith(ext):
            return path[: -len(ext)]
    return posixpath.splitext(path)[0]


def get_relative_external_path(node: ReferenceNode, file: RootNode, extension: str) -> str:
    """Relative path from *file* to the file declaring the reference target.

    Returns an empty string when the target lives in *file* itself.
    """
    target = node.source_file
    if target is None or target == file.file_name:
        return ""

    base_dir = posixpath.dirname(file.file_name) or "."
    relative = posixpath.relpath(strip_source_extension(target) + extension, base_dir)
    if not relative.startswith("."):
        relative = "./" + relative
    return relative


def get_fully_qualified_name_as_path(node: ReferenceNode, file: RootNode) -> str:
    return "/".join(node.segments)


def get_aliased_import_name(node: ReferenceNode, file: RootNode) -> Optional[str]:
    """Pointer path using the exported name when the target was imported under an alias."""
    segments = node.segments
    binding = file.find_import(segments[0])
    if binding is None or binding.imported_name == binding.local_name:
        return None
    return "/".join([binding.imported_name, *segments[1:]])


def ignore_node(node: Any, env: str) -> bool:
    """Return True if the node's ``ignore`` tag excludes it from output *env*.

    The tag is either ``True`` (every output) or one or more environment names.
    """
    doc = getattr(node, "doc", None)
    if doc is None or not doc.has_tag("ignore"):
        return False

    value: Union[bool, str, List[str], None] = doc.tag("ignore")
    if value is True:
        return True
    if isinstance(value, str):
        return value == env
    if isinstance(value, (list, tuple)):
        return env in value
    return False
