"""Pytest configuration and fixtures for typeschema tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from typeschema.json_schema import JsonSchemaRendererOptions, JsonSchemaSpec
from typeschema.models import (
    Doc,
    MemberNode,
    RecordNode,
    RootNode,
    TokenKind,
    TokenNode,
    TypeDefinitionNode,
)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Point config lookups at a per-test location so a developer's file never leaks in."""
    monkeypatch.setenv("TYPESCHEMA_CONFIG", str(tmp_path / "typeschema.toml"))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding serialized AST samples."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def root() -> RootNode:
    """An empty file at src/types/user.ts."""
    return RootNode(file_name="src/types/user.ts")


@pytest.fixture
def options_2020() -> JsonSchemaRendererOptions:
    return JsonSchemaRendererOptions(spec=JsonSchemaSpec.DRAFT_2020_12)


@pytest.fixture
def options_07() -> JsonSchemaRendererOptions:
    return JsonSchemaRendererOptions(spec=JsonSchemaSpec.DRAFT_07)


def string_token(**tags) -> TokenNode:
    return TokenNode(token=TokenKind.STRING, doc=Doc(tags=tags) if tags else None)


@pytest.fixture
def user_file() -> RootNode:
    """One record type ``User { id: string; note?: string }``."""
    record = RecordNode(members=[
        MemberNode(identifier="id", value=string_token(), is_required=True),
        MemberNode(identifier="note", value=string_token(), is_required=False),
    ])
    return RootNode(
        file_name="src/types/user.ts",
        children=[TypeDefinitionNode(name="User", definition=record)],
    )
