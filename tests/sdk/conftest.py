"""
Common fixtures for SDK tests.
This file contains fixtures shared across SDK test modules.
"""

import ast
import os
from pathlib import Path
from typing import AsyncGenerator, List, Set

import pytest

from petals_api_client.mock_transport import MockTransport
from petals_api_client.models import Model
from petals_api_client.session import InferenceSession

# =============================================================================
# File System Fixtures
# =============================================================================


def get_python_files(root_path: str) -> List[Path]:
    """Get all Python files under root_path, excluding cache directories."""
    python_files = []
    exclude_dirs = {"__pycache__", ".pytest_cache", ".ruff_cache"}

    for root, dirs, files in os.walk(root_path):
        dirs[:] = [d for d in dirs if d not in exclude_dirs]

        for file in files:
            if file.endswith(".py"):
                python_files.append(Path(root) / file)

    return python_files


@pytest.fixture(scope="class")
def python_files() -> List[Path]:
    """Get all Python files of the SDK package."""
    package_root = Path(__file__).parent.parent.parent / "sdk" / "petals_api_client"
    return get_python_files(str(package_root))


def extract_imports(file_path: Path) -> Set[str]:
    """Extract the top-level module names imported by a Python file."""
    imports = set()
    with open(file_path, "r", encoding="utf-8") as f:
        tree = ast.parse(f.read(), filename=str(file_path))

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                imports.add(node.module.split(".")[0])

    return imports


@pytest.fixture
def extract_imports_fixture():
    """Fixture to provide the extract_imports function for tests."""
    return extract_imports


# =============================================================================
# Transport Fixtures
# =============================================================================


@pytest.fixture
def mock_transport() -> MockTransport:
    """
    Provides a MockTransport with zero delay and predictable responses for fast testing.
    """
    predictable_responses = [
        "Test response 1",
        "Test response 2",
        "Test response 3",
    ]
    return MockTransport(token_delay=0, responses=predictable_responses)


@pytest.fixture
def scripted_transport() -> MockTransport:
    """
    Provides a MockTransport that never answers on its own; tests push frames.
    """
    return MockTransport(token_delay=0, auto_reply=False)


@pytest.fixture
async def session(
    mock_transport: MockTransport,
) -> AsyncGenerator[InferenceSession, None]:
    """
    Provides a session opened over the mock transport.
    """
    session = await InferenceSession.start(
        mock_transport, max_length=100, model=Model.LLAMA_2_70B_CHAT_HF
    )
    yield session
    await session.close()
