"""
Pytest configuration and shared fixtures for all wally-package-types tests.

The Lark parser is built once per session; it holds no per-file state
beyond the file being parsed, so sharing it across tests is safe.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))
from wally_package_types.frontend import Parser
from test_utils import WallyProject


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser (grammar is loaded once)."""
    return Parser()


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def project(tmp_path):
    """An empty Wally project (Packages folder, no sourcemap yet) under tmp_path."""
    return WallyProject(tmp_path)
