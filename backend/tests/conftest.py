"""Pytest configuration for BranchWrite backend tests."""
import sys
from pathlib import Path

import pytest

# Ensure the backend package is importable
backend_root = Path(__file__).resolve().parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from branchwrite.store import BranchWriteStore  # noqa: E402


@pytest.fixture
def data_dir(tmp_path):
    root = tmp_path / "store"
    root.mkdir()
    return root


@pytest.fixture
def store(data_dir):
    return BranchWriteStore(data_dir=str(data_dir), lock_timeout=5)
