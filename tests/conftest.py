"""
Test configuration - ensures repo root is in sys.path and isolates state.

Every test gets its own AGENCY_OS_HOME under tmp_path so nothing reads
or writes the operator's real snapshot DB, and the process-wide state
store is reset afterwards.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import agency_os.*, api.*, cli.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from agency_os.state_store import reset_store  # noqa: E402
from tests.fixtures import NOW, seeded_snapshot  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point AGENCY_OS_HOME at a temp dir and drop the singleton store afterwards."""
    monkeypatch.setenv("AGENCY_OS_HOME", str(tmp_path / "agency_home"))
    monkeypatch.delenv("AGENCY_OS_DB", raising=False)
    yield
    reset_store()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def seeded():
    """Default workspace: Mozart House (Active Sprint), YZ Corp (Discovery)."""
    return seeded_snapshot()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "agency_os.db"
