"""Shared fixtures. Environment is pinned before fxhelper is imported."""

import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="fxhelper-tests-")
os.environ["SQLITE_PATH"] = os.path.join(_tmpdir, "journal.db")
for _var in ("HELPER_API_KEY", "OANDA_TOKEN", "OANDA_ACCOUNT_ID", "OANDA_ENV"):
    os.environ.pop(_var, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from fxhelper.main import app  # noqa: E402


@pytest.fixture
def client():
    """Test client with the application lifespan (database, broker client) running."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
