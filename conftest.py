import os
import tempfile

import pytest

# Runtime data (uploads, outputs, scratch) goes to a throwaway directory; must be
# set before classreplay.config is first imported.
os.environ.setdefault("CLASSREPLAY_DATA_DIR", tempfile.mkdtemp(prefix="classreplay-tests-"))


@pytest.fixture(autouse=True)
def mock_service_env(monkeypatch):
    """Fake credentials so configuration reports every service as configured"""
    monkeypatch.setenv("TAL_MLOPS_APP_ID", "mock-app")
    monkeypatch.setenv("TAL_MLOPS_APP_KEY", "mock-key")
    monkeypatch.setenv("VOLCENGINE_APP_ID", "mock-asr-app")
    monkeypatch.setenv("VOLCENGINE_ACCESS_TOKEN", "mock-asr-token")
