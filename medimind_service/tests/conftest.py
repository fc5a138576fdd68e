import os
import tempfile

# must be set before anything under app/ is imported
_TMP_DIR = tempfile.mkdtemp(prefix="medimind-test-")
os.environ["MEDIMIND_DB_PATH"] = os.path.join(_TMP_DIR, "medimind.db")
os.environ["INTERNAL_SERVICE_SECRET"] = "test-secret"
os.environ["USE_LLM_EXTRACTION"] = "false"

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def client():
    from app.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth():
    return {"X-Internal-Key": "test-secret"}
