import os, tempfile, uuid, pytest

# settings are read at import time
os.environ["DB_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["EXPORT_DIR"] = tempfile.mkdtemp(prefix="ideaprint-exports-")
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret"
os.environ.pop("AUTH_TOKEN_URL", None)

from fastapi.testclient import TestClient
from ideaprint.deps import build_store
from ideaprint.main import app
from ideaprint.services.generator import mock_blueprint

@pytest.fixture
def client():
    return TestClient(app)

@pytest.fixture
def owner():
    return f"user-{uuid.uuid4().hex[:8]}"

@pytest.fixture
def headers(owner):
    return {"X-User-Id": owner}

@pytest.fixture
def store():
    return build_store("sqlite://")

@pytest.fixture
def blueprint():
    return mock_blueprint("Task Tracker", "A tool for teams")
