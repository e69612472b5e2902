import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Override env vars for testing
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["FLASK_ENV"] = "testing"
os.environ["STUDENT_API_KEY"] = "test-student-key"
os.environ["MASTER_TOKEN_KEY"] = "test-master-token-key"
os.environ.setdefault("RATELIMIT_STORAGE_URI", "memory://")


sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from roster import app as flask_app, db
from roster.admission import get_registration_ledger
from roster.extensions import limiter
from roster.utils.timestamp_codec import encode_timestamp

STUDENT_KEY = "test-student-key"
BROWSER_UA = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"


@pytest.fixture
def app():
    """Provide the Flask app instance for tests."""
    flask_app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI="sqlite:///:memory:",
        ENV="testing",
    )
    yield flask_app


@pytest.fixture
def client(app):
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    limiter.reset()
    get_registration_ledger(app).clear()
    client = flask_app.test_client()
    yield client
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def student_headers():
    """Student key plus a browser User-Agent, enough for read endpoints."""
    return {
        "Authorization": f"Bearer {STUDENT_KEY}",
        "User-Agent": BROWSER_UA,
    }


@pytest.fixture
def write_headers(student_headers):
    """Build headers for a write request with a freshly minted timestamp token."""
    def _make(**extra):
        headers = dict(student_headers)
        headers["X-SSAAM-TS"] = encode_timestamp()
        headers.update(extra)
        return headers
    return _make


@pytest.fixture
def student_payload():
    def _make(**overrides):
        payload = {
            "student_id": "21-A-00001",
            "first_name": "Ana",
            "middle_name": "",
            "last_name": "Cruz",
            "year_level": "1st year",
            "school_year": "2025-2026",
            "program": "BSIT",
            "semester": "1st",
            "email": "ana.cruz@example.edu",
        }
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def master_headers(client):
    """Create a master account and return headers carrying its token."""
    client.post("/apis/masters", json={"username": "admin", "password": "s3cret-pass"})
    resp = client.post("/apis/masters/login", json={"username": "admin", "password": "s3cret-pass"})
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}
