import os
import shutil
import tempfile

# Settings are read at import time, so configure them before importing the app
LOCAL_ROOT = tempfile.mkdtemp(prefix="impactlog-local-")
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["LOCAL_STORAGE_DIR"] = LOCAL_ROOT
os.environ["PRIVILEGED_EMAIL"] = "owner@impactlog.test"
os.environ["SNAPSHOT_TIMEOUT_SECONDS"] = "0.05"
os.environ["GEMINI_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from impactlog.main import app  # noqa: E402
from impactlog.db import Base, SessionLocal, engine  # noqa: E402
from impactlog.core.identity import AccessPolicy, Principal  # noqa: E402
from impactlog.storage.cloud import SnapshotHub  # noqa: E402

OWNER_EMAIL = "owner@impactlog.test"
OWNER = Principal(uid="owner-uid", email=OWNER_EMAIL, display_name="Owner")
GUEST = Principal(uid="guest-uid", email="guest@example.com", display_name="Guest")

OWNER_HEADERS = {"X-User-Id": OWNER.uid, "X-User-Email": OWNER.email}
GUEST_HEADERS = {"X-User-Id": GUEST.uid, "X-User-Email": GUEST.email}


def win_payload(**overrides) -> dict:
    payload = {
        "date": "2024-01-03",
        "category": "delivery",
        "situation": "Release was blocked by flaky integration tests.",
        "action": "I quarantined the flaky suites and added retries with owners.",
        "impact": "Release shipped on schedule with a green pipeline.",
        "impactType": "time-saved",
        "impactLevel": "High",
        "evidence": "https://ci.example.com/run/42",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def clean_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    shutil.rmtree(LOCAL_ROOT, ignore_errors=True)
    os.makedirs(LOCAL_ROOT, exist_ok=True)
    yield


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def session_factory():
    return SessionLocal


@pytest.fixture
def policy() -> AccessPolicy:
    return AccessPolicy(OWNER_EMAIL)


@pytest.fixture
def snapshot_hub() -> SnapshotHub:
    return SnapshotHub()
