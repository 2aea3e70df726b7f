from datetime import date

from impactlog.core.time_utils import start_of_week
from conftest import GUEST_HEADERS, OWNER_HEADERS, win_payload


def test_reflection_defaults_to_current_week(client):
    r = client.post("/reflections/", json={"focusedOn": "Unblocking the data migration."}, headers=GUEST_HEADERS)
    assert r.status_code == 200, r.text
    assert r.json()["weekStartDate"] == start_of_week(date.today()).isoformat()

    current = client.get("/reflections/current", headers=GUEST_HEADERS)
    assert current.status_code == 200
    assert current.json()["focusedOn"] == "Unblocking the data migration."


def test_second_reflection_same_week_conflicts(client):
    body = {"weekStartDate": "2024-01-01", "learned": "Write things down early."}
    assert client.post("/reflections/", json=body, headers=OWNER_HEADERS).status_code == 200
    assert client.post("/reflections/", json=body, headers=OWNER_HEADERS).status_code == 409
    assert len(client.get("/reflections/", headers=OWNER_HEADERS).json()) == 1


def test_blank_reflection_rejected(client):
    r = client.post("/reflections/", json={"focusedOn": "   "}, headers=GUEST_HEADERS)
    assert r.status_code == 422


def test_profile_defaults_and_update(client):
    r = client.get("/profile", headers=GUEST_HEADERS)
    assert r.status_code == 200
    assert r.json()["role"] == "Professional"
    assert r.json()["email"] == GUEST_HEADERS["X-User-Email"]

    ur = client.put(
        "/profile",
        json={"role": "Senior TPM", "status": "Open to Work", "email": "spoofed@example.com"},
        headers=GUEST_HEADERS,
    )
    assert ur.status_code == 200, ur.text
    assert ur.json()["role"] == "Senior TPM"
    assert ur.json()["email"] == GUEST_HEADERS["X-User-Email"]
    assert client.get("/profile", headers=GUEST_HEADERS).json()["status"] == "Open to Work"


def test_owner_profile_lives_in_database(client):
    ur = client.put("/profile", json={"displayName": "Owner"}, headers=OWNER_HEADERS)
    assert ur.status_code == 200, ur.text
    assert client.get("/profile", headers=OWNER_HEADERS).json()["displayName"] == "Owner"


def test_clear_local_data(client):
    client.post("/wins/", json=win_payload(), headers=GUEST_HEADERS)
    assert client.delete("/profile/local-data", headers=GUEST_HEADERS).status_code == 200
    assert client.get("/wins/", headers=GUEST_HEADERS).json() == []

    # cloud-backed data cannot be wiped this way
    assert client.delete("/profile/local-data", headers=OWNER_HEADERS).status_code == 400


def test_dashboard_flags_guest(client):
    guest = client.get("/dashboard", headers=GUEST_HEADERS).json()
    assert guest["isGuest"] is True
    assert guest["persistence"] == "local"
    assert guest["storageAvailable"] is True
    assert guest["motivation"]

    owner = client.get("/dashboard", headers=OWNER_HEADERS).json()
    assert owner["isGuest"] is False
    assert owner["persistence"] == "cloud"
    assert owner["accessLevel"] == "privileged"


def test_export_backup(client):
    client.post("/wins/", json=win_payload(), headers=GUEST_HEADERS)
    r = client.get("/dashboard/export", headers=GUEST_HEADERS)
    assert r.status_code == 200
    assert "ImpactLog_Backup_" in r.headers["content-disposition"]
    data = r.json()
    assert len(data["wins"]) == 1
    assert data["profile"]["email"] == GUEST_HEADERS["X-User-Email"]
