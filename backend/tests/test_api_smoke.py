from conftest import GUEST_HEADERS, OWNER_HEADERS, win_payload


def test_root_ok(client):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert "message" in data


def test_requires_principal(client):
    assert client.get("/wins/").status_code == 401
    assert client.post("/wins/", json=win_payload()).status_code == 401


def test_create_and_list_win(client):
    cr = client.post("/wins/", json=win_payload(), headers=GUEST_HEADERS)
    assert cr.status_code == 200, cr.text
    win = cr.json()
    assert win["id"]
    assert win["impactType"] == "time-saved"
    assert win["createdAt"] and win["updatedAt"]

    # list within range
    lr = client.get(
        "/wins/",
        params={"start_date": "2024-01-01", "end_date": "2024-01-07"},
        headers=GUEST_HEADERS,
    )
    assert lr.status_code == 200
    arr = lr.json()
    assert [w["id"] for w in arr] == [win["id"]]


def test_validation_rejects_short_text(client):
    r = client.post("/wins/", json=win_payload(situation="too short"), headers=GUEST_HEADERS)
    assert r.status_code == 422


def test_update_and_delete_win(client):
    win = client.post("/wins/", json=win_payload(), headers=OWNER_HEADERS).json()

    ur = client.put(
        f"/wins/{win['id']}",
        json={"impact": "Release shipped two days early with a green pipeline.", "date": "2024-01-04"},
        headers=OWNER_HEADERS,
    )
    assert ur.status_code == 200, ur.text
    assert ur.json()["date"] == "2024-01-04"
    assert ur.json()["situation"] == win["situation"]

    assert client.delete(f"/wins/{win['id']}", headers=OWNER_HEADERS).status_code == 200
    # second delete is a no-op
    assert client.delete(f"/wins/{win['id']}", headers=OWNER_HEADERS).status_code == 200
    assert client.get(f"/wins/{win['id']}", headers=OWNER_HEADERS).status_code == 404


def test_update_unknown_win_is_404(client):
    r = client.put("/wins/nope", json={"category": "risk"}, headers=GUEST_HEADERS)
    assert r.status_code == 404


def test_update_rejects_null_for_required_fields(client):
    for headers, field in ((GUEST_HEADERS, "date"), (OWNER_HEADERS, "category"), (GUEST_HEADERS, "impactType")):
        win = client.post("/wins/", json=win_payload(), headers=headers).json()

        r = client.put(f"/wins/{win['id']}", json={field: None}, headers=headers)
        assert r.status_code == 422, r.text

        stored = client.get(f"/wins/{win['id']}", headers=headers).json()
        assert stored[field] == win[field]


def test_update_null_impact_level_means_medium(client):
    for headers in (GUEST_HEADERS, OWNER_HEADERS):
        win = client.post("/wins/", json=win_payload(impactLevel="High"), headers=headers).json()

        r = client.put(f"/wins/{win['id']}", json={"impactLevel": None, "evidence": None}, headers=headers)
        assert r.status_code == 200, r.text
        assert r.json()["impactLevel"] == "Medium"
        assert r.json().get("evidence") is None


def test_guest_and_owner_data_are_separate(client):
    client.post("/wins/", json=win_payload(), headers=OWNER_HEADERS)
    assert client.get("/wins/", headers=GUEST_HEADERS).json() == []
    assert len(client.get("/wins/", headers=OWNER_HEADERS).json()) == 1


def test_stats_for_given_day(client):
    for d, category in [("2024-01-01", "delivery"), ("2024-01-07", "risk"), ("2024-01-08", "risk"), ("2024-02-01", "ai")]:
        client.post("/wins/", json=win_payload(date=d, category=category), headers=GUEST_HEADERS)

    r = client.get("/wins/stats", params={"today": "2024-01-03"}, headers=GUEST_HEADERS)
    assert r.status_code == 200
    assert r.json() == {"winsThisWeek": 2, "winsThisMonth": 3, "categoriesCovered": 2}


def test_manager_summary(client):
    client.post("/wins/", json=win_payload(date="2024-01-03"), headers=GUEST_HEADERS)
    r = client.get(
        "/wins/summary",
        params={"start_date": "2024-01-01", "end_date": "2024-01-31", "download": True},
        headers=GUEST_HEADERS,
    )
    assert r.status_code == 200
    assert r.text.startswith("📊 Impact Summary (Jan 1 - Jan 31, 2024)")
    assert "1. Delivery" in r.text
    assert "attachment" in r.headers["content-disposition"]

    empty = client.get(
        "/wins/summary",
        params={"start_date": "2023-01-01", "end_date": "2023-01-31"},
        headers=GUEST_HEADERS,
    )
    assert empty.status_code == 404


def test_weekly_counts_zero_fill(client):
    r = client.get("/wins/weekly_counts", params={"weeks": 4}, headers=GUEST_HEADERS)
    assert r.status_code == 200
    arr = r.json()
    assert len(arr) == 4
    assert all(p["count"] == 0 for p in arr)
