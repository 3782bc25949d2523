SUBMISSION = {
    "symbol": "nvda",
    "company_name": "NVIDIA Corporation",
    "sector": "Technology",
    "term": "long",
    "notes": "AI demand",
}


def _submit(client, user, auth_headers, payload=SUBMISSION):
    res = client.post("/api/v1/watchlist/submissions", json=payload, headers=auth_headers(user))
    assert res.status_code == 200
    return res.json()["data"]


def test_submit_approve_and_list(client, admin, alice, auth_headers):
    submission = _submit(client, alice, auth_headers)
    assert submission["status"] == "pending"

    res = client.post(
        f"/api/v1/watchlist/submissions/{submission['id']}/approve",
        json={"notes": "Strong pick"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200
    result = res.json()["data"]
    assert result["submission"]["status"] == "approved"
    assert result["submission"]["admin_notes"] == "Strong pick"
    assert result["entry"]["submission_id"] == submission["id"]

    res = client.get("/api/v1/watchlist", headers=auth_headers(alice))
    body = res.json()
    assert body["meta"]["total_count"] == 1
    tech = body["data"]["sectors"]["Technology"]
    assert [e["symbol"] for e in tech["long"]] == ["NVDA"]
    assert tech["short"] == []


def test_second_review_conflicts(client, admin, alice, auth_headers):
    submission = _submit(client, alice, auth_headers)
    url = f"/api/v1/watchlist/submissions/{submission['id']}"

    assert client.post(f"{url}/approve", headers=auth_headers(admin)).status_code == 200
    again = client.post(f"{url}/approve", headers=auth_headers(admin))
    deny = client.post(f"{url}/deny", headers=auth_headers(admin))

    assert again.status_code == 409
    assert again.json()["error"]["code"] == "CONFLICT_002"
    assert deny.status_code == 409
    entries = client.get("/api/v1/watchlist/entries", headers=auth_headers(alice)).json()
    assert entries["meta"]["count"] == 1


def test_non_admin_cannot_review(client, alice, bob, auth_headers):
    submission = _submit(client, alice, auth_headers)

    res = client.post(
        f"/api/v1/watchlist/submissions/{submission['id']}/approve",
        headers=auth_headers(bob),
    )

    assert res.status_code == 403
    assert res.json()["error"]["code"] == "AUTH_002"


def test_deny_leaves_watchlist_empty(client, admin, alice, auth_headers):
    submission = _submit(client, alice, auth_headers)

    res = client.post(
        f"/api/v1/watchlist/submissions/{submission['id']}/deny",
        headers=auth_headers(admin),
    )

    assert res.status_code == 200
    assert res.json()["data"]["entry"] is None
    mine = client.get("/api/v1/watchlist/submissions/me", headers=auth_headers(alice)).json()
    assert mine["data"][0]["status"] == "denied"


def test_pending_queue_filter(client, admin, alice, auth_headers):
    _submit(client, alice, auth_headers)

    res = client.get(
        "/api/v1/watchlist/submissions",
        params={"status": "pending"},
        headers=auth_headers(admin),
    )

    assert res.status_code == 200
    assert res.json()["meta"]["count"] == 1


def test_admin_entry_management(client, admin, alice, auth_headers):
    payload = {
        "symbol": "xom",
        "company_name": "Exxon Mobil",
        "sector": "Energy",
        "term": "short",
        "current_price": 110.25,
    }

    forbidden = client.post("/api/v1/watchlist/entries", json=payload, headers=auth_headers(alice))
    assert forbidden.status_code == 403

    res = client.post("/api/v1/watchlist/entries", json=payload, headers=auth_headers(admin))
    assert res.status_code == 200
    entry = res.json()["data"]
    assert entry["symbol"] == "XOM"

    res = client.patch(
        f"/api/v1/watchlist/entries/{entry['id']}",
        json={"target_price": 130},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert float(res.json()["data"]["target_price"]) == 130.0

    res = client.delete(f"/api/v1/watchlist/entries/{entry['id']}", headers=auth_headers(admin))
    assert res.status_code == 200


def test_sectors(client):
    res = client.get("/api/v1/watchlist/sectors")

    assert res.status_code == 200
    assert res.json()["data"]["sectors"][0] == "Technology"
