import pytest


@pytest.fixture
def post(client, alice, auth_headers):
    res = client.post(
        "/api/v1/community/posts",
        json={"symbol": "tsla", "title": "Deliveries beat", "content": "Q3 looked strong"},
        headers=auth_headers(alice),
    )
    assert res.status_code == 200
    return res.json()["data"]


def test_create_and_list_posts(client, alice, post, auth_headers):
    assert post["symbol"] == "TSLA"
    assert post["author_id"] == alice.id

    res = client.get("/api/v1/community/posts", params={"symbol": "TSLA"}, headers=auth_headers(alice))

    assert res.status_code == 200
    assert res.json()["data"]["total_count"] == 1


def test_vote_and_revote(client, bob, post, auth_headers):
    url = f"/api/v1/community/posts/{post['id']}/vote"

    first = client.put(url, json={"short_term": "bullish", "long_term": "bullish"}, headers=auth_headers(bob))
    assert first.status_code == 200
    assert first.json()["data"]["counts"]["short_term"]["bullish"] == 1

    client.put(url, json={"short_term": "bearish", "long_term": "bullish"}, headers=auth_headers(bob))

    counts = client.get(f"/api/v1/community/posts/{post['id']}/votes", headers=auth_headers(bob)).json()["data"]
    assert counts["short_term"]["bullish"] == 0
    assert counts["short_term"]["bearish"] == 1
    assert counts["short_term"]["bearish_pct"] == 100.0
    assert counts["long_term"]["total"] == 1


def test_invalid_sentiment_rejected(client, bob, post, auth_headers):
    res = client.put(
        f"/api/v1/community/posts/{post['id']}/vote",
        json={"short_term": "moon", "long_term": "bullish"},
        headers=auth_headers(bob),
    )

    assert res.status_code == 422


def test_vote_on_missing_post(client, bob, auth_headers):
    res = client.put(
        "/api/v1/community/posts/999/vote",
        json={"short_term": "neutral", "long_term": "neutral"},
        headers=auth_headers(bob),
    )

    assert res.status_code == 404


def test_like_and_comment(client, bob, post, auth_headers):
    base = f"/api/v1/community/posts/{post['id']}"

    liked = client.post(f"{base}/like", headers=auth_headers(bob))
    assert liked.json()["data"]["like_count"] == 1
    assert client.post(f"{base}/like", headers=auth_headers(bob)).status_code == 409

    comment = client.post(f"{base}/comments", json={"content": "Agreed"}, headers=auth_headers(bob))
    assert comment.status_code == 200

    detail = client.get(base, headers=auth_headers(bob)).json()["data"]
    assert detail["like_count"] == 1
    assert detail["comment_count"] == 1
    assert detail["liked_by_me"] is True

    unliked = client.delete(f"{base}/like", headers=auth_headers(bob))
    assert unliked.json()["data"]["like_count"] == 0


def test_only_author_or_admin_deletes(client, admin, bob, post, auth_headers):
    url = f"/api/v1/community/posts/{post['id']}"

    assert client.delete(url, headers=auth_headers(bob)).status_code == 403
    assert client.delete(url, headers=auth_headers(admin)).status_code == 200
    assert client.get(url, headers=auth_headers(bob)).status_code == 404


def test_symbols(client, alice, post, auth_headers):
    res = client.get("/api/v1/community/symbols", headers=auth_headers(alice))

    assert res.json()["data"] == [{"symbol": "TSLA", "post_count": 1}]
