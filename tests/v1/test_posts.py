# tests/v1/test_posts.py
"""Tests for post endpoints."""

from fastapi import status


def _create(client, headers, **overrides):
    payload = {"title": "Hello", "content": "<p>World</p>", "tags": ["greeting"]}
    payload.update(overrides)
    r = client.post("/api/v1/posts/", json=payload, headers=headers)
    assert r.status_code == status.HTTP_201_CREATED, r.text
    return r.json()


def test_create_post_defaults_to_draft(client, test_user, auth_token) -> None:
    post = _create(client, auth_token)
    assert post["status"] == "draft"
    assert post["owner"] == {"id": test_user.id, "username": "alice"}
    assert post["views"] == 0
    assert post["likes"] == [] and post["dislikes"] == []
    assert post["created_at"] == post["updated_at"]
    assert post["created_at"].endswith("+00:00")


def test_create_post_requires_auth(client) -> None:
    r = client.post("/api/v1/posts/", json={"title": "x", "content": "<p>y</p>"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json() == {"detail": "No token, authorization denied"}


def test_create_post_requires_title_and_text(client, auth_token) -> None:
    r = client.post("/api/v1/posts/", json={"title": "", "content": "<p>y</p>"}, headers=auth_token)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"detail": "Title and content are required"}

    r = client.post(
        "/api/v1/posts/",
        json={"title": "T", "content": "<p><br></p>"},
        headers=auth_token,
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_get_post_counts_views_and_includes_comments(client, auth_token, other_auth_token) -> None:
    post = _create(client, auth_token)
    client.post(
        f"/api/v1/posts/{post['id']}/comments",
        json={"content": "Great read"},
        headers=other_auth_token,
    )

    first = client.get(f"/api/v1/posts/{post['id']}").json()
    second = client.get(f"/api/v1/posts/{post['id']}").json()
    assert first["views"] == 1
    assert second["views"] == 2
    assert second["updated_at"] == post["updated_at"]
    assert [c["content"] for c in second["comments"]] == ["Great read"]
    assert second["comments"][0]["author"]["username"] == "bob"


def test_get_missing_or_malformed_post(client) -> None:
    assert client.get("/api/v1/posts/999").status_code == status.HTTP_404_NOT_FOUND
    r = client.get("/api/v1/posts/not-an-id")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json() == {"detail": "Post not found"}


def test_list_posts_filters(client, test_user, other_user, auth_token, other_auth_token) -> None:
    draft = _create(client, auth_token, title="Draft")
    live = _create(client, auth_token, title="Live", status="published")
    theirs = _create(client, other_auth_token, title="Theirs", status="published")

    everything = client.get("/api/v1/posts/").json()
    assert [p["id"] for p in everything] == [theirs["id"], live["id"], draft["id"]]

    published = client.get("/api/v1/posts/", params={"status": "published"}).json()
    assert [p["id"] for p in published] == [theirs["id"], live["id"]]

    mine = client.get("/api/v1/posts/", params={"user": test_user.id, "status": "draft"}).json()
    assert [p["id"] for p in mine] == [draft["id"]]


def test_list_posts_rejects_unknown_status(client) -> None:
    r = client.get("/api/v1/posts/", params={"status": "archived"})
    assert r.status_code == 422


def test_patch_is_sparse(client, auth_token) -> None:
    post = _create(client, auth_token, image_url="/uploads/a.png")
    r = client.patch(f"/api/v1/posts/{post['id']}", json={"tags": ["a", "b"]}, headers=auth_token)
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["tags"] == ["a", "b"]
    assert body["title"] == "Hello"
    assert body["image_url"] == "/uploads/a.png"


def test_publish_endpoint(client, auth_token, other_auth_token) -> None:
    post = _create(client, auth_token)

    r = client.post(f"/api/v1/posts/{post['id']}/publish", headers=other_auth_token)
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.post(
        f"/api/v1/posts/{post['id']}/publish",
        json={"title": "Hello again"},
        headers=auth_token,
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "published"
    assert r.json()["title"] == "Hello again"

    r = client.post(f"/api/v1/posts/{post['id']}/publish", headers=auth_token)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "published"


def test_delete_post_removes_comments(client, auth_token, other_auth_token) -> None:
    post = _create(client, auth_token)
    client.post(
        f"/api/v1/posts/{post['id']}/comments",
        json={"content": "bye"},
        headers=other_auth_token,
    )

    r = client.delete(f"/api/v1/posts/{post['id']}", headers=other_auth_token)
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json() == {"detail": "Not authorized to delete this post"}

    r = client.delete(f"/api/v1/posts/{post['id']}", headers=auth_token)
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"message": "Post deleted successfully"}
    assert client.get(f"/api/v1/posts/{post['id']}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/v1/posts/{post['id']}/comments").status_code == 404


def test_comment_validation(client, auth_token) -> None:
    post = _create(client, auth_token)
    r = client.post(f"/api/v1/posts/{post['id']}/comments", json={"content": " "}, headers=auth_token)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    r = client.post("/api/v1/posts/999/comments", json={"content": "hi"}, headers=auth_token)
    assert r.status_code == status.HTTP_404_NOT_FOUND
    r = client.post(f"/api/v1/posts/{post['id']}/comments", json={"content": "hi"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_like_and_dislike_endpoints(client, auth_token, other_user, other_auth_token) -> None:
    post = _create(client, auth_token, status="published")

    r = client.post(f"/api/v1/posts/{post['id']}/like", headers=other_auth_token)
    assert r.json() == {
        "likes": [other_user.id],
        "dislikes": [],
        "is_liked": True,
        "is_disliked": False,
    }

    r = client.post(f"/api/v1/posts/{post['id']}/dislike", headers=other_auth_token)
    assert r.json()["likes"] == []
    assert r.json()["dislikes"] == [other_user.id]

    r = client.post(f"/api/v1/posts/{post['id']}/like")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_publish_follow_and_react_walkthrough(client, db_session) -> None:
    tokens = {}
    for username, password in (("alice", "secret1"), ("bob", "secret2")):
        r = client.post(
            "/api/v1/auth/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "first_name": username.title(),
                "last_name": "Example",
                "password": password,
            },
        )
        assert r.status_code == status.HTTP_201_CREATED
        tokens[username] = {"x-auth-token": r.json()["token"]}

    alice_id = client.get("/api/v1/auth/me", headers=tokens["alice"]).json()["id"]
    bob_id = client.get("/api/v1/auth/me", headers=tokens["bob"]).json()["id"]

    p1 = _create(client, tokens["alice"], title="Hello", content="<p>World</p>")
    assert p1["status"] == "draft"

    r = client.patch(f"/api/v1/posts/{p1['id']}", json={"title": "Mine"}, headers=tokens["bob"])
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.patch(
        f"/api/v1/posts/{p1['id']}",
        json={"status": "published"},
        headers=tokens["alice"],
    )
    assert r.status_code == status.HTTP_200_OK

    fetched = client.get(f"/api/v1/posts/{p1['id']}").json()
    assert fetched["status"] == "published"
    assert fetched["updated_at"] != p1["updated_at"]
    assert fetched["created_at"] == p1["created_at"]

    r = client.post(f"/api/v1/users/{alice_id}/follow", headers=tokens["bob"])
    assert r.json()["is_following"] is True
    assert client.get("/api/v1/auth/me", headers=tokens["alice"]).json()["followers"] == [bob_id]
    assert client.get("/api/v1/auth/me", headers=tokens["bob"]).json()["following"] == [alice_id]

    r = client.post(f"/api/v1/posts/{p1['id']}/like", headers=tokens["bob"])
    assert r.json()["likes"] == [bob_id]

    r = client.post(f"/api/v1/posts/{p1['id']}/dislike", headers=tokens["bob"])
    assert r.json()["likes"] == []
    assert r.json()["dislikes"] == [bob_id]


def test_token_for_missing_account_cannot_create_posts(client, token_service, auth_token) -> None:
    _create(client, auth_token)
    orphaned = {"x-auth-token": token_service.issue(9999)}

    r = client.post("/api/v1/posts/", json={"title": "x", "content": "<p>y</p>"}, headers=orphaned)
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json() == {"detail": "Token is not valid"}

    r = client.get("/api/v1/posts/")
    assert r.status_code == status.HTTP_200_OK
    assert len(r.json()) == 1


def test_list_posts_with_malformed_owner_is_empty(client, auth_token) -> None:
    _create(client, auth_token)
    r = client.get("/api/v1/posts/", params={"user": "abc"})
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == []
