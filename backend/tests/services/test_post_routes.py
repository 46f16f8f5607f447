"""Post routes — creation, listing, voting and deletion over HTTP."""

import uuid

from devconnect.models import Comment, Post, User


# ─── Create ──────────────────────────────────────────────────────

async def test_create_post_registers_author_lazily(client, auth, fetch):
    resp = await client.post(
        "/api/v1/posts",
        json={"title": "  Hello  ", "description": "Body", "tag": "Python"},
        headers=auth("new@x.com", name="Newbie"),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Post created"

    post = await fetch(Post, uuid.UUID(body["insertedId"]))
    assert post.title == "Hello"
    assert post.tag == "python"
    assert post.author_email == "new@x.com"
    assert post.author == "Newbie"
    assert (await fetch(User, "new@x.com")) is not None


async def test_blank_tag_stored_as_untagged(client, auth, fetch):
    resp = await client.post(
        "/api/v1/posts", json={"title": "Hi", "tag": "   "},
        headers=auth("new@x.com"),
    )
    assert resp.status_code == 201
    post = await fetch(Post, uuid.UUID(resp.json()["insertedId"]))
    assert post.tag is None


async def test_create_post_requires_token(client):
    resp = await client.post("/api/v1/posts", json={"title": "Hi"})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"


async def test_create_post_rejects_bad_token(client):
    resp = await client.post(
        "/api/v1/posts", json={"title": "Hi"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


async def test_create_post_blank_title_is_validation_error(client, auth):
    resp = await client.post(
        "/api/v1/posts", json={"title": "   "}, headers=auth("a@x.com"),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unpaid_member_capped_at_free_limit(client, auth, seed_user, seed_post):
    await seed_user("a@x.com")
    for i in range(5):
        await seed_post("a@x.com", title=f"P{i}")

    resp = await client.post(
        "/api/v1/posts", json={"title": "One more"}, headers=auth("a@x.com"),
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "POST_LIMIT_REACHED"


async def test_paid_member_not_capped(client, auth, seed_user, seed_post):
    await seed_user("a@x.com", payment_status="paid")
    for i in range(5):
        await seed_post("a@x.com", title=f"P{i}")

    resp = await client.post(
        "/api/v1/posts", json={"title": "One more"}, headers=auth("a@x.com"),
    )
    assert resp.status_code == 201


# ─── Read ────────────────────────────────────────────────────────

async def test_list_posts_filters_by_author_and_tag(client, seed_post):
    await seed_post("a@x.com", title="A1", tag="python")
    await seed_post("a@x.com", title="A2", tag="rust")
    await seed_post("b@x.com", title="B1", tag="python")

    resp = await client.get("/api/v1/posts", params={"email": "a@x.com"})
    assert resp.status_code == 200
    assert {p["title"] for p in resp.json()["posts"]} == {"A1", "A2"}
    assert resp.json()["pagination"]["total"] == 2

    resp = await client.get("/api/v1/posts", params={"tag": "python"})
    assert {p["title"] for p in resp.json()["posts"]} == {"A1", "B1"}


async def test_list_posts_search_matches_title_or_tag(client, seed_post):
    await seed_post("a@x.com", title="Async tips", tag="python")
    await seed_post("a@x.com", title="Borrow checker", tag="rust")

    resp = await client.get("/api/v1/posts", params={"search": "ASYNC"})
    assert [p["title"] for p in resp.json()["posts"]] == ["Async tips"]

    resp = await client.get("/api/v1/posts", params={"search": "rus"})
    assert [p["title"] for p in resp.json()["posts"]] == ["Borrow checker"]


async def test_list_posts_popularity_sort(client, seed_post):
    await seed_post("a@x.com", title="Meh", down_vote=["x@x.com"])
    await seed_post("a@x.com", title="Top", up_vote=["x@x.com", "y@x.com"])
    await seed_post("a@x.com", title="Ok", up_vote=["x@x.com"])

    resp = await client.get("/api/v1/posts", params={"sort": "popularity"})
    assert [p["title"] for p in resp.json()["posts"]] == ["Top", "Ok", "Meh"]


async def test_list_posts_pagination(client, seed_post):
    for i in range(3):
        await seed_post("a@x.com", title=f"P{i}")

    resp = await client.get("/api/v1/posts", params={"limit": 2, "offset": 2})
    body = resp.json()
    assert len(body["posts"]) == 1
    assert body["pagination"] == {"limit": 2, "offset": 2, "total": 3}


async def test_get_post_includes_vote_counts(client, seed_post):
    post = await seed_post("a@x.com", up_vote=["b@x.com"], down_vote=["c@x.com"])
    resp = await client.get(f"/api/v1/posts/{post.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["upVoteCount"] == 1
    assert body["downVoteCount"] == 1
    assert body["authorEmail"] == "a@x.com"


async def test_get_missing_post_is_404(client):
    resp = await client.get(f"/api/v1/posts/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_list_post_comments(client, seed_post, seed_comment):
    post = await seed_post("a@x.com")
    await seed_comment(post.id, "b@x.com", message="First")
    resp = await client.get(f"/api/v1/posts/{post.id}/comments")
    assert resp.status_code == 200
    assert [c["message"] for c in resp.json()] == ["First"]


# ─── Vote ────────────────────────────────────────────────────────

async def test_vote_toggles_and_persists(client, auth, seed_post, fetch):
    post = await seed_post("a@x.com")
    url = f"/api/v1/posts/{post.id}/vote"

    resp = await client.patch(url, json={"voteType": "upvote"}, headers=auth("b@x.com"))
    assert resp.status_code == 200
    assert resp.json() == {"upVoteCount": 1, "downVoteCount": 0}

    stored = await fetch(Post, post.id)
    assert stored.up_vote == ["b@x.com"]
    assert stored.vote_score == 1
    assert stored.vote_version == 1

    resp = await client.patch(url, json={"voteType": "downvote"}, headers=auth("b@x.com"))
    assert resp.json() == {"upVoteCount": 0, "downVoteCount": 1}

    resp = await client.patch(url, json={"voteType": "downvote"}, headers=auth("b@x.com"))
    assert resp.json() == {"upVoteCount": 0, "downVoteCount": 0}


async def test_vote_ignores_email_in_body(client, auth, seed_post, fetch):
    post = await seed_post("a@x.com")
    await client.patch(
        f"/api/v1/posts/{post.id}/vote",
        json={"voteType": "upvote", "email": "someone-else@x.com"},
        headers=auth("b@x.com"),
    )
    stored = await fetch(Post, post.id)
    assert stored.up_vote == ["b@x.com"]


async def test_vote_unknown_type_returns_current_counts(client, auth, seed_post, fetch):
    post = await seed_post("a@x.com", up_vote=["c@x.com"])
    resp = await client.patch(
        f"/api/v1/posts/{post.id}/vote",
        json={"voteType": "sideways"}, headers=auth("b@x.com"),
    )
    assert resp.status_code == 200
    assert resp.json() == {"upVoteCount": 1, "downVoteCount": 0}
    assert (await fetch(Post, post.id)).vote_version == 0


async def test_vote_requires_token(client, seed_post):
    post = await seed_post("a@x.com")
    resp = await client.patch(
        f"/api/v1/posts/{post.id}/vote", json={"voteType": "upvote"},
    )
    assert resp.status_code == 401


async def test_vote_on_missing_post_is_404(client, auth):
    resp = await client.patch(
        f"/api/v1/posts/{uuid.uuid4()}/vote",
        json={"voteType": "upvote"}, headers=auth("b@x.com"),
    )
    assert resp.status_code == 404


# ─── Delete ──────────────────────────────────────────────────────

async def test_owner_deletes_post_and_its_comments(
    client, auth, seed_post, seed_comment, fetch,
):
    post = await seed_post("a@x.com")
    comment = await seed_comment(post.id, "b@x.com")

    resp = await client.delete(f"/api/v1/posts/{post.id}", headers=auth("a@x.com"))
    assert resp.status_code == 200
    assert resp.json()["message"] == "Post deleted successfully"
    assert await fetch(Post, post.id) is None
    assert await fetch(Comment, comment.id) is None


async def test_admin_deletes_any_post(client, auth, seed_user, seed_post, fetch):
    await seed_user("boss@x.com", role="admin")
    post = await seed_post("a@x.com")
    resp = await client.delete(f"/api/v1/posts/{post.id}", headers=auth("boss@x.com"))
    assert resp.status_code == 200
    assert await fetch(Post, post.id) is None


async def test_other_member_cannot_delete_post(client, auth, seed_post, fetch):
    post = await seed_post("a@x.com")
    resp = await client.delete(f"/api/v1/posts/{post.id}", headers=auth("b@x.com"))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "NOT_RESOURCE_OWNER"
    assert await fetch(Post, post.id) is not None


async def test_delete_missing_post_is_404(client, auth):
    resp = await client.delete(f"/api/v1/posts/{uuid.uuid4()}", headers=auth("a@x.com"))
    assert resp.status_code == 404
