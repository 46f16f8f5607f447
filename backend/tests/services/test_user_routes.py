"""User routes — registration upsert, profile, admin listing, roles and stats."""

from devconnect.models import User


async def test_register_new_user_returns_201(client, auth, fetch):
    resp = await client.put(
        "/api/v1/users",
        json={"name": "Alice", "photoURL": "https://img/a.png"},
        headers=auth("alice@x.com"),
    )
    assert resp.status_code == 201
    assert resp.json() == {
        "success": True, "message": "New user stored", "insertedId": "alice@x.com",
    }
    user = await fetch(User, "alice@x.com")
    assert user.photo_url == "https://img/a.png"
    assert user.role == "user"
    assert user.payment_status == "unpaid"


async def test_register_existing_user_returns_200(client, auth, seed_user):
    await seed_user("alice@x.com")
    resp = await client.put(
        "/api/v1/users", json={"name": "Other"}, headers=auth("alice@x.com"),
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "User already exists"}


async def test_register_falls_back_to_token_claims(client, auth, fetch):
    resp = await client.put(
        "/api/v1/users", json={},
        headers=auth("Carol@X.com", name="Carol", picture="c.png"),
    )
    assert resp.status_code == 201
    user = await fetch(User, "carol@x.com")
    assert user.name == "Carol"
    assert user.photo_url == "c.png"


async def test_register_requires_token(client):
    resp = await client.put("/api/v1/users", json={"name": "X"})
    assert resp.status_code == 401


async def test_me_returns_profile(client, auth, seed_user):
    await seed_user("alice@x.com", name="Alice", payment_status="paid")
    resp = await client.get("/api/v1/users/me", headers=auth("alice@x.com"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "alice@x.com"
    assert body["paymentStatus"] == "paid"
    assert body["role"] == "user"


async def test_me_for_unregistered_caller_is_404(client, auth):
    resp = await client.get("/api/v1/users/me", headers=auth("missing@x.com"))
    assert resp.status_code == 404


async def test_list_users_admin_only(client, auth, seed_user):
    await seed_user("boss@x.com", role="admin")
    await seed_user("alice@x.com", name="Alice")
    await seed_user("bob@x.com", name="Bob")

    resp = await client.get("/api/v1/users", headers=auth("alice@x.com"))
    assert resp.status_code == 403

    resp = await client.get("/api/v1/users", headers=auth("boss@x.com"))
    assert resp.status_code == 200
    assert resp.json()["pagination"]["total"] == 3

    resp = await client.get(
        "/api/v1/users", params={"search": "ali"}, headers=auth("boss@x.com"),
    )
    assert [u["email"] for u in resp.json()["users"]] == ["alice@x.com"]


async def test_admin_promotes_user(client, auth, seed_user, fetch):
    await seed_user("boss@x.com", role="admin")
    await seed_user("alice@x.com")

    resp = await client.patch(
        "/api/v1/users/admin",
        json={"email": "Alice@x.com", "role": "admin"},
        headers=auth("boss@x.com"),
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "User role updated to admin"
    assert (await fetch(User, "alice@x.com")).role == "admin"


async def test_redundant_role_change_is_400(client, auth, seed_user):
    await seed_user("boss@x.com", role="admin")
    await seed_user("alice@x.com")
    resp = await client.patch(
        "/api/v1/users/admin",
        json={"email": "alice@x.com", "role": "user"},
        headers=auth("boss@x.com"),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "REDUNDANT_UPDATE"


async def test_member_cannot_change_roles(client, auth, seed_user, fetch):
    await seed_user("alice@x.com")
    await seed_user("bob@x.com")
    resp = await client.patch(
        "/api/v1/users/admin",
        json={"email": "bob@x.com", "role": "admin"},
        headers=auth("alice@x.com"),
    )
    assert resp.status_code == 403
    assert (await fetch(User, "bob@x.com")).role == "user"


async def test_role_change_rejects_unknown_role(client, auth, seed_user):
    await seed_user("boss@x.com", role="admin")
    resp = await client.patch(
        "/api/v1/users/admin",
        json={"email": "alice@x.com", "role": "superuser"},
        headers=auth("boss@x.com"),
    )
    assert resp.status_code == 400


async def test_role_change_for_unknown_target_is_404(client, auth, seed_user):
    await seed_user("boss@x.com", role="admin")
    resp = await client.patch(
        "/api/v1/users/admin",
        json={"email": "missing@x.com", "role": "admin"},
        headers=auth("boss@x.com"),
    )
    assert resp.status_code == 404


async def test_admin_stats(client, auth, seed_user, seed_post, seed_comment):
    await seed_user("boss@x.com", role="admin")
    await seed_user("alice@x.com")
    post = await seed_post("alice@x.com")
    await seed_comment(post.id, "boss@x.com")
    await seed_comment(post.id, "boss@x.com", feedback="Spam")

    resp = await client.get("/api/v1/users/admin/stats", headers=auth("boss@x.com"))
    assert resp.status_code == 200
    assert resp.json() == {
        "users": 2, "posts": 1, "comments": 2, "reportedComments": 1,
    }
