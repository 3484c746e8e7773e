from tests.conftest import PASSWORD, auth_headers, create_user

NEW_USER = {
    "first_name": "ana",
    "last_name": "lima",
    "email": "ana@fleet.com",
    "phone": "11999990000",
    "password": "long-enough",
    "confirm_password": "long-enough",
}


async def test_register_and_login(client):
    resp = await client.post("/auth/register", json=NEW_USER)
    assert resp.status_code == 201
    body = resp.json()
    assert body["full_name"] == "Ana Lima"
    assert body["role"] == "standard"
    assert "hashed_password" not in body

    resp = await client.post("/auth/login", json={"email": "ana@fleet.com", "password": "long-enough"})
    assert resp.status_code == 200
    token = resp.json()
    assert token["token_type"] == "bearer"
    assert token["user"]["last_login"] is not None

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
    assert me.json()["email"] == "ana@fleet.com"


async def test_register_rejects_duplicate_email(client, user):
    resp = await client.post("/auth/register", json={**NEW_USER, "email": user.email})
    assert resp.status_code == 400


async def test_register_rejects_mismatched_passwords(client):
    resp = await client.post("/auth/register", json={**NEW_USER, "confirm_password": "something-else"})
    assert resp.status_code == 422


async def test_register_rejects_names_with_digits(client):
    resp = await client.post("/auth/register", json={**NEW_USER, "first_name": "An4"})
    assert resp.status_code == 422


async def test_login_with_wrong_password(client, user):
    resp = await client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert resp.status_code == 401


async def test_inactive_user_cannot_login_or_use_token(client, db):
    inactive = await create_user(db, "gone@fleet.com", is_active=False)
    resp = await client.post("/auth/login", json={"email": inactive.email, "password": PASSWORD})
    assert resp.status_code == 401
    assert (await client.get("/auth/me", headers=auth_headers(inactive))).status_code == 401


async def test_refresh_token_is_not_an_access_token(client, user):
    resp = await client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    refresh = resp.json()["refresh_token"]
    resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {refresh}"})
    assert resp.status_code == 401


async def test_protected_route_without_token(client):
    resp = await client.get("/drivers")
    assert resp.status_code in (401, 403)


async def test_logout(client, headers):
    resp = await client.post("/auth/logout", headers=headers)
    assert resp.status_code == 200
