from tests.conftest import create_user
from tests.test_registration import BASIC_INFO, PERMISSIONS, ROLE_SELECTION, VERIFICATION

DEVICE = {"X-Device-Id": "tablet-7"}


async def walk_to_verification(client):
    for stage, values in enumerate([BASIC_INFO, ROLE_SELECTION, PERMISSIONS], start=1):
        resp = await client.post(f"/registration/stages/{stage}", json=values, headers=DEVICE)
        assert resp.status_code == 200, resp.text
        resp = await client.post("/registration/next", headers=DEVICE)
        assert resp.status_code == 200
    return resp


async def test_device_header_is_required(client):
    assert (await client.get("/registration")).status_code == 422


async def test_initial_state(client):
    body = (await client.get("/registration", headers=DEVICE)).json()
    assert body["current_stage"] == 1
    assert body["can_advance"] is False
    assert body["can_go_back"] is False
    assert [s["title"] for s in body["stages"]] == [
        "Basic information", "Role and department", "Permissions", "Verification",
    ]


async def test_draft_survives_between_requests(client):
    resp = await client.patch("/registration/draft", json={"first_name": "Maria", "password": "s3cret-pass"}, headers=DEVICE)
    assert resp.status_code == 200
    body = (await client.get("/registration", headers=DEVICE)).json()
    assert body["data"]["first_name"] == "Maria"
    assert "password" not in body["data"]


async def test_invalid_stage_returns_field_errors(client):
    resp = await client.post("/registration/stages/1", json={**BASIC_INFO, "email": "nope"}, headers=DEVICE)
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["message"] == "Stage has invalid fields"
    assert detail["errors"][0]["field"] == "email"


async def test_cannot_advance_past_incomplete_stage(client):
    resp = await client.post("/registration/next", headers=DEVICE)
    assert resp.status_code == 400


async def test_full_registration_creates_account(client):
    resp = await walk_to_verification(client)
    assert resp.json()["current_stage"] == 4

    resp = await client.post("/registration/stages/4", json=VERIFICATION, headers=DEVICE)
    assert resp.status_code == 200

    resp = await client.post("/registration/submit", headers=DEVICE)
    assert resp.status_code == 201, resp.text
    account = resp.json()
    assert account["full_name"] == "Maria Souza"
    assert account["role"] == "administrator"
    assert account["department"] == "Operations"

    body = (await client.get("/registration", headers=DEVICE)).json()
    assert body["current_stage"] == 1
    assert body["data"]["first_name"] == ""

    resp = await client.post("/auth/login", json={"email": "maria.souza@fleet.com", "password": BASIC_INFO["password"]})
    assert resp.status_code == 200


async def test_submit_with_taken_email_keeps_draft(client, db):
    await create_user(db, "maria.souza@fleet.com")
    await walk_to_verification(client)
    await client.post("/registration/stages/4", json=VERIFICATION, headers=DEVICE)

    resp = await client.post("/registration/submit", headers=DEVICE)
    assert resp.status_code == 400
    assert resp.json()["detail"]["errors"][0]["field"] == "email"
    assert (await client.get("/registration", headers=DEVICE)).json()["current_stage"] == 4


async def test_previous(client):
    await client.post("/registration/stages/1", json=BASIC_INFO, headers=DEVICE)
    await client.post("/registration/next", headers=DEVICE)
    body = (await client.post("/registration/previous", headers=DEVICE)).json()
    assert body["current_stage"] == 1
    assert body["can_advance"] is True
