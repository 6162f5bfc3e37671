"""
Foodbabes Backend: User and Session Endpoint Tests
====================================================

What:  POST /users, POST /sessions, GET /users/current over HTTP.
"""

import pytest


async def _register(client, name="alice", password="pw123"):
    response = await client.post("/users", json={"name": name, "password": password})
    assert response.status_code == 201
    return response.json()


class TestRegisterEndpoint:

    @pytest.mark.asyncio
    async def test_register_shape(self, test_client):
        body = await _register(test_client)
        assert set(body) == {"id", "accessToken"}

    @pytest.mark.asyncio
    async def test_name_too_long(self, test_client):
        response = await test_client.post(
            "/users", json={"name": "abcdefghijk", "password": "pw"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Could not create user"
        assert body["errors"]["name"]["value"] == "abcdefghijk"

    @pytest.mark.asyncio
    async def test_password_never_echoed(self, test_client):
        body = await _register(test_client, password="hunter2")
        assert "hunter2" not in str(body)


class TestSessionEndpoint:

    @pytest.mark.asyncio
    async def test_login_returns_registration_token(self, test_client):
        created = await _register(test_client)

        response = await test_client.post("/sessions", json={"name": "alice", "password": "pw123"})

        assert response.status_code == 200
        assert response.json() == {"userId": created["id"], "accessToken": created["accessToken"]}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"name": "alice", "password": "nope"},
        {"name": "zed", "password": "pw123"},
        {"password": "pw123"},
    ])
    async def test_login_failures(self, test_client, payload):
        await _register(test_client)

        response = await test_client.post("/sessions", json=payload)

        assert response.status_code == 200
        assert response.json() == {"notFound": True}


class TestCurrentUserEndpoint:

    @pytest.mark.asyncio
    async def test_valid_token(self, test_client):
        created = await _register(test_client, name="bea")

        response = await test_client.get(
            "/users/current", headers={"Authorization": created["accessToken"]}
        )

        assert response.status_code == 200
        assert response.json() == {
            "_id": created["id"],
            "name": "bea",
            "accessToken": created["accessToken"],
        }

    @pytest.mark.asyncio
    async def test_bearer_prefix_accepted(self, test_client):
        created = await _register(test_client)

        response = await test_client.get(
            "/users/current", headers={"Authorization": f"Bearer {created['accessToken']}"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, {"Authorization": "not-a-real-token"}])
    async def test_missing_or_unknown_token(self, test_client, headers):
        await _register(test_client)

        response = await test_client.get("/users/current", headers=headers)

        assert response.status_code == 401
        assert response.json() == {"loggedOut": True, "message": "Please try logging in again!"}

    @pytest.mark.asyncio
    async def test_lookup_failure_is_403(self, test_client, database):
        created = await _register(test_client)
        await database.drop_all()

        response = await test_client.get(
            "/users/current", headers={"Authorization": created["accessToken"]}
        )

        assert response.status_code == 403
        body = response.json()
        assert body["message"] == "Access token is missing or wrong"
        assert body["error"] == "OperationalError"
