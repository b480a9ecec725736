import pytest
from datetime import timedelta

from beanie import PydanticObjectId

from taskboard.core.exceptions import Unauthenticated
from taskboard.core.security import authenticate

pytestmark = pytest.mark.anyio

UNAUTHORIZED = {"success": False, "error": "Not authorized"}


# ═══════════════════════════════════════════════════════
# AUTH GATE - every failure looks the same
# ═══════════════════════════════════════════════════════

async def test_missing_token_is_rejected(client):
    response = await client.get("/api/tasks")
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_non_bearer_scheme_is_rejected(client, user, token_for):
    response = await client.get("/api/tasks", headers={"Authorization": f"Basic {token_for(user.id)}"})
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


async def test_bad_signature_is_rejected(client, user, token_for):
    token = token_for(user.id, secret="not-the-shared-secret")
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


async def test_expired_token_is_rejected(client, user, token_for):
    token = token_for(user.id, expires_in=timedelta(minutes=-5))
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


async def test_garbage_token_is_rejected(client):
    response = await client.get("/api/tasks", headers={"Authorization": "Bearer not.a.jwt"})
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


async def test_unknown_user_is_rejected(client, token_for):
    token = token_for(PydanticObjectId())
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED


async def test_deleted_user_is_rejected(client, user, auth_headers):
    await user.delete()
    response = await client.get("/api/tasks", headers=auth_headers)
    assert response.status_code == 401


async def test_valid_token_passes(client, auth_headers):
    response = await client.get("/api/tasks", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True


async def test_legacy_id_claim_is_accepted(client, user, token_for):
    token = token_for(user.id, claim="id")
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


async def test_token_without_subject_is_rejected(client, user, token_for):
    token = token_for(user.id, claim="user")
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_me_returns_identity_without_password(client, user, auth_headers):
    response = await client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["_id"] == str(user.id)
    assert data["name"] == user.name
    assert data["email"] == user.email
    assert "password" not in data


async def test_authenticate_resolves_public_identity(user, token_for):
    identity = await authenticate(token_for(user.id))
    assert identity.id == user.id
    assert not hasattr(identity, "password")


async def test_authenticate_without_token_raises():
    with pytest.raises(Unauthenticated):
        await authenticate(None)
