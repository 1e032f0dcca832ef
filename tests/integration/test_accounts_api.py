"""
Integration tests for users, the main university and the identity webhook.
"""

import base64
import json
import time
import uuid

import pytest

from app.api.v1.endpoints.webhooks import sign_payload, verify_signature
from app.core.config import settings
from app.core.exceptions import UnauthorizedError

USERS = "/api/v1/users"
UNI = "/api/v1/uni"
SECRET = "whsec_" + base64.b64encode(b"test-signing-key").decode()


def signed_headers(body: bytes, timestamp: int = None, message_id: str = "msg_1") -> dict:
    timestamp = str(timestamp if timestamp is not None else int(time.time()))
    return {
        "Content-Type": "application/json",
        "svix-id": message_id,
        "svix-timestamp": timestamp,
        "svix-signature": sign_payload(SECRET, message_id, timestamp, body),
    }


class TestAuthentication:

    async def test_missing_token_is_401(self, client):
        response = await client.get(f"{USERS}/me")
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authenticated"}

    async def test_bad_token_is_401(self, client):
        response = await client.get(f"{USERS}/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    async def test_first_sign_in_creates_guest(self, client):
        from app.dependencies import create_access_token

        token = create_access_token("new_visitor", email="visitor@example.com")
        response = await client.get(f"{USERS}/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        body = response.json()
        assert body["clerkId"] == "new_visitor"
        assert body["userType"] == "GUEST"
        assert body["college"] is None


class TestUserManagement:

    async def test_list_requires_admin(self, client, guest_headers):
        response = await client.get(USERS, headers=guest_headers)
        assert response.status_code == 403

    async def test_filter_by_role(self, client, admin_headers, super_admin_user):
        response = await client.get(USERS, params={"userType": "superadmin"}, headers=admin_headers)
        assert [u["clerkId"] for u in response.json()] == ["root_1"]

        listing = (await client.get(f"{USERS}/superadmins", headers=admin_headers)).json()
        assert listing["count"] == 1

    async def test_listing_includes_membership_and_created_colleges(
        self, client, admin_headers, admin_user
    ):
        created = (await client.post(
            "/api/v1/collage/create",
            json={"name": "Arts", "slug": "arts", "type": "ARTS"},
            headers=admin_headers,
        )).json()

        response = await client.get(USERS, params={"userType": "ADMIN"}, headers=admin_headers)
        assert response.status_code == 200
        [listed] = response.json()
        assert listed["id"] == str(admin_user.id)
        assert [c["id"] for c in listed["collegesCreated"]] == [created["id"]]
        assert "college" in listed

    async def test_role_change_needs_super_admin(self, client, admin_headers, make_user):
        target = await make_user("member_1")
        response = await client.patch(
            f"{USERS}/{target.id}/toggle-role", json={"role": "ADMIN"}, headers=admin_headers
        )
        assert response.status_code == 403

    async def test_role_change(self, client, super_admin_headers, make_user):
        target = await make_user("member_1")
        response = await client.patch(
            f"{USERS}/{target.id}/toggle-role", json={"role": "admin"}, headers=super_admin_headers
        )
        assert response.status_code == 200
        assert response.json()["userType"] == "ADMIN"

        again = await client.patch(
            f"{USERS}/{target.id}/toggle-role", json={"role": "ADMIN"}, headers=super_admin_headers
        )
        assert again.status_code == 400

    async def test_invalid_role(self, client, super_admin_headers, make_user):
        target = await make_user("member_1")
        response = await client.patch(
            f"{USERS}/{target.id}/toggle-role", json={"role": "OWNER"}, headers=super_admin_headers
        )
        assert response.status_code == 400

    async def test_move_to_college(self, client, super_admin_headers, make_user, college):
        target = await make_user("member_1")
        response = await client.patch(
            f"{USERS}/{target.id}/move-to-collage",
            json={"collegeId": str(college.id)},
            headers=super_admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["college"]["slug"] == college.slug

    async def test_delete_unknown_user(self, client, super_admin_headers):
        response = await client.delete(f"{USERS}/{uuid.uuid4()}/delete", headers=super_admin_headers)
        assert response.status_code == 404


class TestUniversity:

    async def test_missing_university_is_404(self, client):
        response = await client.get(UNI)
        assert response.status_code == 404

    async def test_create_edit_keeps_slug(self, client, super_admin_headers):
        created = await client.post(
            f"{UNI}/create", json={"name": "Helwan", "slug": "HNU"}, headers=super_admin_headers
        )
        assert created.status_code == 201

        edited = await client.post(
            f"{UNI}/edit",
            json={"name": "Helwan National", "slug": "OTHER", "description": "Est. 1975"},
            headers=super_admin_headers,
        )
        assert edited.status_code == 200
        university = edited.json()["university"]
        assert university["name"] == "Helwan National"
        assert university["slug"] == "HNU"

    async def test_delete_needs_confirmation(self, client, super_admin_headers):
        await client.post(
            f"{UNI}/create", json={"name": "Helwan", "slug": "HNU"}, headers=super_admin_headers
        )
        response = await client.post(
            f"{UNI}/delete", json={"confirmation": "yes"}, headers=super_admin_headers
        )
        assert response.status_code == 400
        assert (await client.get(UNI)).status_code == 200

    async def test_delete_removes_colleges_and_members(
        self, client, super_admin_headers, super_admin_user, make_user
    ):
        university = (await client.post(
            f"{UNI}/create", json={"name": "Helwan", "slug": "HNU"}, headers=super_admin_headers
        )).json()
        college = (await client.post(
            "/api/v1/collage/create",
            json={"name": "Eng", "slug": "eng", "type": "ENGINEERING", "universityId": university["id"]},
            headers=super_admin_headers,
        )).json()
        member = await make_user("member_1")
        for user_id in (member.id, super_admin_user.id):
            await client.patch(
                f"{USERS}/{user_id}/move-to-collage",
                json={"collegeId": college["id"]},
                headers=super_admin_headers,
            )

        response = await client.post(
            f"{UNI}/delete",
            json={"confirmation": f"DELETE_UNIVERSITY_{settings.UNIVERSITY_SLUG.upper()}"},
            headers=super_admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["deletedColleges"] == 1

        assert (await client.get(UNI)).status_code == 404
        assert (await client.get(f"/api/v1/collage/{college['id']}")).status_code == 404
        missing = await client.get(f"{USERS}/clerk/member_1", headers=super_admin_headers)
        assert missing.status_code == 404
        me = (await client.get(f"{USERS}/me", headers=super_admin_headers)).json()
        assert me["collegeId"] is None


class TestIdentityWebhook:

    async def test_user_created_event_syncs(self, client, admin_headers):
        event = {
            "type": "user.created",
            "data": {
                "id": "user_abc",
                "email_addresses": [{"email_address": "abc@example.com"}],
                "first_name": "Ada",
                "last_name": "Byron",
            },
        }
        response = await client.post("/api/v1/webhook/clerk", json=event)
        assert response.json() == {"status": "user synced"}

        user = (await client.get(f"{USERS}/clerk/user_abc", headers=admin_headers)).json()
        assert user["email"] == "abc@example.com"
        assert user["name"] == "Ada Byron"
        assert user["userType"] == "GUEST"

    async def test_repeat_event_is_idempotent(self, client, admin_headers):
        event = {"type": "session.created", "data": {"user_id": "user_abc"}}
        await client.post("/api/v1/webhook/clerk", json=event)
        await client.post("/api/v1/webhook/clerk", json=event)

        guests = (await client.get(USERS, params={"userType": "GUEST"}, headers=admin_headers)).json()
        assert [u["clerkId"] for u in guests] == ["user_abc"]

    async def test_other_events_ignored(self, client):
        response = await client.post(
            "/api/v1/webhook/clerk", json={"type": "user.deleted", "data": {"id": "user_abc"}}
        )
        assert response.json() == {"status": "ignored"}

    async def test_missing_id(self, client):
        response = await client.post("/api/v1/webhook/clerk", json={"type": "user.created", "data": {}})
        assert response.status_code == 400
        assert response.json()["error"] == "No user ID found"

    async def test_signature_checked_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CLERK_WEBHOOK_SECRET", SECRET)
        body = json.dumps({"type": "session.created", "data": {"user_id": "user_abc"}}).encode()

        unsigned = await client.post(
            "/api/v1/webhook/clerk", content=body, headers={"Content-Type": "application/json"}
        )
        assert unsigned.status_code == 401

        accepted = await client.post(
            "/api/v1/webhook/clerk", content=body, headers=signed_headers(body)
        )
        assert accepted.status_code == 200
        assert accepted.json() == {"status": "user synced"}

    async def test_tampered_body_is_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CLERK_WEBHOOK_SECRET", SECRET)
        signed = json.dumps({"type": "session.created", "data": {"user_id": "user_abc"}}).encode()
        sent = json.dumps({"type": "session.created", "data": {"user_id": "user_evil"}}).encode()

        response = await client.post(
            "/api/v1/webhook/clerk", content=sent, headers=signed_headers(signed)
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid webhook signature"

    async def test_stale_delivery_is_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CLERK_WEBHOOK_SECRET", SECRET)
        body = json.dumps({"type": "session.created", "data": {"user_id": "user_abc"}}).encode()

        response = await client.post(
            "/api/v1/webhook/clerk",
            content=body,
            headers=signed_headers(body, timestamp=int(time.time()) - 3600),
        )
        assert response.status_code == 401


class TestWebhookSignature:

    def test_accepts_any_listed_signature(self):
        body = b"{}"
        good = sign_payload(SECRET, "msg_1", "1700000000", body)
        verify_signature(SECRET, "msg_1", "1700000000", f"v1,bogus {good}", body, now=1700000000)

    def test_rejects_missing_headers(self):
        with pytest.raises(UnauthorizedError, match="Missing webhook signature headers"):
            verify_signature(SECRET, None, "1700000000", "v1,x", b"{}", now=1700000000)

    def test_rejects_non_numeric_timestamp(self):
        with pytest.raises(UnauthorizedError, match="Invalid webhook timestamp"):
            verify_signature(SECRET, "msg_1", "soon", "v1,x", b"{}", now=1700000000)
