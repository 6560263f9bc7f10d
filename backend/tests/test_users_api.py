"""
Snapgram Backend — User & Friend API Tests
============================================

Profiles, selective profile edits and the mutual friend relation.
"""

import uuid

import pytest


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def friend_ids(client, token: str, user_id: str) -> set:
    response = await client.get(f"/api/user/profile/{user_id}", headers=bearer(token))
    assert response.status_code == 200
    return {friend["id"] for friend in response.json()["user"]["friends"]}


class TestProfile:

    @pytest.mark.asyncio
    async def test_profile_with_posts_newest_first(self, client, register_user, upload_post):
        token, user = await register_user("alice")
        older = await upload_post(token, caption="older")
        newer = await upload_post(token, caption="newer")

        response = await client.get(f"/api/user/profile/{user['id']}", headers=bearer(token))

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["username"] == "alice"
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]
        assert [p["id"] for p in body["posts"]] == [newer["id"], older["id"]]

    @pytest.mark.asyncio
    async def test_profile_of_someone_else(self, client, register_user):
        alice_token, _ = await register_user("alice")
        _, bob = await register_user("bob")

        response = await client.get(f"/api/user/profile/{bob['id']}", headers=bearer(alice_token))

        assert response.status_code == 200
        assert response.json()["user"]["id"] == bob["id"]
        assert response.json()["posts"] == []

    @pytest.mark.asyncio
    async def test_missing_profile(self, client, register_user):
        token, _ = await register_user("alice")

        response = await client.get(f"/api/user/profile/{uuid.uuid4()}", headers=bearer(token))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_all_users(self, client, register_user):
        token, _ = await register_user("alice")
        await register_user("bob")

        response = await client.get("/api/user/all", headers=bearer(token))

        assert response.status_code == 200
        users = response.json()
        assert {u["username"] for u in users} == {"alice", "bob"}
        assert all("password_hash" not in u for u in users)

    @pytest.mark.asyncio
    async def test_list_all_users_shows_friends_on_both_sides(self, client, register_user):
        alice_token, alice = await register_user("alice")
        _, bob = await register_user("bob")
        await client.post(f"/api/user/add-friend/{bob['id']}", headers=bearer(alice_token))

        response = await client.get("/api/user/all", headers=bearer(alice_token))

        assert response.status_code == 200
        friends = {u["id"]: {f["id"] for f in u["friends"]} for u in response.json()}
        assert friends == {alice["id"]: {bob["id"]}, bob["id"]: {alice["id"]}}


class TestEditProfile:

    @pytest.mark.asyncio
    async def test_only_present_fields_change(self, client, register_user):
        token, user = await register_user("alice")

        response = await client.put(
            "/api/user/profile/edit",
            headers=bearer(token),
            json={"description": "photographer"},
        )

        assert response.status_code == 200
        updated = response.json()["user"]
        assert updated["description"] == "photographer"
        assert updated["username"] == "alice"
        assert updated["profile_picture"] == ""

        second = await client.put(
            "/api/user/profile/edit",
            headers=bearer(token),
            json={"profile_picture": "/uploads/me.png"},
        )
        assert second.json()["user"]["description"] == "photographer"
        assert second.json()["user"]["profile_picture"] == "/uploads/me.png"

    @pytest.mark.asyncio
    async def test_rename(self, client, register_user):
        token, user = await register_user("alice")

        response = await client.put(
            "/api/user/profile/edit", headers=bearer(token), json={"username": "alice_b"}
        )

        assert response.status_code == 200
        profile = await client.get(f"/api/user/profile/{user['id']}", headers=bearer(token))
        assert profile.json()["user"]["username"] == "alice_b"

    @pytest.mark.asyncio
    async def test_rename_to_taken_username_conflicts(self, client, register_user):
        token, _ = await register_user("alice")
        await register_user("bob")

        response = await client.put(
            "/api/user/profile/edit", headers=bearer(token), json={"username": "bob"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_password_change_is_rehashed(self, client, register_user):
        token, _ = await register_user("alice", password="old-password")

        response = await client.put(
            "/api/user/profile/edit", headers=bearer(token), json={"password": "new-password"}
        )
        assert response.status_code == 200

        old = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "old-password"}
        )
        new = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "new-password"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, client, register_user):
        token, _ = await register_user("alice")

        response = await client.put(
            "/api/user/profile/edit", headers=bearer(token), json={"is_admin": True}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestFriends:

    @pytest.mark.asyncio
    async def test_add_friend_is_symmetric(self, client, register_user):
        alice_token, alice = await register_user("alice")
        bob_token, bob = await register_user("bob")

        response = await client.post(f"/api/user/add-friend/{bob['id']}", headers=bearer(alice_token))

        assert response.status_code == 200
        assert response.json()["message"] == "Friend added successfully"
        assert await friend_ids(client, alice_token, alice["id"]) == {bob["id"]}
        assert await friend_ids(client, bob_token, bob["id"]) == {alice["id"]}

    @pytest.mark.asyncio
    async def test_remove_friend_is_symmetric(self, client, register_user):
        alice_token, alice = await register_user("alice")
        bob_token, bob = await register_user("bob")
        await client.post(f"/api/user/add-friend/{bob['id']}", headers=bearer(alice_token))

        response = await client.delete(
            f"/api/user/remove-friend/{alice['id']}", headers=bearer(bob_token)
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Friend removed successfully"
        assert await friend_ids(client, alice_token, alice["id"]) == set()
        assert await friend_ids(client, bob_token, bob["id"]) == set()

    @pytest.mark.asyncio
    async def test_already_friends_rejected_from_either_side(self, client, register_user):
        alice_token, alice = await register_user("alice")
        bob_token, bob = await register_user("bob")
        await client.post(f"/api/user/add-friend/{bob['id']}", headers=bearer(alice_token))

        again = await client.post(f"/api/user/add-friend/{bob['id']}", headers=bearer(alice_token))
        reverse = await client.post(f"/api/user/add-friend/{alice['id']}", headers=bearer(bob_token))

        assert again.status_code == 400
        assert again.json()["error"] == "domain_rejection"
        assert reverse.status_code == 400
        assert await friend_ids(client, alice_token, alice["id"]) == {bob["id"]}

    @pytest.mark.asyncio
    async def test_cannot_befriend_yourself(self, client, register_user):
        token, user = await register_user("alice")

        response = await client.post(f"/api/user/add-friend/{user['id']}", headers=bearer(token))

        assert response.status_code == 400
        assert await friend_ids(client, token, user["id"]) == set()

    @pytest.mark.asyncio
    async def test_remove_non_friend_rejected(self, client, register_user):
        alice_token, _ = await register_user("alice")
        _, bob = await register_user("bob")

        response = await client.delete(
            f"/api/user/remove-friend/{bob['id']}", headers=bearer(alice_token)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "You are not friends with this user"

    @pytest.mark.asyncio
    async def test_unknown_target(self, client, register_user):
        token, _ = await register_user("alice")
        missing = uuid.uuid4()

        added = await client.post(f"/api/user/add-friend/{missing}", headers=bearer(token))
        removed = await client.delete(f"/api/user/remove-friend/{missing}", headers=bearer(token))

        assert added.status_code == 404
        assert removed.status_code == 404

    @pytest.mark.asyncio
    async def test_friend_summary_fields(self, client, register_user):
        alice_token, alice = await register_user("alice")
        bob_token, bob = await register_user("bob")
        await client.put(
            "/api/user/profile/edit", headers=bearer(bob_token), json={"description": "hi, I'm bob"}
        )
        await client.post(f"/api/user/add-friend/{bob['id']}", headers=bearer(alice_token))

        response = await client.get(f"/api/user/profile/{alice['id']}", headers=bearer(alice_token))

        friend = response.json()["user"]["friends"][0]
        assert friend["username"] == "bob"
        assert friend["description"] == "hi, I'm bob"
        assert "email" not in friend
