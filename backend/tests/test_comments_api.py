"""
Snapgram Backend — Comment API Tests
======================================
"""

import uuid

import pytest


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def add_comment(client):
    async def _add(token: str, post_id: str, content: str = "nice shot"):
        response = await client.post(
            f"/api/posts/{post_id}/comments",
            headers=bearer(token),
            json={"content": content},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _add


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_comment_is_attached_to_post(self, client, register_user, upload_post, add_comment):
        alice_token, _ = await register_user("alice")
        bob_token, bob = await register_user("bob")
        post = await upload_post(alice_token)

        comment = await add_comment(bob_token, post["id"], "love the colours")

        assert comment["post_id"] == post["id"]
        assert comment["content"] == "love the colours"
        assert comment["user"]["id"] == bob["id"]
        assert comment["user"]["username"] == "bob"

        feed = (await client.get("/api/posts/feed", headers=bearer(alice_token))).json()
        assert [c["id"] for c in feed[0]["comments"]] == [comment["id"]]
        assert feed[0]["comments"][0]["user"]["username"] == "bob"

        liked = await client.post(f"/api/posts/{post['id']}/like", headers=bearer(bob_token))
        assert liked.json()["comments"] == [comment["id"]]

    @pytest.mark.asyncio
    async def test_comments_listed_oldest_first(self, client, register_user, upload_post, add_comment):
        token, _ = await register_user("alice")
        post = await upload_post(token)

        first = await add_comment(token, post["id"], "first")
        second = await add_comment(token, post["id"], "second")

        feed = (await client.get("/api/posts/feed", headers=bearer(token))).json()
        assert [c["id"] for c in feed[0]["comments"]] == [first["id"], second["id"]]

    @pytest.mark.asyncio
    async def test_comment_on_missing_post(self, client, register_user):
        token, _ = await register_user("alice")

        response = await client.post(
            f"/api/posts/{uuid.uuid4()}/comments",
            headers=bearer(token),
            json={"content": "hello?"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"content": ""}, {}, {"content": "hi", "rating": 5}],
    )
    async def test_invalid_body_rejected(self, client, register_user, upload_post, payload):
        token, _ = await register_user("alice")
        post = await upload_post(token)

        response = await client.post(
            f"/api/posts/{post['id']}/comments", headers=bearer(token), json=payload
        )

        assert response.status_code == 400


class TestGetComment:

    @pytest.mark.asyncio
    async def test_fetch_by_id(self, client, register_user, upload_post, add_comment):
        token, _ = await register_user("alice")
        post = await upload_post(token)
        comment = await add_comment(token, post["id"])

        response = await client.get(f"/api/posts/comments/{comment['id']}", headers=bearer(token))

        assert response.status_code == 200
        fetched = response.json()
        assert fetched["id"] == comment["id"]
        assert fetched["post_id"] == post["id"]
        assert fetched["content"] == comment["content"]
        assert fetched["user"] == comment["user"]

    @pytest.mark.asyncio
    async def test_missing_comment(self, client, register_user):
        token, _ = await register_user("alice")

        response = await client.get(f"/api/posts/comments/{uuid.uuid4()}", headers=bearer(token))

        assert response.status_code == 404


class TestDeleteComment:

    @pytest.mark.asyncio
    async def test_owner_deletes_comment(self, client, register_user, upload_post, add_comment):
        token, _ = await register_user("alice")
        post = await upload_post(token)
        comment = await add_comment(token, post["id"], "typo")

        response = await client.delete(
            f"/api/posts/{post['id']}/comments/{comment['id']}", headers=bearer(token)
        )

        assert response.status_code == 200
        assert response.json()["id"] == comment["id"]
        assert response.json()["content"] == "typo"

        gone = await client.get(f"/api/posts/comments/{comment['id']}", headers=bearer(token))
        assert gone.status_code == 404

        feed = (await client.get("/api/posts/feed", headers=bearer(token))).json()
        assert feed[0]["comments"] == []

    @pytest.mark.asyncio
    async def test_non_owner_forbidden_and_comment_survives(
        self, client, register_user, upload_post, add_comment
    ):
        alice_token, _ = await register_user("alice")
        mallory_token, _ = await register_user("mallory")
        post = await upload_post(alice_token)
        comment = await add_comment(alice_token, post["id"])

        response = await client.delete(
            f"/api/posts/{post['id']}/comments/{comment['id']}", headers=bearer(mallory_token)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

        still_there = await client.get(
            f"/api/posts/comments/{comment['id']}", headers=bearer(alice_token)
        )
        assert still_there.status_code == 200

    @pytest.mark.asyncio
    async def test_post_owner_cannot_delete_others_comment(
        self, client, register_user, upload_post, add_comment
    ):
        owner_token, _ = await register_user("owner")
        guest_token, _ = await register_user("guest")
        post = await upload_post(owner_token)
        comment = await add_comment(guest_token, post["id"])

        response = await client.delete(
            f"/api/posts/{post['id']}/comments/{comment['id']}", headers=bearer(owner_token)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_comment_under_wrong_post(self, client, register_user, upload_post, add_comment):
        token, _ = await register_user("alice")
        post_a = await upload_post(token, caption="a")
        post_b = await upload_post(token, caption="b")
        comment = await add_comment(token, post_a["id"])

        response = await client.delete(
            f"/api/posts/{post_b['id']}/comments/{comment['id']}", headers=bearer(token)
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_post_or_comment(self, client, register_user, upload_post):
        token, _ = await register_user("alice")
        post = await upload_post(token)

        no_post = await client.delete(
            f"/api/posts/{uuid.uuid4()}/comments/{uuid.uuid4()}", headers=bearer(token)
        )
        no_comment = await client.delete(
            f"/api/posts/{post['id']}/comments/{uuid.uuid4()}", headers=bearer(token)
        )

        assert no_post.status_code == 404
        assert no_comment.status_code == 404
