"""Integration tests for posts, replies, likes and moderation flags."""

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def create_post(client: AsyncClient, headers: dict, **overrides) -> dict:
    data = {"title": "First post", "content": "Hello everyone", "tags": ["intro"]}
    data.update(overrides)

    response = await client.post("/api/posts/", json=data, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["post"]


async def create_reply(client: AsyncClient, post_id: int, headers: dict, content="Welcome!") -> dict:
    response = await client.post(
        f"/api/posts/{post_id}/replies", json={"content": content}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["reply"]


class TestCreatePost:
    async def test_defaults_to_general_category(
        self, async_client: AsyncClient, default_category, beginner, beginner_headers
    ):
        post = await create_post(async_client, beginner_headers)

        assert post["category"]["name"] == "General Discussion"
        assert post["author"]["id"] == beginner.id
        assert post["tags"] == ["intro"]
        assert post["likes_count"] == 0
        assert post["replies_count"] == 0
        assert post["is_pinned"] is False
        assert post["is_locked"] is False

    async def test_requires_authentication(self, async_client: AsyncClient, default_category):
        response = await async_client.post(
            "/api/posts/", json={"title": "Anonymous", "content": "Hi"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_unknown_category(
        self, async_client: AsyncClient, default_category, beginner_headers
    ):
        response = await async_client.post(
            "/api/posts/",
            json={"title": "Lost", "content": "Where am I", "category": "Nowhere"},
            headers=beginner_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid category specified"

    async def test_blank_title_is_unprocessable(
        self, async_client: AsyncClient, default_category, beginner_headers
    ):
        response = await async_client.post(
            "/api/posts/", json={"title": "   ", "content": "Body"}, headers=beginner_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_missing_default_category(self, async_client: AsyncClient, beginner_headers):
        response = await async_client.post(
            "/api/posts/", json={"title": "Hello", "content": "World"}, headers=beginner_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestListAndRead:
    async def test_public_listing_with_pagination(
        self, async_client: AsyncClient, default_category, beginner_headers
    ):
        for i in range(3):
            await create_post(async_client, beginner_headers, title=f"Post {i}")

        response = await async_client.get("/api/posts/", params={"page": 1, "limit": 2})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [p["title"] for p in body["posts"]] == ["Post 2", "Post 1"]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    async def test_search_by_title_and_author(
        self, async_client: AsyncClient, default_category, beginner, beginner_headers
    ):
        await create_post(async_client, beginner_headers, title="Gardening tips")
        await create_post(async_client, beginner_headers, title="Cooking")

        by_title = await async_client.get("/api/posts/", params={"search": "garden"})
        assert [p["title"] for p in by_title.json()["posts"]] == ["Gardening tips"]

        by_author = await async_client.get("/api/posts/", params={"search": beginner.username})
        assert by_author.json()["pagination"]["total"] == 2

    async def test_search_treats_percent_literally(
        self, async_client: AsyncClient, default_category, beginner_headers
    ):
        await create_post(async_client, beginner_headers, title="100% organic")
        await create_post(async_client, beginner_headers, title="Cooking")

        response = await async_client.get("/api/posts/", params={"search": "%"})

        assert [p["title"] for p in response.json()["posts"]] == ["100% organic"]

    async def test_hot_sort_orders_by_likes(
        self, async_client: AsyncClient, default_category, beginner_headers, contributor_headers
    ):
        quiet = await create_post(async_client, beginner_headers, title="Quiet")
        popular = await create_post(async_client, beginner_headers, title="Popular")
        await create_post(async_client, beginner_headers, title="Newest")

        await async_client.post(f"/api/posts/{popular['id']}/like", headers=beginner_headers)
        await async_client.post(f"/api/posts/{popular['id']}/like", headers=contributor_headers)
        await async_client.post(f"/api/posts/{quiet['id']}/like", headers=beginner_headers)

        response = await async_client.get("/api/posts/", params={"sort": "hot"})

        titles = [p["title"] for p in response.json()["posts"]]
        assert titles == ["Popular", "Quiet", "Newest"]

    async def test_detail_includes_replies_oldest_first(
        self, async_client: AsyncClient, default_category, beginner_headers, contributor_headers
    ):
        post = await create_post(async_client, beginner_headers)
        await create_reply(async_client, post["id"], contributor_headers, "first")
        await create_reply(async_client, post["id"], beginner_headers, "second")

        response = await async_client.get(f"/api/posts/{post['id']}")

        assert response.status_code == status.HTTP_200_OK
        detail = response.json()["post"]
        assert detail["replies_count"] == 2
        assert [r["content"] for r in detail["replies"]] == ["first", "second"]

    async def test_missing_post(self, async_client: AsyncClient):
        response = await async_client.get("/api/posts/9999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error_code"] == "POST_NOT_FOUND"


class TestEditAndDelete:
    async def test_author_can_edit(self, async_client: AsyncClient, default_category, beginner_headers):
        post = await create_post(async_client, beginner_headers)

        response = await async_client.put(
            f"/api/posts/{post['id']}", json={"title": "Edited"}, headers=beginner_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["post"]["title"] == "Edited"
        assert response.json()["post"]["content"] == "Hello everyone"

    async def test_contributor_cannot_edit_others_post(
        self, async_client: AsyncClient, default_category, beginner_headers, contributor_headers
    ):
        post = await create_post(async_client, beginner_headers)

        response = await async_client.put(
            f"/api/posts/{post['id']}", json={"title": "Hijacked"}, headers=contributor_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "You can only edit your own posts"

    async def test_admin_can_delete_any_post(
        self, async_client: AsyncClient, default_category, beginner_headers, admin_headers
    ):
        post = await create_post(async_client, beginner_headers)
        await create_reply(async_client, post["id"], beginner_headers)
        await async_client.post(f"/api/posts/{post['id']}/like", headers=beginner_headers)

        response = await async_client.delete(f"/api/posts/{post['id']}", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        missing = await async_client.get(f"/api/posts/{post['id']}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    async def test_other_member_cannot_delete(
        self, async_client: AsyncClient, default_category, beginner_headers, contributor_headers
    ):
        post = await create_post(async_client, beginner_headers)

        response = await async_client.delete(
            f"/api/posts/{post['id']}", headers=contributor_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "You can only delete your own posts"


class TestReplies:
    async def test_reply_edit_rules(
        self, async_client: AsyncClient, default_category, beginner_headers, contributor_headers
    ):
        post = await create_post(async_client, beginner_headers)
        reply = await create_reply(async_client, post["id"], contributor_headers)
        url = f"/api/posts/{post['id']}/replies/{reply['id']}"

        denied = await async_client.put(url, json={"content": "x"}, headers=beginner_headers)
        assert denied.status_code == status.HTTP_403_FORBIDDEN
        assert denied.json()["error"] == "You can only edit your own replies"

        edited = await async_client.put(url, json={"content": "Edited"}, headers=contributor_headers)
        assert edited.status_code == status.HTTP_200_OK
        assert edited.json()["reply"]["content"] == "Edited"

        deleted = await async_client.delete(url, headers=contributor_headers)
        assert deleted.status_code == status.HTTP_200_OK

    async def test_reply_scoped_to_its_post(
        self, async_client: AsyncClient, default_category, beginner_headers
    ):
        first = await create_post(async_client, beginner_headers)
        second = await create_post(async_client, beginner_headers)
        reply = await create_reply(async_client, first["id"], beginner_headers)

        response = await async_client.delete(
            f"/api/posts/{second['id']}/replies/{reply['id']}", headers=beginner_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_locked_post_rejects_replies(
        self, async_client: AsyncClient, default_category, beginner_headers, admin_headers
    ):
        post = await create_post(async_client, beginner_headers)

        lock = await async_client.patch(
            f"/api/posts/{post['id']}/lock", json={"is_locked": True}, headers=admin_headers
        )
        assert lock.status_code == status.HTTP_200_OK
        assert lock.json()["post"]["is_locked"] is True

        for headers in (beginner_headers, admin_headers):
            response = await async_client.post(
                f"/api/posts/{post['id']}/replies", json={"content": "Late"}, headers=headers
            )
            assert response.status_code == status.HTTP_403_FORBIDDEN
            assert response.json()["error"] == "This post is closed. No new replies are allowed."
            assert response.json()["error_code"] == "POST_LOCKED"


class TestLikesAndFlags:
    async def test_like_toggles(self, async_client: AsyncClient, default_category, beginner_headers):
        post = await create_post(async_client, beginner_headers)
        url = f"/api/posts/{post['id']}/like"

        liked = await async_client.post(url, headers=beginner_headers)
        assert liked.json()["liked"] is True
        assert liked.json()["likes_count"] == 1

        unliked = await async_client.post(url, headers=beginner_headers)
        assert unliked.json()["liked"] is False
        assert unliked.json()["likes_count"] == 0

    @pytest.mark.parametrize("flag,field", [("pin", "is_pinned"), ("lock", "is_locked")])
    async def test_contributor_cannot_pin_or_lock(
        self, async_client: AsyncClient, default_category, contributor_headers, flag, field
    ):
        post = await create_post(async_client, contributor_headers)

        response = await async_client.patch(
            f"/api/posts/{post['id']}/{flag}", json={field: True}, headers=contributor_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "Admin access required"

    async def test_admin_pins_and_filter(
        self, async_client: AsyncClient, default_category, beginner_headers, admin_headers
    ):
        post = await create_post(async_client, beginner_headers, title="Rules")
        await create_post(async_client, beginner_headers, title="Chatter")

        response = await async_client.patch(
            f"/api/posts/{post['id']}/pin", json={"is_pinned": True}, headers=admin_headers
        )
        assert response.json()["post"]["is_pinned"] is True

        pinned = await async_client.get("/api/posts/", params={"pinned": True})
        assert [p["title"] for p in pinned.json()["posts"]] == ["Rules"]
