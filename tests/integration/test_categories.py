"""Integration tests for category management."""

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def category_data(**overrides) -> dict:
    data = {"name": "Announcements", "slug": "announcements", "description": "News"}
    data.update(overrides)
    return data


class TestPublicListing:
    async def test_lists_only_active_public_categories(
        self, async_client: AsyncClient, default_category, admin_headers, beginner_headers
    ):
        await async_client.post(
            "/api/categories/",
            json=category_data(name="Staff", slug="staff", is_public=False),
            headers=admin_headers,
        )
        await async_client.post(
            "/api/categories/",
            json=category_data(name="Archive", slug="archive", is_active=False),
            headers=admin_headers,
        )
        await async_client.post(
            "/api/categories/",
            json=category_data(name="Announcements", slug="announcements", sort_order=-1),
            headers=admin_headers,
        )

        response = await async_client.get("/api/categories/public/list", headers=beginner_headers)

        assert response.status_code == status.HTTP_200_OK
        names = [c["name"] for c in response.json()["categories"]]
        assert names == ["Announcements", "General Discussion"]

    async def test_requires_authentication(self, async_client: AsyncClient, default_category):
        response = await async_client.get("/api/categories/public/list")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAdminOnly:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/categories/"),
            ("POST", "/api/categories/"),
            ("GET", "/api/categories/1"),
            ("PUT", "/api/categories/1"),
            ("DELETE", "/api/categories/1"),
        ],
    )
    async def test_contributor_is_forbidden(
        self, async_client: AsyncClient, default_category, contributor_headers, method, path
    ):
        kwargs = {"json": category_data()} if method in ("POST", "PUT") else {}

        response = await async_client.request(method, path, headers=contributor_headers, **kwargs)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "Admin access required"


class TestCategoryCrud:
    async def test_create_with_defaults(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            "/api/categories/", json=category_data(), headers=admin_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        category = response.json()["category"]
        assert category["color"] == "#6366f1"
        assert category["is_public"] is True
        assert category["is_active"] is True
        assert category["allowed_roles"] == ["BEGINNER", "CONTRIBUTOR", "ADMIN"]
        assert category["post_count"] == 0

    async def test_duplicate_name_or_slug(self, async_client: AsyncClient, admin_headers):
        await async_client.post("/api/categories/", json=category_data(), headers=admin_headers)

        same_slug = await async_client.post(
            "/api/categories/", json=category_data(name="Other"), headers=admin_headers
        )
        same_name = await async_client.post(
            "/api/categories/", json=category_data(slug="other"), headers=admin_headers
        )

        assert same_slug.status_code == status.HTTP_409_CONFLICT
        assert same_name.status_code == status.HTTP_409_CONFLICT
        assert same_name.json()["error_code"] == "CATEGORY_EXISTS"

    async def test_invalid_slug(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            "/api/categories/", json=category_data(slug="Not A Slug"), headers=admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_partial_update(self, async_client: AsyncClient, admin_headers):
        created = await async_client.post(
            "/api/categories/", json=category_data(), headers=admin_headers
        )
        category_id = created.json()["category"]["id"]

        response = await async_client.put(
            f"/api/categories/{category_id}",
            json={"color": "#ff0000", "allowed_roles": ["ADMIN"]},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        category = response.json()["category"]
        assert category["color"] == "#ff0000"
        assert category["allowed_roles"] == ["ADMIN"]
        assert category["name"] == "Announcements"

    async def test_update_to_taken_name(
        self, async_client: AsyncClient, default_category, admin_headers
    ):
        created = await async_client.post(
            "/api/categories/", json=category_data(), headers=admin_headers
        )

        response = await async_client.put(
            f"/api/categories/{created.json()['category']['id']}",
            json={"name": "General Discussion"},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_listing_refreshes_post_counts(
        self, async_client: AsyncClient, default_category, admin_headers, beginner_headers
    ):
        await async_client.post(
            "/api/posts/", json={"title": "t", "content": "c"}, headers=beginner_headers
        )

        response = await async_client.get("/api/categories/", headers=admin_headers)

        counts = {c["name"]: c["post_count"] for c in response.json()["categories"]}
        assert counts["General Discussion"] == 1

    async def test_cannot_delete_category_with_posts(
        self, async_client: AsyncClient, default_category, admin_headers, beginner_headers
    ):
        await async_client.post(
            "/api/posts/", json={"title": "t", "content": "c"}, headers=beginner_headers
        )

        response = await async_client.delete(
            f"/api/categories/{default_category.id}", headers=admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"].startswith("Cannot delete category with existing posts")

    async def test_delete_empty_category(self, async_client: AsyncClient, admin_headers):
        created = await async_client.post(
            "/api/categories/", json=category_data(), headers=admin_headers
        )
        category_id = created.json()["category"]["id"]

        response = await async_client.delete(
            f"/api/categories/{category_id}", headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK

        missing = await async_client.get(f"/api/categories/{category_id}", headers=admin_headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND
