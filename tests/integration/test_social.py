"""Integration tests for friends, follows and user discovery."""

import pytest
import pytest_asyncio
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user(username="alice", first_name="Alice", bio="Gardener")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user(username="bob", first_name="Bob")


async def relationship(client: AsyncClient, headers: dict, other_id: int) -> str:
    response = await client.get(f"/api/social/user/{other_id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    return response.json()["user"]["relationship"]


async def send_request(client: AsyncClient, headers: dict, receiver_id: int) -> int:
    response = await client.post(f"/api/social/friend-request/{receiver_id}", headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["request_id"]


class TestFollow:
    async def test_follow_and_unfollow(self, async_client: AsyncClient, alice, bob, auth_headers):
        alice_headers = auth_headers(alice)

        response = await async_client.post(f"/api/social/follow/{bob.id}", headers=alice_headers)
        assert response.status_code == status.HTTP_200_OK

        following = await async_client.get("/api/social/following", headers=alice_headers)
        assert [u["id"] for u in following.json()["following"]] == [bob.id]

        followers = await async_client.get("/api/social/followers", headers=auth_headers(bob))
        assert [u["username"] for u in followers.json()["followers"]] == ["alice"]

        response = await async_client.delete(
            f"/api/social/follow/{bob.id}", headers=alice_headers
        )
        assert response.status_code == status.HTTP_200_OK

        following = await async_client.get("/api/social/following", headers=alice_headers)
        assert following.json()["following"] == []

    async def test_follow_twice(self, async_client: AsyncClient, alice, bob, auth_headers):
        url = f"/api/social/follow/{bob.id}"
        await async_client.post(url, headers=auth_headers(alice))

        response = await async_client.post(url, headers=auth_headers(alice))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Already following this user"

    async def test_cannot_follow_self(self, async_client: AsyncClient, alice, auth_headers):
        response = await async_client.post(
            f"/api/social/follow/{alice.id}", headers=auth_headers(alice)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Cannot follow yourself"

    async def test_unfollow_when_not_following(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        response = await async_client.delete(
            f"/api/social/follow/{bob.id}", headers=auth_headers(alice)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Not following this user"

    async def test_follow_unknown_user(self, async_client: AsyncClient, alice, auth_headers):
        response = await async_client.post("/api/social/follow/9999", headers=auth_headers(alice))

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestFriendRequests:
    async def test_request_accept_remove_cycle(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        alice_headers, bob_headers = auth_headers(alice), auth_headers(bob)

        request_id = await send_request(async_client, alice_headers, bob.id)
        assert await relationship(async_client, alice_headers, bob.id) == "PENDING_OUTBOUND"
        assert await relationship(async_client, bob_headers, alice.id) == "PENDING_INBOUND"

        incoming = await async_client.get("/api/social/friend-requests", headers=bob_headers)
        requests = incoming.json()["requests"]
        assert [r["id"] for r in requests] == [request_id]
        assert requests[0]["sender"]["username"] == "alice"

        accepted = await async_client.put(
            f"/api/social/friend-request/{request_id}/accept", headers=bob_headers
        )
        assert accepted.status_code == status.HTTP_200_OK
        assert accepted.json()["relationship"] == "FRIENDS"
        assert await relationship(async_client, alice_headers, bob.id) == "FRIENDS"

        friends = await async_client.get("/api/social/friends", headers=alice_headers)
        assert [u["id"] for u in friends.json()["friends"]] == [bob.id]

        removed = await async_client.delete(f"/api/social/friend/{alice.id}", headers=bob_headers)
        assert removed.status_code == status.HTTP_200_OK
        assert removed.json()["relationship"] == "NONE"
        assert await relationship(async_client, alice_headers, bob.id) == "NONE"

        # A fresh request is legal again
        await send_request(async_client, alice_headers, bob.id)

    async def test_decline_then_request_again(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        alice_headers, bob_headers = auth_headers(alice), auth_headers(bob)
        request_id = await send_request(async_client, alice_headers, bob.id)

        declined = await async_client.put(
            f"/api/social/friend-request/{request_id}/decline", headers=bob_headers
        )
        assert declined.json()["relationship"] == "DECLINED"
        assert await relationship(async_client, alice_headers, bob.id) == "DECLINED"

        new_request_id = await send_request(async_client, alice_headers, bob.id)

        assert await relationship(async_client, bob_headers, alice.id) == "PENDING_INBOUND"
        incoming = await async_client.get("/api/social/friend-requests", headers=bob_headers)
        assert [r["id"] for r in incoming.json()["requests"]] == [new_request_id]

    async def test_receiver_can_request_back_after_declining(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        request_id = await send_request(async_client, auth_headers(alice), bob.id)
        await async_client.put(
            f"/api/social/friend-request/{request_id}/decline", headers=auth_headers(bob)
        )

        await send_request(async_client, auth_headers(bob), alice.id)

        assert await relationship(async_client, auth_headers(alice), bob.id) == "PENDING_INBOUND"

    async def test_duplicate_request_either_direction(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        await send_request(async_client, auth_headers(alice), bob.id)

        again = await async_client.post(
            f"/api/social/friend-request/{bob.id}", headers=auth_headers(alice)
        )
        reverse = await async_client.post(
            f"/api/social/friend-request/{alice.id}", headers=auth_headers(bob)
        )

        for response in (again, reverse):
            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json()["error"] == "Friend request already exists"

    async def test_already_friends(self, async_client: AsyncClient, alice, bob, auth_headers):
        request_id = await send_request(async_client, auth_headers(alice), bob.id)
        await async_client.put(
            f"/api/social/friend-request/{request_id}/accept", headers=auth_headers(bob)
        )

        response = await async_client.post(
            f"/api/social/friend-request/{alice.id}", headers=auth_headers(bob)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Already friends with this user"

    async def test_self_request(self, async_client: AsyncClient, alice, auth_headers):
        response = await async_client.post(
            f"/api/social/friend-request/{alice.id}", headers=auth_headers(alice)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Cannot send friend request to yourself"

    async def test_sender_cannot_accept_own_request(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        request_id = await send_request(async_client, auth_headers(alice), bob.id)

        response = await async_client.put(
            f"/api/social/friend-request/{request_id}/accept", headers=auth_headers(alice)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Friend request not found"

    async def test_remove_non_friend(self, async_client: AsyncClient, alice, bob, auth_headers):
        response = await async_client.delete(
            f"/api/social/friend/{bob.id}", headers=auth_headers(alice)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Friendship not found"


class TestDiscovery:
    async def test_search_requires_two_characters(
        self, async_client: AsyncClient, alice, auth_headers
    ):
        response = await async_client.get(
            "/api/social/search", params={"q": "a"}, headers=auth_headers(alice)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Search query must be at least 2 characters"

    async def test_search_skips_inactive_users(
        self, async_client: AsyncClient, alice, bob, make_user, auth_headers
    ):
        await make_user(username="bobby_gone", is_active=False)

        response = await async_client.get(
            "/api/social/search", params={"q": "bob"}, headers=auth_headers(alice)
        )

        assert [u["username"] for u in response.json()["users"]] == ["bob"]

    async def test_profile_counts_and_flags(
        self, async_client: AsyncClient, alice, bob, auth_headers
    ):
        await async_client.post(f"/api/social/follow/{alice.id}", headers=auth_headers(bob))
        request_id = await send_request(async_client, auth_headers(bob), alice.id)

        response = await async_client.get(
            f"/api/social/user/{alice.id}", headers=auth_headers(bob)
        )

        profile = response.json()["user"]
        assert profile["username"] == "alice"
        assert profile["bio"] == "Gardener"
        assert profile["followers_count"] == 1
        assert profile["following_count"] == 0
        assert profile["posts_count"] == 0
        assert profile["is_following"] is True
        assert profile["is_friend"] is False
        assert profile["pending_request"] == {"id": request_id, "is_sent_by_me": True}
        assert "email" not in profile

    async def test_unknown_profile(self, async_client: AsyncClient, alice, auth_headers):
        response = await async_client.get("/api/social/user/9999", headers=auth_headers(alice))

        assert response.status_code == status.HTTP_404_NOT_FOUND
