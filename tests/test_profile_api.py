"""HTTP tests for the /api/profile and /api/me/profile routes."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.core.errors import StoreFailure
from microblog.profile import service as profile_service

from tests.conftest import auth_headers, make_like, make_post, make_profile, make_user


async def _seed(db: AsyncSession) -> dict:
    alice = await make_user(db, "alice")
    bob = await make_user(db, "bob")
    await make_profile(db, alice, name="Alice", bio="hola ✨", dob=date(1990, 7, 4))
    post = await make_post(db, alice, age=timedelta(hours=2))
    reply = await make_post(db, bob, parent=post, age=timedelta(hours=1))
    await make_like(db, bob, post)
    await db.commit()
    return {"alice": alice.id, "bob": bob.id, "post": post.id, "reply": reply.id}


async def test_health(client: AsyncClient):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["ok"] is True


class TestPublicProfile:
    async def test_profile_page(self, client: AsyncClient, db: AsyncSession):
        await _seed(db)

        res = await client.get("/api/profile/alice/")

        assert res.status_code == 200
        body = res.json()
        assert body["username"] == "alice"
        assert body["profile"]["bio"] == "hola ✨"
        assert body["profile"]["created_at"] == "March 2023"
        assert body["profile"]["dob"] == "July 4, 1990"
        assert res.headers["content-type"] == "application/json; charset=utf-8"

    async def test_handle_named_me_is_not_shadowed(
        self, client: AsyncClient, db: AsyncSession
    ):
        user = await make_user(db, "me")
        await make_profile(db, user, bio="me llamo me")
        await db.commit()

        res = await client.get("/api/profile/me/")

        assert res.status_code == 200
        assert res.json()["username"] == "me"
        assert res.json()["profile"]["bio"] == "me llamo me"

    async def test_unknown_handle_is_404(self, client: AsyncClient):
        for path in (
            "/api/profile/ghost_user_404/",
            "/api/profile/ghost_user_404/posts/",
            "/api/profile/ghost_user_404/replies/",
            "/api/profile/ghost_user_404/likes/",
            "/api/profile/ghost_user_404/posts/count/",
            "/api/profile/ghost_user_404/follow-count/",
        ):
            res = await client.get(path)
            assert res.status_code == 404, path


class TestFeeds:
    async def test_posts_feed_anonymous(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.get("/api/profile/alice/posts/")

        assert res.status_code == 200
        [item] = res.json()
        assert item["id"] == ids["post"]
        assert item["is_liked"] is False
        assert item["likes_count"] == 1
        assert item["replies_count"] == 1
        assert item["created_at"] == "2 hours"

    async def test_posts_feed_as_viewer(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.get("/api/profile/alice/posts/", headers=auth_headers(ids["bob"]))

        assert res.json()[0]["is_liked"] is True

    async def test_replies_feed(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.get("/api/profile/bob/replies/")

        [item] = res.json()
        assert item["id"] == ids["reply"]
        assert item["parent_post"]["author"]["username"] == "alice"

    async def test_likes_feed(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.get("/api/profile/bob/likes/")

        assert [p["id"] for p in res.json()] == [ids["post"]]

    async def test_counts(self, client: AsyncClient, db: AsyncSession):
        await _seed(db)

        assert (await client.get("/api/profile/alice/posts/count/")).json() == {"count": 1}
        assert (await client.get("/api/profile/alice/follow-count/")).json() == {
            "followers": 0,
            "following": 0,
        }


class TestMyProfile:
    async def test_anonymous_redirects_to_login(self, client: AsyncClient):
        for method in ("GET", "PATCH"):
            res = await client.request(method, "/api/me/profile/", json={"bio": "x"})
            assert res.status_code == 308
            assert res.headers["location"] == "/login"

    async def test_anonymous_without_body_redirects(self, client: AsyncClient):
        for method in ("PATCH", "POST"):
            res = await client.request(method, "/api/me/profile/")
            assert res.status_code == 308, method
            assert res.headers["location"] == "/login"

    async def test_anonymous_with_invalid_body_redirects(self, client: AsyncClient):
        for method in ("PATCH", "POST"):
            res = await client.request(
                method, "/api/me/profile/", json={"user_id": 99, "dob": "nope"}
            )
            assert res.status_code == 308, method

    async def test_patch_without_body_is_noop(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.patch("/api/me/profile/", headers=auth_headers(ids["alice"]))

        assert res.status_code == 200
        assert res.json()["bio"] == "hola ✨"

    async def test_store_failure_propagates(
        self, client: AsyncClient, db: AsyncSession, monkeypatch
    ):
        ids = await _seed(db)

        async def _broken(*args, **kwargs):
            raise OperationalError("UPDATE profiles", {}, Exception("db down"))

        monkeypatch.setattr(profile_service, "update_profile", _broken)

        with pytest.raises(StoreFailure):
            await client.patch(
                "/api/me/profile/", json={"bio": "x"}, headers=auth_headers(ids["alice"])
            )

    async def test_edit_form(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.get("/api/me/profile/", headers=auth_headers(ids["alice"]))

        assert res.status_code == 200
        body = res.json()
        assert body["dob"] == "1990-07-04"
        assert body["user"]["username"] == "alice"

    async def test_patch_changes_only_bio(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.patch(
            "/api/me/profile/", json={"bio": "x"}, headers=auth_headers(ids["alice"])
        )

        assert res.status_code == 200
        body = res.json()
        assert body["bio"] == "x"
        assert body["name"] == "Alice"
        assert body["dob"] == "1990-07-04"

    async def test_patch_rejects_unknown_fields(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.patch(
            "/api/me/profile/", json={"user_id": 99}, headers=auth_headers(ids["alice"])
        )

        assert res.status_code == 422

    async def test_patch_without_profile_is_404(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)

        res = await client.patch(
            "/api/me/profile/", json={"bio": "x"}, headers=auth_headers(ids["bob"])
        )

        assert res.status_code == 404

    async def test_create_then_duplicate(self, client: AsyncClient, db: AsyncSession):
        ids = await _seed(db)
        headers = auth_headers(ids["bob"])

        first = await client.post("/api/me/profile/", json={"bio": "soy bob"}, headers=headers)
        second = await client.post("/api/me/profile/", json={"bio": "otra vez"}, headers=headers)

        assert first.status_code == 201
        assert first.json()["bio"] == "soy bob"
        assert second.status_code == 409
