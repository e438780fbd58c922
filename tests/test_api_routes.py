import io
import os
import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import jwt as pyjwt


class FakeMinio:
    def __init__(self):
        self.objects = {}

    def bucket_exists(self, *args, **kwargs):
        return True

    def make_bucket(self, *args, **kwargs):
        return None

    def put_object(self, **kwargs):
        self.objects[kwargs["object_name"]] = kwargs["data"].read()


class BrokenMinio:
    def bucket_exists(self, *args, **kwargs):
        raise ConnectionError("minio down")


class TestApiRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from app import create_app
        from app.db import db
        from app.extensions.extensions import limiter
        from app.models.user_model import ROLE_ADMIN
        from app.services import auth_service

        cls.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": "test-secret-key-0123456789abcdef0123",
            "RATELIMIT_STORAGE_URI": "memory://",
            "APP_PUBLIC_BASE_URL": "http://blog.test",
        })
        cls.client = cls.app.test_client()
        cls.db = db
        cls.limiter = limiter
        cls.auth_service = auth_service
        cls.ROLE_ADMIN = ROLE_ADMIN

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()
            self.limiter.reset()
        uploads_dir = os.path.join(self.app.static_folder, "uploads")
        if os.path.isdir(uploads_dir):
            shutil.rmtree(uploads_dir)

    def _register(self, username, password="pass123", **kwargs):
        with self.app.app_context():
            self.auth_service.register(username, password, **kwargs)

    def _auth_header(self, username, password="pass123"):
        with self.app.app_context():
            token = self.auth_service.login(username, password)["access_token"]
        return {"Authorization": f"Bearer {token}"}

    def _refresh_header(self, username, password="pass123"):
        with self.app.app_context():
            token = self.auth_service.login(username, password)["refresh_token"]
        return {"Authorization": f"Bearer {token}"}

    def _create_post(self, headers, **fields):
        payload = {"title": "Hello World", "content": "<p>Hello readers</p>", "published": True}
        payload.update(fields)
        response = self.client.post("/api/posts", json=payload, headers=headers)
        self.assertEqual(response.status_code, 201, response.get_json())
        return response.get_json()

    def test_auth_register_and_login_success(self):
        register_response = self.client.post(
            "/api/auth/register",
            json={
                "username": "api_user",
                "password": "pass123",
                "email": "api_user@example.com",
            },
        )
        self.assertEqual(register_response.status_code, 201)

        login_response = self.client.post(
            "/api/auth/login",
            json={"username": "api_user", "password": "pass123"},
        )
        self.assertEqual(login_response.status_code, 200)
        body = login_response.get_json()
        self.assertIn("access_token", body)
        self.assertIn("refresh_token", body)

    def test_auth_login_rejects_bad_password(self):
        self._register("alice")
        response = self.client.post(
            "/api/auth/login",
            json={"username": "alice", "password": "wrong"},
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Invalid credentials")

    def test_auth_rejects_invalid_json(self):
        response = self.client.post(
            "/api/auth/register",
            data="not-json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid JSON body")

    def test_auth_refresh_returns_access_token(self):
        self._register("alice")
        headers = self._refresh_header("alice")

        token_response = self.client.post("/api/auth/token", headers=headers)
        self.assertEqual(token_response.status_code, 200)
        self.assertTrue(token_response.get_json()["access_token"])

        refresh_response = self.client.post("/api/auth/refresh", headers=headers)
        self.assertEqual(refresh_response.status_code, 200)
        self.assertTrue(refresh_response.get_json()["access_token"])

    def test_auth_refresh_rejects_access_token(self):
        self._register("alice")
        headers = self._auth_header("alice")

        response = self.client.post("/api/auth/token", headers=headers)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Invalid token")

    def test_create_post_requires_auth(self):
        response = self.client.post("/api/posts", json={"title": "hello"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Authorization required")

    def test_protected_route_rejects_malformed_and_forged_tokens(self):
        self._register("alice")

        malformed = self.client.post(
            "/api/posts",
            json={"title": "hello"},
            headers={"Authorization": "Bearer not.a.jwt"},
        )
        self.assertEqual(malformed.status_code, 401)
        self.assertEqual(malformed.get_json()["error"], "Invalid token")

        issued = datetime.now(timezone.utc)
        forged = pyjwt.encode(
            {
                "sub": "alice",
                "type": "access",
                "fresh": False,
                "jti": "forged-token",
                "iat": issued,
                "nbf": issued,
                "exp": issued + timedelta(minutes=15),
            },
            "some-other-signing-key-0123456789abcdef",
            algorithm="HS256",
        )
        response = self.client.post(
            "/api/posts",
            json={"title": "hello"},
            headers={"Authorization": f"Bearer {forged}"},
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Invalid token")

    def test_create_post_generates_slug_and_sanitizes_content(self):
        self._register("alice")
        headers = self._auth_header("alice")

        post = self._create_post(
            headers,
            content="<p>Hi there</p><script>alert(1)</script>",
        )
        self.assertEqual(post["slug"], "hello-world")
        self.assertTrue(post["published"])
        self.assertIsNotNone(post["published_at"])
        self.assertNotIn("<script>", post["content"])
        self.assertEqual(post["read_time_min"], 1)
        self.assertEqual(post["author"]["username"], "alice")

        second = self._create_post(headers)
        self.assertEqual(second["slug"], "hello-world-1")

    def test_create_post_validation_errors(self):
        self._register("alice")
        headers = self._auth_header("alice")

        response = self.client.post("/api/posts", json={"title": ""}, headers=headers)
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body["error"], "Validation failed")
        self.assertIn("title", body["details"])

        response = self.client.post(
            "/api/posts",
            json={"title": "x", "excerpt": "e" * 501},
            headers=headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("excerpt", response.get_json()["details"])

    def test_blank_title_rejected_on_create_and_update(self):
        self._register("alice")
        headers = self._auth_header("alice")

        response = self.client.post("/api/posts", json={"title": "   "}, headers=headers)
        self.assertEqual(response.status_code, 400)
        self.assertIn("title", response.get_json()["details"])

        post = self._create_post(headers)
        response = self.client.put(
            f"/api/posts/{post['id']}",
            json={"title": "\t \n"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("title", response.get_json()["details"])

        fetched = self.client.get(f"/api/posts/{post['id']}").get_json()
        self.assertEqual(fetched["title"], "Hello World")

    def test_create_post_rejects_taken_slug(self):
        self._register("alice")
        headers = self._auth_header("alice")
        self._create_post(headers, slug="my-post")

        response = self.client.post(
            "/api/posts",
            json={"title": "Another", "slug": "my-post"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 409)

    def test_list_posts_filters_and_caps_limit(self):
        self._register("alice")
        self._register("bob")
        alice = self._auth_header("alice")
        bob = self._auth_header("bob")

        with self.app.app_context():
            from app.services import taxonomy_service
            tag, _ = taxonomy_service.create_tag("Python")

        self._create_post(alice, title="Python tips", tag_ids=[tag["id"]], featured=True)
        self._create_post(alice, title="Draft notes", published=False)
        self._create_post(bob, title="Gardening", content="<p>Tomatoes and python snakes</p>")

        response = self.client.get("/api/posts?page=1&limit=500")
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload["page"], 1)
        self.assertEqual(payload["limit"], 50)
        self.assertEqual(payload["total"], 2)
        self.assertEqual(payload["pages"], 1)
        self.assertEqual([p["title"] for p in payload["posts"]], ["Gardening", "Python tips"])

        by_tag = self.client.get("/api/posts?tag=python").get_json()
        self.assertEqual([p["title"] for p in by_tag["posts"]], ["Python tips"])

        by_author = self.client.get("/api/posts?author=bob").get_json()
        self.assertEqual([p["title"] for p in by_author["posts"]], ["Gardening"])

        featured = self.client.get("/api/posts?featured=true").get_json()
        self.assertEqual([p["title"] for p in featured["posts"]], ["Python tips"])

        search = self.client.get("/api/posts?q=PYTHON").get_json()
        self.assertEqual(search["total"], 2)

        mine = self.client.get("/api/posts/me", headers=alice).get_json()
        self.assertEqual(mine["total"], 2)

    def test_get_post_counts_views_and_hides_drafts(self):
        self._register("alice")
        self._register("bob")
        alice = self._auth_header("alice")
        bob = self._auth_header("bob")

        published = self._create_post(alice)
        draft = self._create_post(alice, title="Secret", published=False)

        first = self.client.get(f"/api/posts/{published['id']}").get_json()
        second = self.client.get(f"/api/posts/{published['id']}").get_json()
        self.assertEqual(first["view_count"], 1)
        self.assertEqual(second["view_count"], 2)

        by_slug = self.client.get(f"/api/posts/slug/{published['slug']}")
        self.assertEqual(by_slug.status_code, 200)

        self.assertEqual(self.client.get(f"/api/posts/{draft['id']}").status_code, 404)
        self.assertEqual(
            self.client.get(f"/api/posts/{draft['id']}", headers=bob).status_code,
            404,
        )
        self.assertEqual(
            self.client.get(f"/api/posts/{draft['id']}", headers=alice).status_code,
            200,
        )
        self.assertEqual(self.client.get("/api/posts/999").status_code, 404)

    def test_update_and_delete_post_are_owner_only(self):
        self._register("alice")
        self._register("bob")
        alice = self._auth_header("alice")
        bob = self._auth_header("bob")
        post = self._create_post(alice, published=False)

        forbidden = self.client.put(
            f"/api/posts/{post['id']}",
            json={"title": "Hijacked"},
            headers=bob,
        )
        self.assertEqual(forbidden.status_code, 403)

        updated = self.client.put(
            f"/api/posts/{post['id']}",
            json={"title": "Renamed", "published": True},
            headers=alice,
        )
        self.assertEqual(updated.status_code, 200)
        body = updated.get_json()
        self.assertEqual(body["title"], "Renamed")
        self.assertEqual(body["slug"], "hello-world")
        self.assertTrue(body["published"])
        self.assertIsNotNone(body["published_at"])

        missing = self.client.put("/api/posts/999", json={"title": "x"}, headers=alice)
        self.assertEqual(missing.status_code, 404)

        self.assertEqual(
            self.client.delete(f"/api/posts/{post['id']}", headers=bob).status_code,
            403,
        )
        self.assertEqual(
            self.client.delete(f"/api/posts/{post['id']}", headers=alice).status_code,
            200,
        )
        self.assertEqual(self.client.get(f"/api/posts/{post['id']}").status_code, 404)

    def test_update_post_replaces_tags(self):
        self._register("alice")
        alice = self._auth_header("alice")

        first_tag = self.client.post("/api/tags", json={"name": "Flask"}, headers=alice).get_json()
        second_tag = self.client.post("/api/tags", json={"name": "SQL"}, headers=alice).get_json()
        post = self._create_post(alice, tag_ids=[first_tag["id"]])

        response = self.client.put(
            f"/api/posts/{post['id']}",
            json={"tag_ids": [second_tag["id"]]},
            headers=alice,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([t["slug"] for t in response.get_json()["tags"]], ["sql"])

        unknown = self.client.put(
            f"/api/posts/{post['id']}",
            json={"tag_ids": [999]},
            headers=alice,
        )
        self.assertEqual(unknown.status_code, 400)

    def test_check_slug_suggests_alternative(self):
        self._register("alice")
        alice = self._auth_header("alice")
        post = self._create_post(alice)

        taken = self.client.get("/api/posts/check-slug?slug=hello-world").get_json()
        self.assertFalse(taken["available"])
        self.assertEqual(taken["suggestion"], "hello-world-1")

        own = self.client.get(
            f"/api/posts/check-slug?slug=hello-world&exclude_id={post['id']}"
        ).get_json()
        self.assertTrue(own["available"])

        free = self.client.get("/api/posts/check-slug?slug=fresh-idea").get_json()
        self.assertTrue(free["available"])
        self.assertEqual(free["suggestion"], "fresh-idea")

        self.assertEqual(self.client.get("/api/posts/check-slug").status_code, 400)

    def test_tags_created_once_and_counted(self):
        self._register("alice")
        alice = self._auth_header("alice")

        created = self.client.post("/api/tags", json={"name": "Python"}, headers=alice)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.get_json()["slug"], "python")

        existing = self.client.post("/api/tags", json={"name": "Python"}, headers=alice)
        self.assertEqual(existing.status_code, 200)
        self.assertEqual(existing.get_json()["id"], created.get_json()["id"])

        self._create_post(alice, tag_ids=[created.get_json()["id"]])
        self._create_post(alice, title="Draft", published=False, tag_ids=[created.get_json()["id"]])

        tags = self.client.get("/api/tags").get_json()
        self.assertEqual(tags, [{"id": 1, "name": "Python", "slug": "python", "post_count": 1}])

    def test_categories_admin_only_creation(self):
        self._register("alice")
        self._register("root", role=self.ROLE_ADMIN)
        alice = self._auth_header("alice")
        admin = self._auth_header("root")

        forbidden = self.client.post("/api/categories", json={"name": "Tech"}, headers=alice)
        self.assertEqual(forbidden.status_code, 403)

        created = self.client.post(
            "/api/categories",
            json={"name": "Tech", "description": "Software"},
            headers=admin,
        )
        self.assertEqual(created.status_code, 201)
        category = created.get_json()
        self.assertEqual(category["slug"], "tech")

        self._create_post(alice, category_id=category["id"])

        detail = self.client.get("/api/categories/tech")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.get_json()["post_count"], 1)

        self.assertEqual(len(self.client.get("/api/categories").get_json()), 1)
        self.assertEqual(self.client.get("/api/categories/missing").status_code, 404)

        filtered = self.client.get("/api/posts?category=tech").get_json()
        self.assertEqual(filtered["total"], 1)

    def test_like_toggles(self):
        self._register("alice")
        self._register("bob")
        alice = self._auth_header("alice")
        bob = self._auth_header("bob")
        post = self._create_post(alice)

        liked = self.client.post(f"/api/posts/{post['id']}/like", headers=bob)
        self.assertEqual(liked.status_code, 200)
        self.assertEqual(liked.get_json(), {"success": True, "likes": 1, "is_liked": True})

        status = self.client.get(f"/api/posts/{post['id']}/like", headers=bob).get_json()
        self.assertEqual(status, {"is_liked": True, "likes": 1})

        anonymous = self.client.get(f"/api/posts/{post['id']}/like").get_json()
        self.assertEqual(anonymous, {"is_liked": False, "likes": 1})

        unliked = self.client.post(f"/api/posts/{post['id']}/like", headers=bob)
        self.assertEqual(unliked.get_json(), {"success": True, "likes": 0, "is_liked": False})

        missing = self.client.post("/api/posts/999/like", headers=bob)
        self.assertEqual(missing.status_code, 404)

    def test_drafts_hidden_from_likes_and_comments_of_other_users(self):
        self._register("alice")
        self._register("bob")
        alice = self._auth_header("alice")
        bob = self._auth_header("bob")
        draft = self._create_post(alice, title="Unfinished", published=False)

        like = self.client.post(f"/api/posts/{draft['id']}/like", headers=bob)
        self.assertEqual(like.status_code, 404)
        status = self.client.get(f"/api/posts/{draft['id']}/like")
        self.assertEqual(status.status_code, 404)

        comment = self.client.post(
            f"/api/posts/{draft['id']}/comments",
            json={"body": "Sneak peek"},
            headers=bob,
        )
        self.assertEqual(comment.status_code, 404)
        standalone = self.client.post(
            "/api/comments",
            json={"post_id": draft["id"], "body": "Sneak peek"},
            headers=bob,
        )
        self.assertEqual(standalone.status_code, 404)
        self.assertEqual(self.client.get(f"/api/posts/{draft['id']}/comments").status_code, 404)

        own_listing = self.client.get(f"/api/posts/{draft['id']}/comments", headers=alice)
        self.assertEqual(own_listing.status_code, 200)
        own_like = self.client.post(f"/api/posts/{draft['id']}/like", headers=alice)
        self.assertEqual(own_like.status_code, 200)

    def test_profile_counts_and_update(self):
        self._register("alice", name="Alice A.")
        self._register("bob")
        alice = self._auth_header("alice")
        bob = self._auth_header("bob")
        post = self._create_post(alice)
        self.client.post(f"/api/posts/{post['id']}/like", headers=bob)

        profile = self.client.get("/api/profiles/alice").get_json()
        self.assertEqual(profile["display_name"], "Alice A.")
        self.assertEqual(profile["posts_count"], 1)
        self.assertEqual(profile["likes_received"], 1)
        self.assertEqual(profile["comments_received"], 0)

        updated = self.client.put(
            "/api/profiles/me",
            json={"bio": "Writer", "location": "Berlin"},
            headers=alice,
        )
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.get_json()["bio"], "Writer")
        self.assertEqual(updated.get_json()["location"], "Berlin")

        empty = self.client.put("/api/profiles/me", json={}, headers=alice)
        self.assertEqual(empty.status_code, 400)

        posts = self.client.get("/api/profiles/alice/posts").get_json()
        self.assertEqual(posts["total"], 1)
        self.assertEqual(self.client.get("/api/profiles/nobody").status_code, 404)

    def test_notification_settings_defaults_and_update(self):
        self._register("alice")
        alice = self._auth_header("alice")

        defaults = self.client.get("/api/settings/notifications", headers=alice).get_json()
        self.assertTrue(defaults["email_notifications"])
        self.assertFalse(defaults["new_likes"])
        self.assertFalse(defaults["product_updates"])

        incomplete = self.client.put(
            "/api/settings/notifications",
            json={"email_notifications": False},
            headers=alice,
        )
        self.assertEqual(incomplete.status_code, 400)

        settings = {
            "email_notifications": False,
            "new_followers": False,
            "new_comments": True,
            "new_likes": True,
            "weekly_digest": False,
            "product_updates": True,
        }
        saved = self.client.put("/api/settings/notifications", json=settings, headers=alice)
        self.assertEqual(saved.status_code, 200)
        self.assertEqual(
            self.client.get("/api/settings/notifications", headers=alice).get_json(),
            settings,
        )

    def test_account_settings_update(self):
        self._register("alice")
        self._register("bob", email="bob@example.com")
        alice = self._auth_header("alice")

        response = self.client.put(
            "/api/settings/account",
            json={"display_name": "Alice", "email": "Alice@Example.com"},
            headers=alice,
        )
        self.assertEqual(response.status_code, 200)
        account = response.get_json()["account"]
        self.assertEqual(account["email"], "alice@example.com")
        self.assertEqual(account["display_name"], "Alice")

        taken = self.client.put(
            "/api/settings/account",
            json={"display_name": "Alice", "email": "bob@example.com"},
            headers=alice,
        )
        self.assertEqual(taken.status_code, 400)

    def test_upload_avatar_registers_on_profile(self):
        self._register("alice")
        alice = self._auth_header("alice")
        fake_minio = FakeMinio()

        with patch("app.services.media_service.get_minio_client", return_value=fake_minio):
            response = self.client.post(
                "/api/uploads/avatar",
                data={"file": (io.BytesIO(b"fake-image-bytes"), "me.png", "image/png")},
                headers=alice,
                content_type="multipart/form-data",
            )

        self.assertEqual(response.status_code, 201)
        body = response.get_json()
        self.assertEqual(body["kind"], "avatar")
        self.assertTrue(body["object_name"].startswith("uploads/avatar/1/"))
        self.assertTrue(body["object_name"].endswith(".png"))
        self.assertEqual(body["url"], f"http://blog.test/media/{body['object_name']}")
        self.assertEqual(fake_minio.objects[body["object_name"]], b"fake-image-bytes")

        profile = self.client.get("/api/profiles/me", headers=alice).get_json()
        self.assertEqual(profile["avatar_url"], body["url"])

    def test_upload_rejects_bad_type_and_size(self):
        self._register("alice")
        alice = self._auth_header("alice")

        with patch("app.services.media_service.get_minio_client", return_value=FakeMinio()):
            wrong_type = self.client.post(
                "/api/uploads/image",
                data={"file": (io.BytesIO(b"%PDF"), "doc.pdf", "application/pdf")},
                headers=alice,
                content_type="multipart/form-data",
            )
            too_large = self.client.post(
                "/api/uploads/avatar",
                data={"file": (io.BytesIO(b"x" * (2 * 1024 * 1024 + 1)), "big.png", "image/png")},
                headers=alice,
                content_type="multipart/form-data",
            )
            unknown_kind = self.client.post(
                "/api/uploads/video",
                data={"file": (io.BytesIO(b"x"), "a.png", "image/png")},
                headers=alice,
                content_type="multipart/form-data",
            )

        self.assertEqual(wrong_type.status_code, 400)
        self.assertEqual(wrong_type.get_json()["error"], "Unsupported media type: application/pdf")
        self.assertEqual(too_large.status_code, 400)
        self.assertEqual(too_large.get_json()["error"], "File exceeds the 2MB limit")
        self.assertEqual(unknown_kind.status_code, 400)

    def test_upload_uses_local_fallback_when_media_storage_fails(self):
        self._register("alice")
        alice = self._auth_header("alice")

        with patch("app.services.media_service.get_minio_client", return_value=BrokenMinio()):
            response = self.client.post(
                "/api/uploads/cover",
                data={"file": (io.BytesIO(b"cover"), "cover.webp", "image/webp")},
                headers=alice,
                content_type="multipart/form-data",
            )

        self.assertEqual(response.status_code, 201)
        object_name = response.get_json()["object_name"]
        self.assertTrue(object_name.startswith("static/uploads/cover/1/"))
        stored_path = os.path.join(self.app.static_folder, object_name[len("static/"):])
        self.assertTrue(os.path.isfile(stored_path))

    def test_upload_returns_503_without_fallback(self):
        self._register("alice")
        alice = self._auth_header("alice")
        self.app.config["MEDIA_LOCAL_FALLBACK_ENABLED"] = False

        try:
            with patch("app.services.media_service.get_minio_client", return_value=BrokenMinio()):
                response = self.client.post(
                    "/api/uploads/image",
                    data={"file": (io.BytesIO(b"img"), "a.jpg", "image/jpeg")},
                    headers=alice,
                    content_type="multipart/form-data",
                )
        finally:
            self.app.config["MEDIA_LOCAL_FALLBACK_ENABLED"] = True

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.get_json()["error"], "Media storage is unavailable")

    def test_media_route_streams_object_from_minio(self):
        class FakeStat:
            content_type = "image/jpeg"
            size = 3
            etag = "etag-123"
            last_modified = datetime(2026, 2, 25, 18, 0, 0, tzinfo=timezone.utc)

        class FakeMinioObject:
            def __init__(self):
                self.closed = False
                self.released = False

            def stream(self, chunk_size):
                yield b"abc"

            def close(self):
                self.closed = True

            def release_conn(self):
                self.released = True

        fake_obj = FakeMinioObject()
        captured = {}

        class StreamingMinio:
            def stat_object(self, bucket_name, object_name):
                captured["stat_bucket_name"] = bucket_name
                captured["stat_object_name"] = object_name
                return FakeStat()

            def get_object(self, bucket_name, object_name):
                captured["get_object_name"] = object_name
                return fake_obj

        with patch("app.services.media_service.get_minio_client", return_value=StreamingMinio()):
            response = self.client.get("/media/uploads/image/1/sample.jpeg")
            data = response.data

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data, b"abc")
        self.assertEqual(response.mimetype, "image/jpeg")
        self.assertIn("max-age=", response.headers["Cache-Control"])
        self.assertIn("public", response.headers["Cache-Control"])
        self.assertEqual(response.headers["Accept-Ranges"], "bytes")
        self.assertEqual(response.headers["ETag"], '"etag-123"')
        self.assertEqual(captured["stat_bucket_name"], self.app.config["MINIO_BUCKET"])
        self.assertEqual(captured["stat_object_name"], "uploads/image/1/sample.jpeg")
        self.assertEqual(captured["get_object_name"], "uploads/image/1/sample.jpeg")
        self.assertTrue(fake_obj.closed)
        self.assertTrue(fake_obj.released)

    def test_media_route_head_and_conditional_requests(self):
        class FakeStat:
            content_type = "image/jpeg"
            size = 3
            etag = "etag-789"
            last_modified = datetime(2026, 2, 25, 18, 0, 0, tzinfo=timezone.utc)

        captured = {"get_object_calls": 0}

        class MetadataMinio:
            def stat_object(self, **kwargs):
                return FakeStat()

            def get_object(self, **kwargs):
                captured["get_object_calls"] += 1
                return None

        with patch("app.services.media_service.get_minio_client", return_value=MetadataMinio()):
            head = self.client.head("/media/uploads/image/1/sample.jpeg")
            not_modified = self.client.get(
                "/media/uploads/image/1/sample.jpeg",
                headers={"If-None-Match": '"etag-789"'},
            )
            not_modified_since = self.client.get(
                "/media/uploads/image/1/sample.jpeg",
                headers={"If-Modified-Since": "Thu, 26 Feb 2026 00:00:00 GMT"},
            )

        self.assertEqual(head.status_code, 200)
        self.assertEqual(head.data, b"")
        self.assertEqual(head.headers["Content-Length"], "3")
        self.assertEqual(not_modified.status_code, 304)
        self.assertEqual(not_modified.headers["ETag"], '"etag-789"')
        self.assertEqual(not_modified_since.status_code, 304)
        self.assertEqual(captured["get_object_calls"], 0)


if __name__ == "__main__":
    unittest.main()
