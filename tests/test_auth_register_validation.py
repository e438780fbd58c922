import os
import tempfile
import unittest


class TestAuthRegisterValidation(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from app import create_app
        from app.db import db

        cls.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": "test-secret-key-0123456789abcdef0123",
            "RATELIMIT_STORAGE_URI": "memory://",
        })
        cls.db = db
        cls.client = cls.app.test_client()

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()

    def test_register_rejects_missing_password(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "username": "user_without_password",
            }
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Missing fields")

    def test_register_rejects_blank_username(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "username": "   ",
                "password": "pass123"
            }
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Missing fields")

    def test_register_rejects_invalid_email(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "username": "writer",
                "password": "pass123",
                "email": "not-an-email"
            }
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid email")

    def test_register_rejects_duplicate_username_and_email(self):
        first = self.client.post(
            "/api/auth/register",
            json={
                "username": "writer",
                "password": "pass123",
                "email": "writer@example.com"
            }
        )
        self.assertEqual(first.status_code, 201)

        same_username = self.client.post(
            "/api/auth/register",
            json={"username": "writer", "password": "pass123"}
        )
        self.assertEqual(same_username.status_code, 400)
        self.assertEqual(same_username.get_json()["error"], "Username already exists")

        same_email = self.client.post(
            "/api/auth/register",
            json={
                "username": "other",
                "password": "pass123",
                "email": "Writer@Example.com"
            }
        )
        self.assertEqual(same_email.status_code, 400)
        self.assertEqual(same_email.get_json()["error"], "Email already registered")

    def test_register_creates_profile(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "username": "writer",
                "password": "pass123",
                "name": "Jo Writer"
            }
        )
        self.assertEqual(response.status_code, 201)

        profile = self.client.get("/api/profiles/writer")
        self.assertEqual(profile.status_code, 200)
        self.assertEqual(profile.get_json()["display_name"], "Jo Writer")


if __name__ == "__main__":
    unittest.main()
