from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from . import create_user


class AuthAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def _login(self, username="dairyadmin", password="secret123"):
        return self.client.post(
            "/api/auth/login/", {"username": username, "password": password}, format="json"
        )

    def test_register_hashes_password(self):
        response = self.client.post(
            "/api/auth/register/", {"username": "ravi", "password": "secret123"}, format="json"
        )
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.data["data"]["user"]["Username"], "ravi")
        self.assertNotIn("password", response.data["data"]["user"])

        user = User.objects.get(username="ravi")
        self.assertNotEqual(user.password, "secret123")
        self.assertTrue(user.check_password("secret123"))

    def test_register_validation_and_conflict(self):
        response = self.client.post(
            "/api/auth/register/", {"username": "ab", "password": "secret123"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/api/auth/register/", {"username": "ravi", "password": "12345"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

        create_user("ravi")
        response = self.client.post(
            "/api/auth/register/", {"username": "ravi", "password": "secret123"}, format="json"
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["message"], "Username already exists")

    def test_login_returns_token_with_user_claims(self):
        user = create_user()
        response = self._login()
        self.assertEqual(response.status_code, 200, response.content)
        token = AccessToken(response.data["data"]["token"])
        self.assertEqual(str(token["user_id"]), str(user.id))
        self.assertEqual(token["username"], "dairyadmin")
        self.assertEqual(response.data["data"]["user"]["Id"], user.id)

    def test_login_failures_are_indistinguishable(self):
        create_user()
        wrong_password = self._login(password="wrong-pass")
        unknown_user = self._login(username="nobody")

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_user.status_code, 401)
        self.assertEqual(wrong_password.data, unknown_user.data)
        self.assertEqual(wrong_password.data["message"], "Invalid username or password")

    def test_protected_routes_require_valid_token(self):
        create_user()
        token = self._login().data["data"]["token"]

        response = self.client.get("/api/buyers/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["message"], "Access denied. No token provided.")

        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = self.client.get("/api/buyers/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["message"], "Invalid or expired token.")

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get("/api/auth/profile/")
        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.data["data"]["user"]["Username"], "dairyadmin")

    def test_token_of_deleted_user_is_rejected(self):
        user = create_user()
        token = self._login().data["data"]["token"]
        user.delete()

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get("/api/auth/profile/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["message"], "User no longer exists.")

    def test_change_password(self):
        user = create_user()
        self.client.force_authenticate(user=user)

        response = self.client.put(
            "/api/auth/change-password/",
            {"currentPassword": "wrong-pass", "newPassword": "newsecret"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("Current password is incorrect", response.data["message"])

        response = self.client.put(
            "/api/auth/change-password/",
            {"currentPassword": "secret123", "newPassword": "newsecret"},
            format="json",
        )
        self.assertEqual(response.status_code, 200, response.content)
        user.refresh_from_db()
        self.assertTrue(user.check_password("newsecret"))

    def test_user_management(self):
        admin = create_user()
        other = create_user("helper")
        self.client.force_authenticate(user=admin)

        response = self.client.get("/api/auth/users/")
        self.assertEqual(response.data["data"]["total"], 2)

        response = self.client.delete(f"/api/auth/users/{admin.id}/")
        self.assertEqual(response.status_code, 400)

        response = self.client.delete(f"/api/auth/users/{other.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(pk=other.id).exists())

        response = self.client.delete(f"/api/auth/users/{other.id}/")
        self.assertEqual(response.status_code, 404)
