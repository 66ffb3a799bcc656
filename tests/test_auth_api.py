"""API tests for /auth: register, login, validate, logout and their exact JSON bodies."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from pydantic import SecretStr
from sqlalchemy.exc import OperationalError

from app.core.config import Settings, get_settings
from app.main import app
from app.models import Profile, User

from support import make_client, make_codec, make_session_factory, reset_overrides

CREDENTIALS = {"username": "alice", "password": "pw1"}
BAD_LOGIN_BODY = {"success": False, "message": "Username and/or password is incorrect."}


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        self.codec = make_codec()
        self.client = make_client(self.session_factory, self.codec)

    def tearDown(self) -> None:
        self.client.close()
        reset_overrides()

    def _register(self, credentials: dict[str, str] = CREDENTIALS):
        return self.client.post("/auth/register", json=credentials)


class TestRegister(AuthApiTestCase):
    """POST /auth/register."""

    def test_returns_201_with_redirect(self) -> None:
        response = self._register()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"success": True, "redirect": "/profile"})

    def test_sets_http_only_cookie_with_session_lifetime(self) -> None:
        response = self._register()
        set_cookie = response.headers["set-cookie"]
        self.assertTrue(set_cookie.startswith("auth_token="))
        self.assertIn("HttpOnly", set_cookie)
        self.assertIn("Max-Age=1800", set_cookie)
        self.assertIn("Path=/", set_cookie)
        # APP_ENV defaults to dev, where the cookie must also work over plain HTTP.
        self.assertNotIn("Secure", set_cookie)

    def test_cookie_token_resolves_to_new_user(self) -> None:
        response = self._register()
        token = response.cookies["auth_token"]
        with self.session_factory() as db:
            user = db.query(User).filter(User.username == "alice").one()
            self.assertEqual(self.codec.verify(token), user.id)
            self.assertIsNotNone(db.get(Profile, user.id))

    def test_duplicate_username_is_409(self) -> None:
        self.assertEqual(self._register().status_code, 201)
        response = self._register({"username": "alice", "password": "different"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(
            response.json(),
            {
                "success": False,
                "message": "Username is already in use. Please choose a different one.",
            },
        )
        self.assertNotIn("set-cookie", response.headers)
        with self.session_factory() as db:
            self.assertEqual(db.query(User).filter(User.username == "alice").count(), 1)

    def test_missing_fields_are_422(self) -> None:
        response = self.client.post("/auth/register", json={"username": "alice"})
        self.assertEqual(response.status_code, 422)

    def test_store_failure_is_500_without_details(self) -> None:
        broken = MagicMock()
        broken.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        reset_overrides()
        client = make_client(lambda: broken, self.codec)
        response = client.post("/auth/register", json=CREDENTIALS)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Server error"})


class TestLogin(AuthApiTestCase):
    """POST /auth/login."""

    def setUp(self) -> None:
        super().setUp()
        self._register()
        self.client.cookies.clear()

    def test_correct_credentials(self) -> None:
        response = self.client.post("/auth/login", json=CREDENTIALS)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "redirect": "/profile"})
        self.assertIn("auth_token", response.cookies)

    def test_wrong_password_and_unknown_user_are_indistinguishable(self) -> None:
        wrong_password = self.client.post(
            "/auth/login", json={"username": "alice", "password": "nope"}
        )
        unknown_user = self.client.post(
            "/auth/login", json={"username": "nobody", "password": "pw1"}
        )
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_user.status_code, 401)
        self.assertEqual(wrong_password.json(), BAD_LOGIN_BODY)
        self.assertEqual(wrong_password.content, unknown_user.content)
        self.assertNotIn("set-cookie", wrong_password.headers)

    def test_out_of_range_usernames_get_the_same_401(self) -> None:
        for username in ("", "u" * 256):
            with self.subTest(length=len(username)):
                response = self.client.post(
                    "/auth/login", json={"username": username, "password": "x"}
                )
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json(), BAD_LOGIN_BODY)

    def test_overlong_password_gets_the_same_401(self) -> None:
        response = self.client.post(
            "/auth/login", json={"username": "alice", "password": "p" * 500}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), BAD_LOGIN_BODY)

    def test_store_failure_is_500(self) -> None:
        broken = MagicMock()
        broken.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        reset_overrides()
        client = make_client(lambda: broken, self.codec)
        response = client.post("/auth/login", json=CREDENTIALS)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Server error"})


class TestValidate(AuthApiTestCase):
    """GET /auth/validate goes through the authorization gate."""

    def test_no_cookie_is_401(self) -> None:
        response = self.client.get("/auth/validate")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"success": False, "message": "Access Denied: No token provided"},
        )

    def test_invalid_cookie_is_403(self) -> None:
        self.client.cookies.set("auth_token", "not-a-token")
        response = self.client.get("/auth/validate")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(), {"success": False, "message": "Forbidden: Invalid token"}
        )

    def test_expired_cookie_is_403(self) -> None:
        token = self.codec.issue(1, now=datetime.now(UTC) - timedelta(seconds=1801))
        self.client.cookies.set("auth_token", token)
        response = self.client.get("/auth/validate")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(), {"success": False, "message": "Forbidden: Invalid token"}
        )

    def test_valid_cookie_after_register(self) -> None:
        self._register()
        response = self.client.get("/auth/validate")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"tokenIsValid": True})


class TestLogout(AuthApiTestCase):
    """POST /auth/logout clears the cookie whether or not one was sent."""

    def _assert_cookie_cleared(self, response) -> None:
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})
        set_cookie = response.headers["set-cookie"]
        self.assertTrue(set_cookie.startswith("auth_token="))
        self.assertIn("Max-Age=0", set_cookie)
        self.assertIn("HttpOnly", set_cookie)
        self.assertIn("samesite=strict", set_cookie.lower())

    def test_logout_with_cookie(self) -> None:
        self._register()
        response = self.client.post("/auth/logout")
        self._assert_cookie_cleared(response)
        self.assertNotIn("auth_token", self.client.cookies)
        self.assertEqual(self.client.get("/auth/validate").status_code, 401)

    def test_logout_without_cookie_is_noop(self) -> None:
        self._assert_cookie_cleared(self.client.post("/auth/logout"))

    def test_logout_does_not_touch_store(self) -> None:
        broken = MagicMock()
        reset_overrides()
        client = make_client(lambda: broken, self.codec)
        self._assert_cookie_cleared(client.post("/auth/logout"))
        broken.query.assert_not_called()


class TestProductionCookie(AuthApiTestCase):
    """With APP_ENV=prod the auth cookie is issued and cleared with Secure."""

    def setUp(self) -> None:
        super().setUp()
        prod_settings = Settings(
            _env_file=None,
            APP_ENV="prod",
            JWT_SECRET=SecretStr("prod-secret-0123456789abcdef0123456789abcdef"),
        )
        app.dependency_overrides[get_settings] = lambda: prod_settings

    def test_register_sets_secure_cookie(self) -> None:
        set_cookie = self._register().headers["set-cookie"]
        self.assertTrue(set_cookie.startswith("auth_token="))
        self.assertIn("Secure", set_cookie)
        self.assertIn("HttpOnly", set_cookie)

    def test_login_sets_secure_cookie(self) -> None:
        self._register()
        response = self.client.post("/auth/login", json=CREDENTIALS)
        self.assertIn("Secure", response.headers["set-cookie"])

    def test_logout_clears_with_secure(self) -> None:
        set_cookie = self.client.post("/auth/logout").headers["set-cookie"]
        self.assertIn("Max-Age=0", set_cookie)
        self.assertIn("Secure", set_cookie)


class TestUnexpectedErrors(AuthApiTestCase):
    """Failures that are not store errors still get the generic 500 body."""

    def test_register_failure_outside_store(self) -> None:
        client = make_client(self.session_factory, self.codec, raise_server_exceptions=False)
        with patch("app.api.auth.register_user", side_effect=RuntimeError("hash failed")):
            response = client.post("/auth/register", json=CREDENTIALS)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Server error"})
        self.assertNotIn("hash failed", response.text)


if __name__ == "__main__":
    unittest.main()
