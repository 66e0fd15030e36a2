import unittest
from unittest.mock import MagicMock

import requests

from episode_tracker.auth import (
    IDENTITY_TOOLKIT_URL,
    FirebaseAuthClient,
    InMemoryAuthClient,
    describe_error,
)
from episode_tracker.errors import AuthError


def _response(ok=True, status_code=200, body=None):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    return response


class DescribeErrorTests(unittest.TestCase):
    def test_known_code_with_detail(self):
        self.assertEqual(
            describe_error("WEAK_PASSWORD : Password should be at least 6 characters"),
            "The password must be 6 characters long or more.",
        )

    def test_unknown_code_is_passed_through(self):
        self.assertEqual(describe_error("SOMETHING_NEW"), "SOMETHING_NEW")


class InMemoryAuthClientTests(unittest.TestCase):
    def test_create_user_signs_in(self):
        auth = InMemoryAuthClient()
        uid = auth.create_user("a@example.com", "secret1")
        self.assertEqual(auth.current_user_uid, uid)

    def test_sign_in_rejects_wrong_password(self):
        auth = InMemoryAuthClient()
        auth.create_user("a@example.com", "secret1")
        auth.sign_out()

        with self.assertRaises(AuthError) as ctx:
            auth.sign_in("a@example.com", "wrong")
        self.assertEqual(ctx.exception.reason, "The password is invalid.")
        self.assertIsNone(auth.current_user_uid)

    def test_duplicate_email_rejected(self):
        auth = InMemoryAuthClient()
        auth.create_user("a@example.com", "secret1")
        with self.assertRaises(AuthError):
            auth.create_user("a@example.com", "secret2")


class FirebaseAuthClientTests(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.auth = FirebaseAuthClient(api_key="key", timeout=5, session=self.session)

    def test_requires_api_key(self):
        with self.assertRaises(ValueError):
            FirebaseAuthClient(api_key="")

    def test_sign_in_posts_credentials(self):
        self.session.post.return_value = _response(
            body={"localId": "u1", "idToken": "token"}
        )

        uid = self.auth.sign_in("a@example.com", "secret")

        self.assertEqual(uid, "u1")
        self.assertEqual(self.auth.current_user_uid, "u1")
        self.session.post.assert_called_once_with(
            f"{IDENTITY_TOOLKIT_URL}/accounts:signInWithPassword",
            params={"key": "key"},
            json={
                "email": "a@example.com",
                "password": "secret",
                "returnSecureToken": True,
            },
            timeout=5,
        )

    def test_create_user_uses_sign_up_endpoint(self):
        self.session.post.return_value = _response(body={"localId": "u2"})

        self.assertEqual(self.auth.create_user("b@example.com", "secret"), "u2")
        self.assertEqual(
            self.session.post.call_args.args[0],
            f"{IDENTITY_TOOLKIT_URL}/accounts:signUp",
        )

    def test_error_payload_becomes_readable_reason(self):
        self.session.post.return_value = _response(
            ok=False,
            status_code=400,
            body={"error": {"code": 400, "message": "EMAIL_NOT_FOUND"}},
        )

        with self.assertRaises(AuthError) as ctx:
            self.auth.sign_in("a@example.com", "secret")
        self.assertEqual(
            ctx.exception.reason,
            "There is no user record corresponding to this email.",
        )
        self.assertIsNone(self.auth.current_user_uid)

    def test_network_failure_becomes_auth_error(self):
        self.session.post.side_effect = requests.ConnectionError("down")
        with self.assertRaises(AuthError):
            self.auth.sign_in("a@example.com", "secret")

    def test_success_without_json_body_becomes_auth_error(self):
        self.session.post.return_value = _response()
        self.session.post.return_value.json.side_effect = ValueError("not json")

        with self.assertRaises(AuthError) as ctx:
            self.auth.sign_in("a@example.com", "secret")
        self.assertEqual(
            ctx.exception.reason, "Unexpected response from the authentication service"
        )
        self.assertIsNone(self.auth.current_user_uid)

    def test_success_without_local_id_becomes_auth_error(self):
        self.session.post.return_value = _response(body={"idToken": "t"})

        with self.assertRaises(AuthError):
            self.auth.create_user("a@example.com", "secret")
        self.assertIsNone(self.auth.current_user_uid)

    def test_sign_out_clears_user(self):
        self.session.post.return_value = _response(body={"localId": "u1"})
        self.auth.sign_in("a@example.com", "secret")

        self.auth.sign_out()

        self.assertIsNone(self.auth.current_user_uid)


if __name__ == "__main__":
    unittest.main()
