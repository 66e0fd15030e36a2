"""
Authentication abstraction for Firebase Authentication and an in-memory test implementation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import requests

from episode_tracker.errors import AuthError

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
REQUEST_TIMEOUT = 30  # seconds

# Firebase Authentication REST error codes mapped to messages shown on sign-in.
ERROR_MESSAGES = {
    "EMAIL_EXISTS": "The email address is already in use by another account.",
    "EMAIL_NOT_FOUND": "There is no user record corresponding to this email.",
    "INVALID_PASSWORD": "The password is invalid.",
    "INVALID_LOGIN_CREDENTIALS": "The email or password is incorrect.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "USER_DISABLED": "The user account has been disabled by an administrator.",
    "WEAK_PASSWORD": "The password must be 6 characters long or more.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
    "OPERATION_NOT_ALLOWED": "Password sign-in is disabled for this project.",
}


def describe_error(code: str) -> str:
    """Turns a Firebase error code such as `WEAK_PASSWORD : ...` into readable text."""
    key = code.split(":", 1)[0].strip()
    return ERROR_MESSAGES.get(key, code)


class AuthClient(Protocol):
    """Interface for the authentication provider."""

    @property
    def current_user_uid(self) -> Optional[str]:
        ...

    def sign_in(self, email: str, password: str) -> str:
        ...

    def create_user(self, email: str, password: str) -> str:
        ...

    def sign_out(self) -> None:
        ...


@dataclass
class InMemoryAuthClient:
    """Test double for the authentication provider."""

    accounts: Dict[str, tuple[str, str]] = field(default_factory=dict)
    current_user_uid: Optional[str] = None
    fail_sign_out: bool = False

    def sign_in(self, email: str, password: str) -> str:
        account = self.accounts.get(email)
        if account is None:
            raise AuthError(describe_error("EMAIL_NOT_FOUND"))
        stored_password, uid = account
        if stored_password != password:
            raise AuthError(describe_error("INVALID_PASSWORD"))
        self.current_user_uid = uid
        return uid

    def create_user(self, email: str, password: str) -> str:
        if email in self.accounts:
            raise AuthError(describe_error("EMAIL_EXISTS"))
        if len(password) < 6:
            raise AuthError(describe_error("WEAK_PASSWORD"))
        uid = uuid.uuid4().hex
        self.accounts[email] = (password, uid)
        self.current_user_uid = uid
        return uid

    def sign_out(self) -> None:
        self.current_user_uid = None
        if self.fail_sign_out:
            raise AuthError("Sign out failed")

    def reset(self) -> None:
        self.accounts.clear()
        self.current_user_uid = None
        self.fail_sign_out = False


class FirebaseAuthClient:
    """
    Email/password authentication through the Firebase Authentication REST API.

    The signed-in user is kept on this client object; there is no persisted
    session across processes. Only the uid is kept: Firestore is reached
    through the Admin SDK with service credentials, so security rules are not
    evaluated per user.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        if not api_key:
            raise ValueError("FIREBASE_API_KEY is required for FirebaseAuthClient")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()
        self._uid: Optional[str] = None

    @property
    def current_user_uid(self) -> Optional[str]:
        return self._uid

    def sign_in(self, email: str, password: str) -> str:
        return self._authenticate("accounts:signInWithPassword", email, password)

    def create_user(self, email: str, password: str) -> str:
        return self._authenticate("accounts:signUp", email, password)

    def sign_out(self) -> None:
        self._uid = None

    def _authenticate(self, endpoint: str, email: str, password: str) -> str:
        payload = {"email": email, "password": password, "returnSecureToken": True}
        try:
            response = self._session.post(
                f"{IDENTITY_TOOLKIT_URL}/{endpoint}",
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthError(f"Could not reach the authentication service: {e}") from e

        if not response.ok:
            raise AuthError(_error_reason(response))

        try:
            uid = response.json()["localId"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError("Unexpected response from the authentication service") from e
        self._uid = uid
        return uid


def _error_reason(response: requests.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"Authentication request failed with status {response.status_code}"
    return describe_error(message)
