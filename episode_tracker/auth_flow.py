"""
Sign-up, sign-in and sign-out for the episode tracker.
"""

from __future__ import annotations

import logging

from episode_tracker.auth import AuthClient
from episode_tracker.errors import AuthError, StoreError
from episode_tracker.store import DocumentStore
from shared.convert import profile_document
from shared.firebase_constants import USERS_COLLECTION
from shared.types import SignUpForm

logger = logging.getLogger(__name__)

PASSWORD_MISMATCH_MESSAGE = "Passwords do not match."


class AuthFlow:
    """
    Tracks whether a user is signed in, plus the validation flags and message
    a sign-in or sign-up form displays.
    """

    def __init__(self, auth: AuthClient, store: DocumentStore):
        self._auth = auth
        self._store = store
        self.signed_in = False
        self.message = ""
        self.bad_email = False
        self.bad_password = False

    def _check_credentials(self, email: str, password: str) -> bool:
        self.bad_email = False
        self.bad_password = False
        if not email:
            self.bad_email = True
            return False
        if not password:
            self.bad_password = True
            return False
        return True

    def sign_in(self, email: str, password: str) -> bool:
        if not self._check_credentials(email, password):
            return False

        try:
            uid = self._auth.sign_in(email, password)
        except AuthError as e:
            logger.error("Failed to login user: %s", e.reason)
            self.message = f"Failed to login user: {e.reason}"
            return False

        logger.info("User %s signed in", uid)
        self.message = ""
        self.signed_in = True
        return True

    def sign_up(self, form: SignUpForm) -> bool:
        """
        Creates the account, writes its profile document, then signs in.

        `signed_in` is set only once the final sign-in succeeds. Any failed
        step is logged and stops the flow.
        """
        if not self._check_credentials(form.email, form.password):
            return False
        if form.password != form.confirm_password:
            self.message = PASSWORD_MISMATCH_MESSAGE
            return False

        try:
            uid = self._auth.create_user(form.email, form.password)
        except AuthError as e:
            logger.error("Failed to create user: %s", e.reason)
            self.message = f"Failed to create user: {e.reason}"
            return False
        logger.info("Created user: %s", uid)

        try:
            self._store.set(USERS_COLLECTION, uid, profile_document(uid, form))
        except StoreError as e:
            logger.error("Failed to write profile for %s: %s", uid, e)
            return False

        return self.sign_in(form.email, form.password)

    def sign_out(self) -> None:
        self.signed_in = False
        try:
            self._auth.sign_out()
        except AuthError as e:
            logger.warning("Sign out failed: %s", e.reason)
