"""
Errors raised by the remote store and authentication adapters.
"""


class TrackerError(Exception):
    pass


class StoreError(TrackerError):
    """A document read, write or subscription failed."""


class AuthError(TrackerError):
    """The authentication provider rejected or failed a request."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
