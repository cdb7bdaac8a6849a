"""Authentication outcome exceptions.

Callers must treat every one of these as "not authenticated". The split
between invalid and expired only tells a caller whether to ask for a full
re-login or to attempt a silent refresh. A revoked token is reported as
expired so revocation state never leaks.
"""


class AuthError(Exception):
    """Base class for token authentication failures."""

    default_message = "authentication failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NoTokenError(AuthError):
    """No raw token was supplied or could be extracted from the request."""

    default_message = "no token found"


class InvalidTokenError(AuthError):
    """Signature, structure or claim-shape failure."""

    default_message = "invalid token"


class ExpiredTokenError(AuthError):
    """Token expired naturally or its identifier has been revoked."""

    default_message = "token expired"
