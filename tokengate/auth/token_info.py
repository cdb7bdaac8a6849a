"""Result handed back to callers after issuing or refreshing a token."""

from pydantic import BaseModel

REFRESH_TOKEN_PREFIX = "r:"


def new_refresh_token(token_id: str) -> str:
    """Derive the companion refresh token from an access token identifier."""
    return f"{REFRESH_TOKEN_PREFIX}{token_id}"


def token_id_from_refresh_token(refresh_token: str) -> str | None:
    """Inverse of :func:`new_refresh_token`; ``None`` if not a refresh token."""
    if not refresh_token.startswith(REFRESH_TOKEN_PREFIX):
        return None
    return refresh_token[len(REFRESH_TOKEN_PREFIX) :] or None


class TokenInfo(BaseModel):
    """Issued access token plus its companion refresh token."""

    token_id: str
    access_token: str
    expires_at: int
    refresh_token: str
    refresh_expires: int

    def encode_to_json(self) -> str:
        return self.model_dump_json()
