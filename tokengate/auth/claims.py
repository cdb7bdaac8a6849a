"""Session claims carried inside a signed token.

``UserInfo`` is the caller-owned identity. ``UserClaims`` adds the token
identifier and the validity window; it is what gets signed, what
validation returns, and what revocation consumes.
"""

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class UserInfo(BaseModel):
    """Identity embedded into a token at issuance."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="sub")
    user_name: str | None = Field(default=None, alias="name")
    account: str | None = Field(default=None, alias="acc")
    roles: list[str] = Field(default_factory=list)
    domain: str | None = Field(default=None, alias="dom")
    issuer: str | None = Field(default=None, alias="iss")
    attributes: dict[str, Any] = Field(default_factory=dict, alias="attrs")


class UserClaims(UserInfo):
    """Signed payload of a session token: identity + identifier + window."""

    token_id: str = Field(alias="jti")
    issued_at: int = Field(alias="iat")
    not_before: int = Field(alias="nbf")
    expires_at: int = Field(alias="exp")

    def stamp(self, now: int, lifetime: int) -> None:
        """Reset the validity window to ``[now, now + lifetime)``."""
        self.issued_at = now
        self.not_before = now
        self.expires_at = now + lifetime

    def identity(self) -> UserInfo:
        """Return a detached copy of the identity part of the claims."""
        return UserInfo(**self.model_dump(include=set(UserInfo.model_fields)))

    def to_payload(self) -> dict[str, Any]:
        """JWT payload using the short wire names; empty values are omitted."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        return {k: v for k, v in payload.items() if v != [] and v != {}}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "UserClaims":
        """Build claims from a decoded payload. Raises ``ValidationError``."""
        return cls.model_validate(payload)


def new_user_claims(user: UserInfo, now: int, lifetime: int) -> UserClaims:
    """Copy *user* into fresh claims with a newly minted token identifier."""
    identity = user.model_dump(include=set(UserInfo.model_fields))
    return UserClaims(
        **identity,
        token_id=uuid4().hex,
        issued_at=now,
        not_before=now,
        expires_at=now + lifetime,
    )
