"""Token lifecycle: issue, validate, refresh and revoke.

Tokens are trusted on signature and expiry alone unless their identifier
is present in the revocation store (reverse revocation: only logouts are
recorded, never active sessions). Validation always finishes the
signature/expiry checks before touching the store, so a structurally bad
token never costs a store lookup.

The authenticator holds no mutable state beyond the frozen policy and the
store reference and is safe to share between concurrent callers. A
validation racing a concurrent revoke may still succeed; exposure is
bounded by the access token lifetime.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from jose import JWTError
from jose.exceptions import ExpiredSignatureError

from tokengate.auth.claims import UserClaims, UserInfo, new_user_claims
from tokengate.auth.policy import PolicyOverride, TokenPolicy, build_policy
from tokengate.auth.revocation import RevocationStore, revocation_key
from tokengate.auth.token_info import (
    TokenInfo,
    new_refresh_token,
    token_id_from_refresh_token,
)
from tokengate.config import Settings, get_settings
from tokengate.exceptions import ExpiredTokenError, InvalidTokenError
from tokengate.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# External refresh policy (rate limits, session rules). Raise to abort.
RefreshCheck = Callable[[UserClaims, int], Awaitable[None]]


class Authenticator:
    """JWT session authenticator with negative revocation.

    Args:
        store: Revocation store, or ``None`` to disable revocation entirely.
        policy: Resolved token policy, see :func:`build_policy`.
    """

    def __init__(self, store: RevocationStore | None, policy: TokenPolicy):
        self.store = store
        self.policy = policy

    async def __aenter__(self) -> "Authenticator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def issue_token(
        self, user: UserInfo, request: Request | None = None
    ) -> tuple[TokenInfo, UserClaims]:
        """Issue a new access token for *user*.

        Never reads or writes the revocation store.
        """
        now = int(time.time())
        claims = new_user_claims(user, now, self.policy.expired)
        refresh = await self._shape_claims(claims, request)
        access_token = self._sign(claims)

        logger.debug("Issued token %s for %s", claims.token_id, claims.user_id)
        return self._token_info(claims, access_token, now, refresh), claims

    async def validate_token(
        self, token: str | None = None, request: Request | None = None
    ) -> UserClaims:
        """Return the claims of a valid, unrevoked access token.

        Raises:
            NoTokenError: no token given and none found on *request*.
            ExpiredTokenError: token expired or revoked.
            InvalidTokenError: signature or structure is invalid.
        """
        if not token:
            token = await self.policy.token_extractor(request)
        try:
            claims = await self.policy.parse_claims(self.policy, token)
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except JWTError as exc:
            raise InvalidTokenError() from exc

        await self._check_revoked(claims)
        return claims

    async def refresh_token(
        self,
        token: str | None = None,
        request: Request | None = None,
        check: RefreshCheck | None = None,
        companion: str | None = None,
    ) -> tuple[TokenInfo, UserClaims]:
        """Re-issue a session from a (possibly expired) access token.

        Only the signature of *token* is verified; its timestamps belong
        to the original access token and are expected to be stale. When
        *companion* is given it must be the refresh token issued with
        *token*. The token identifier is carried over unchanged, so one
        revoke ends the whole session chain.

        Raises:
            NoTokenError: no token given and none found on *request*.
            InvalidTokenError: signature, structure or companion mismatch.
            ExpiredTokenError: the session has been revoked.
        """
        if not token:
            token = await self.policy.token_extractor(request)
        try:
            claims = await self.policy.parse_refresh(self.policy, token)
        except JWTError as exc:
            raise InvalidTokenError() from exc
        if companion is not None and token_id_from_refresh_token(companion) != claims.token_id:
            raise InvalidTokenError("refresh token does not belong to this session")

        await self._check_revoked(claims)
        if check is not None:
            await check(claims, self.policy.refresh)

        now = int(time.time())
        claims.stamp(now, self.policy.expired)
        access_token = self._sign(claims)
        refresh = await self._shape_claims(claims, request)

        logger.debug("Refreshed token %s for %s", claims.token_id, claims.user_id)
        return self._token_info(claims, access_token, now, refresh), claims

    async def revoke_token(self, claims: Any) -> None:
        """Record *claims* as logged out until their natural expiry.

        Revoking twice is harmless. An already expired token still gets a
        write attempt; the store decides what a non-positive TTL means.
        """
        if not isinstance(claims, UserClaims):
            raise InvalidTokenError()
        if self.store is None:
            return
        ttl = claims.expires_at - int(time.time())
        await self.store.set_with_ttl(revocation_key(claims.token_id), ttl)
        logger.debug("Revoked token %s (ttl=%s)", claims.token_id, ttl)

    async def update(self, request: Request | None = None) -> None:
        """Run the policy's external sync hook, if any."""
        if self.policy.update_hook is not None:
            await self.policy.update_hook(request)

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _sign(self, claims: UserClaims) -> str:
        policy = self.policy
        return policy.signer(claims, policy.signing_method, policy.signing_secret, policy.token_type)

    async def _shape_claims(self, claims: UserClaims, request: Request | None) -> int:
        """Run the claims hook; returns the refresh lifetime to use."""
        refresh = self.policy.refresh
        if self.policy.claims_hook is not None:
            override = await self.policy.claims_hook(claims, request)
            if override and override > 0:
                refresh = override
        return refresh

    async def _check_revoked(self, claims: UserClaims) -> None:
        if self.store is None:
            return
        if await self.store.exists(revocation_key(claims.token_id)):
            logger.info("Rejected revoked token %s", claims.token_id)
            raise ExpiredTokenError()

    @staticmethod
    def _token_info(claims: UserClaims, access_token: str, now: int, refresh: int) -> TokenInfo:
        return TokenInfo(
            token_id=claims.token_id,
            access_token=access_token,
            expires_at=claims.expires_at,
            refresh_token=new_refresh_token(claims.token_id),
            refresh_expires=now + refresh,
        )


def create_authenticator(
    store: RevocationStore | None,
    *overrides: PolicyOverride,
    settings: Settings | None = None,
) -> Authenticator:
    """Build an :class:`Authenticator` from settings plus policy overrides.

    Also applies the configured ``log_level`` and ``log_format``.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    return Authenticator(store, build_policy(*overrides, settings=settings))
