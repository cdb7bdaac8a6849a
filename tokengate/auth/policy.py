"""Token policy: durations, signing material and pluggable strategies.

A policy is resolved once. Defaults come from :class:`Settings`, then
each override function is applied in order::

    policy = build_policy(
        set_signing_method("HS256"),
        set_expired(900),
        set_token_extractor(get_cookie_token),
    )

After that the policy is frozen; nothing mutates it at runtime.
Incompatible method/secret combinations are not checked here and only
fail on the first sign or parse.
"""

import logging
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Any

from fastapi import Request

from tokengate.auth.claims import UserClaims
from tokengate.auth.extractors import TokenExtractor, extractor_for, get_bearer_token
from tokengate.auth.signing import (
    parse_access_claims,
    parse_refresh_claims,
    pin_signing_key,
    sign_claims,
)
from tokengate.config import Settings, get_settings

logger = logging.getLogger(__name__)

Signer = Callable[[UserClaims, str, Any, str], str]
KeyResolver = Callable[[dict[str, Any], str, Any], tuple[str, Any]]
ClaimsParser = Callable[["TokenPolicy", str], Awaitable[UserClaims]]
# Shapes claims before signing; returns a refresh lifetime override (<= 0 keeps the default).
ClaimsHook = Callable[[UserClaims, Request | None], Awaitable[int]]
UpdateHook = Callable[[Request | None], Awaitable[None]]
PolicyOverride = Callable[["TokenPolicy"], "TokenPolicy"]


@dataclass(frozen=True)
class TokenPolicy:
    """Effective, immutable token configuration."""

    token_type: str = "JWT"
    expired: int = 2 * 3600
    refresh: int = 7 * 24 * 3600
    signing_method: str = "HS512"
    signing_secret: Any = None
    signer: Signer = sign_claims
    key_resolver: KeyResolver = pin_signing_key
    parse_claims: ClaimsParser = parse_access_claims
    parse_refresh: ClaimsParser = parse_refresh_claims
    token_extractor: TokenExtractor = get_bearer_token
    claims_hook: ClaimsHook | None = None
    update_hook: UpdateHook | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenPolicy":
        return cls(
            token_type=settings.token_type,
            expired=settings.jwt_access_token_expire_seconds,
            refresh=settings.jwt_refresh_token_expire_seconds,
            signing_method=settings.jwt_algorithm,
            signing_secret=settings.jwt_secret_key,
            token_extractor=extractor_for(settings.token_source),
        )


def build_policy(*overrides: PolicyOverride, settings: Settings | None = None) -> TokenPolicy:
    """Merge settings defaults with *overrides* and fill in a signing secret.

    When no secret is configured a random one is generated and logged.
    It only lives as long as this process, so outside development a
    secret must come from settings or an override.

    Raises:
        ValueError: no signing secret in a staging/production environment.
    """
    settings = settings or get_settings()
    policy = TokenPolicy.from_settings(settings)
    for override in overrides:
        policy = override(policy)
    if policy.signing_secret is None:
        if not settings.is_development:
            raise ValueError(
                "a signing secret must be configured in staging/production environments"
            )
        secret = secrets.token_urlsafe(32)
        logger.warning("New random signing secret: %s", secret)
        policy = replace(policy, signing_secret=secret)
    return policy


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------


def _override(**changes: Any) -> PolicyOverride:
    def apply(policy: TokenPolicy) -> TokenPolicy:
        return replace(policy, **changes)

    return apply


def set_token_type(token_type: str) -> PolicyOverride:
    return _override(token_type=token_type)


def set_signing_method(method: str) -> PolicyOverride:
    """Set the JWS algorithm, e.g. ``"HS256"`` or ``"RS256"``."""
    return _override(signing_method=method)


def set_signing_secret(secret: Any) -> PolicyOverride:
    """Set the signing key (shared secret, or private key for asymmetric methods)."""
    return _override(signing_secret=secret)


def set_expired(seconds: int) -> PolicyOverride:
    """Access token lifetime in seconds (default 2 hours)."""
    return _override(expired=seconds)


def set_refresh(seconds: int) -> PolicyOverride:
    """Refresh token lifetime in seconds (default 7 days)."""
    return _override(refresh=seconds)


def set_signer(signer: Signer) -> PolicyOverride:
    return _override(signer=signer)


def set_key_resolver(resolver: KeyResolver) -> PolicyOverride:
    """Resolve the verification key from the unverified header, e.g. by ``kid``."""
    return _override(key_resolver=resolver)


def set_token_extractor(extractor: TokenExtractor) -> PolicyOverride:
    return _override(token_extractor=extractor)


def set_parse_claims(parser: ClaimsParser) -> PolicyOverride:
    return _override(parse_claims=parser)


def set_parse_refresh(parser: ClaimsParser) -> PolicyOverride:
    return _override(parse_refresh=parser)


def set_claims_hook(hook: ClaimsHook) -> PolicyOverride:
    return _override(claims_hook=hook)


def set_update_hook(hook: UpdateHook) -> PolicyOverride:
    return _override(update_hook=hook)
