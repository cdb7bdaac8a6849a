"""JWS signing and parsing strategies built on python-jose.

The default key resolver pins the configured algorithm: whatever ``alg``
a token header claims, verification only ever accepts the policy's
signing method, so ``alg: none`` and algorithm-confusion tokens are
rejected before their signature is trusted.
"""

import time
from typing import TYPE_CHECKING, Any

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError
from pydantic import ValidationError

from tokengate.auth.claims import UserClaims

if TYPE_CHECKING:
    from tokengate.auth.policy import TokenPolicy

_STRICT_OPTIONS = {
    "require_jti": True,
    "require_iat": True,
    "require_nbf": True,
    "require_exp": True,
    "leeway": 0,
}

# Refresh tokens carry the timestamps of the original access token.
_LENIENT_OPTIONS = {
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
}


def sign_claims(claims: UserClaims, method: str, secret: Any, token_type: str = "JWT") -> str:
    """Sign *claims* into a compact JWS string."""
    return jwt.encode(
        claims.to_payload(),
        secret,
        algorithm=method,
        headers={"typ": token_type},
    )


def pin_signing_key(header: dict[str, Any], method: str, secret: Any) -> tuple[str, Any]:
    """Default key resolver: ignore the header's ``alg`` and use the configured one."""
    return method, secret


def _decode(policy: "TokenPolicy", token: str, options: dict[str, Any]) -> UserClaims:
    header = jwt.get_unverified_header(token)
    algorithm, key = policy.key_resolver(header, policy.signing_method, policy.signing_secret)
    payload = jwt.decode(token, key, algorithms=[algorithm], options=options)
    try:
        return UserClaims.from_payload(payload)
    except ValidationError as exc:
        raise JWTClaimsError("Invalid claim format in token") from exc


async def parse_access_claims(policy: "TokenPolicy", token: str) -> UserClaims:
    """Full validation: signature, ``exp``, ``nbf`` and ``iat``.

    Raises:
        ExpiredSignatureError: once ``now >= exp``.
        JWTError: for any other structural, signature or claim failure.
    """
    claims = _decode(policy, token, _STRICT_OPTIONS)
    # jose only rejects exp < now; a token is already expired at exp.
    if claims.expires_at <= int(time.time()):
        raise ExpiredSignatureError("Signature has expired.")
    return claims


async def parse_refresh_claims(policy: "TokenPolicy", token: str) -> UserClaims:
    """Signature-only validation for tokens presented to refresh."""
    return _decode(policy, token, _LENIENT_OPTIONS)
