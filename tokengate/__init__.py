"""Signed bearer session tokens with reverse (logout-only) revocation."""
from tokengate.auth import (
    Authenticator,
    MemoryRevocationStore,
    RedisRevocationStore,
    RevocationStore,
    TokenInfo,
    TokenPolicy,
    UserClaims,
    UserInfo,
    build_policy,
    create_authenticator,
)
from tokengate.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidTokenError,
    NoTokenError,
)

__all__ = [
    "Authenticator",
    "create_authenticator",
    "TokenPolicy",
    "build_policy",
    "TokenInfo",
    "UserClaims",
    "UserInfo",
    "RevocationStore",
    "RedisRevocationStore",
    "MemoryRevocationStore",
    "AuthError",
    "NoTokenError",
    "InvalidTokenError",
    "ExpiredTokenError",
]
