"""Token lifecycle: claims, policy, strategies, revocation store."""
from tokengate.auth.authenticator import Authenticator, RefreshCheck, create_authenticator
from tokengate.auth.claims import UserClaims, UserInfo
from tokengate.auth.policy import TokenPolicy, build_policy
from tokengate.auth.revocation import (
    MemoryRevocationStore,
    RedisRevocationStore,
    RevocationStore,
    revocation_key,
)
from tokengate.auth.token_info import TokenInfo

__all__ = [
    "Authenticator",
    "RefreshCheck",
    "create_authenticator",
    "UserClaims",
    "UserInfo",
    "TokenPolicy",
    "build_policy",
    "RevocationStore",
    "RedisRevocationStore",
    "MemoryRevocationStore",
    "revocation_key",
    "TokenInfo",
]
