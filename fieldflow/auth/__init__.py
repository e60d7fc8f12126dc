"""Authentication and authorization.

- passwords: bcrypt hashing
- sessions: token -> user registry (memory or Redis)
- service: login / logout / current user / account management
- gate: role and ownership policy
"""

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.auth.service import AuthService, LoginResult
from fieldflow.auth.sessions import MemorySessionRegistry, RedisSessionRegistry, SessionRegistry

__all__ = [
    "Action",
    "AuthService",
    "AuthorizationGate",
    "LoginResult",
    "MemorySessionRegistry",
    "RedisSessionRegistry",
    "ResourceDescriptor",
    "ResourceKind",
    "SessionRegistry",
]
