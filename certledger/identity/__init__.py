"""
Caller identity and role gate.
"""

from .types import ClientIdentity, StaticIdentity
from .x509 import X509Identity, ATTRIBUTE_EXTENSION_OID
from .gate import (
    ROLE_ATTRIBUTE,
    ROLE_REGISTRAR,
    ROLE_CERTIFIER,
    ROLE_ADMIN,
    OPERATION_ROLES,
    RoleGate,
    check_role,
    resolve_client_id,
)

__all__ = [
    "ClientIdentity",
    "StaticIdentity",
    "X509Identity",
    "ATTRIBUTE_EXTENSION_OID",
    "ROLE_ATTRIBUTE",
    "ROLE_REGISTRAR",
    "ROLE_CERTIFIER",
    "ROLE_ADMIN",
    "OPERATION_ROLES",
    "RoleGate",
    "check_role",
    "resolve_client_id",
]
