"""
Utility modules for the Roll-up Gate Quoting System.

Provides shared functionality across all services:
- Security utilities for the bearer-token auth gate
- Logging utilities for structured logging
"""

from rollup_quotes.utils.security import (
    AuthGate,
    JWTAuthGate,
    create_access_token,
    decode_token,
    jwt_auth_gate,
)
from rollup_quotes.utils.logging import (
    setup_logging,
    get_logger,
    RequestLogger,
    AuditLogger,
    ServiceLogger,
    request_logger,
    audit_logger,
)

__all__ = [
    # Security
    "AuthGate",
    "JWTAuthGate",
    "create_access_token",
    "decode_token",
    "jwt_auth_gate",
    # Logging
    "setup_logging",
    "get_logger",
    "RequestLogger",
    "AuditLogger",
    "ServiceLogger",
    "request_logger",
    "audit_logger",
]
