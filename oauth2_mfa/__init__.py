"""
MFA grant exchanges for OAuth2 authorization servers.

Usage:
    from oauth2_mfa import oob, recovery_code, TokenExchangeServer, build_app

    server = TokenExchangeServer()
    server.exchange(oob(authenticate, issue_oob))
    server.exchange(recovery_code(authenticate, issue_recovery))
    app = build_app(server)
"""

from .errors import ConfigurationError, TokenError
from .exchange import (
    IssueSignature,
    OOBExchangeHandler,
    RecoveryCodeExchangeHandler,
    oob,
    recovery_code,
)
from .models import AuthenticatedPrincipal, ExchangeRequest, IssuedToken, TokenResponse
from .server import TokenExchangeServer, build_app

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "TokenError",
    "IssueSignature",
    "OOBExchangeHandler",
    "RecoveryCodeExchangeHandler",
    "oob",
    "recovery_code",
    "AuthenticatedPrincipal",
    "ExchangeRequest",
    "IssuedToken",
    "TokenResponse",
    "TokenExchangeServer",
    "build_app",
]
