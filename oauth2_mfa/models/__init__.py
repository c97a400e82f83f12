from .models import (
    ExchangeRequest,
    AuthenticatedPrincipal,
    IssuedToken,
    TokenResponse,
)

__all__ = [
    "ExchangeRequest",
    "AuthenticatedPrincipal",
    "IssuedToken",
    "TokenResponse",
]
