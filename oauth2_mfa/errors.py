"""
Error types raised by the MFA exchange handlers.

TokenError follows RFC 6749 section 5.2: a machine-readable ``code``, a
human-readable ``message``, an optional ``uri`` and the HTTP ``status``
the host should respond with.
"""

from typing import Any, Dict, Optional

# HTTP status used when a TokenError is created without an explicit one
TOKEN_ERROR_STATUS: Dict[str, int] = {
    "invalid_request": 400,
    "invalid_client": 401,
    "invalid_grant": 403,
    "unauthorized_client": 403,
    "unsupported_grant_type": 501,
    "invalid_scope": 400,
}


class TokenError(Exception):
    """Error raised while exchanging a grant for an access token."""

    def __init__(
        self,
        message: str,
        code: str = "invalid_request",
        uri: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.uri = uri
        self.status = status or TOKEN_ERROR_STATUS.get(code, 500)

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as an OAuth2 error response body."""
        body = {"error": self.code, "error_description": self.message}
        if self.uri:
            body["error_uri"] = self.uri
        return body

    def __repr__(self) -> str:
        return f"TokenError(code={self.code!r}, status={self.status}, message={self.message!r})"


class ConfigurationError(TypeError):
    """A handler was built with missing or unusable callbacks."""
