"""
Starlette token endpoint that dispatches requests to registered exchanges.

The server resolves the ``grant_type`` of each POSTed token request to an
exchange handler, reads the authenticated client from the request scope
and renders TokenErrors as OAuth2 error responses. Any other exception is
left to starlette's error handling.
"""

from typing import Any, Dict, Mapping, Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from oauth2_mfa.config import get_settings
from oauth2_mfa.errors import TokenError
from oauth2_mfa.exchange.base import TOKEN_RESPONSE_HEADERS, ExchangeHandler
from oauth2_mfa.logger import get_logger

logger = get_logger()


class TokenExchangeServer:
    """Registry of exchange handlers keyed by grant type."""

    def __init__(self, user_property: Optional[str] = None):
        self.user_property = user_property or get_settings().user_property
        self._exchanges: Dict[str, ExchangeHandler] = {}

    def exchange(
        self, handler: ExchangeHandler, grant_type: Optional[str] = None
    ) -> "TokenExchangeServer":
        """
        Register ``handler`` under ``grant_type``, defaulting to its name.

        Registering the same grant type twice replaces the earlier handler.
        """
        grant_type = grant_type or handler.name
        if not grant_type:
            raise ValueError("Exchange handlers must be registered with a grant type")
        if grant_type in self._exchanges:
            logger.warning(f"Replacing exchange handler for grant type {grant_type}")
        self._exchanges[grant_type] = handler
        logger.debug(f"Registered {type(handler).__name__} for grant type {grant_type}")
        return self

    def get_exchange(self, grant_type: str) -> Optional[ExchangeHandler]:
        return self._exchanges.get(grant_type)

    @property
    def grant_types(self) -> list[str]:
        return list(self._exchanges)

    async def _read_body(self, request: Request) -> Mapping[str, Any]:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                body = await request.json()
            except ValueError:
                raise TokenError("Request body is not valid JSON", "invalid_request")
            if not isinstance(body, dict):
                raise TokenError("Request body must be a JSON object", "invalid_request")
            return body
        form = await request.form()
        return dict(form)

    async def dispatch(self, request: Request) -> Response:
        """Run the exchange matching the request's ``grant_type``."""
        body = await self._read_body(request)

        grant_type = body.get("grant_type")
        if not grant_type:
            raise TokenError("Missing required parameter: grant_type", "invalid_request")

        handler = self._exchanges.get(grant_type) if isinstance(grant_type, str) else None
        if handler is None:
            raise TokenError(
                f"Unsupported grant type: {grant_type}", "unsupported_grant_type"
            )

        client = request.scope.get(self.user_property)
        return await handler(client, body)

    async def token(self, request: Request) -> Response:
        """Token endpoint: dispatch the request and render TokenErrors."""
        try:
            return await self.dispatch(request)
        except TokenError as e:
            return error_response(e)


def error_response(error: TokenError) -> JSONResponse:
    """Render a TokenError as an OAuth2 error response."""
    headers = dict(TOKEN_RESPONSE_HEADERS)
    if error.status == 401:
        headers["WWW-Authenticate"] = 'Basic realm="Clients"'
    return JSONResponse(error.to_dict(), status_code=error.status, headers=headers)


def build_app(
    server: TokenExchangeServer, path: Optional[str] = None, **kwargs: Any
) -> Starlette:
    """
    Create a Starlette app exposing ``server.token`` at ``path``.

    Extra keyword arguments (middleware, debug, ...) are passed to Starlette.
    """
    path = path or get_settings().token_path
    return Starlette(
        routes=[Route(path, server.token, methods=["POST"])],
        **kwargs,
    )
