from .token_server import TokenExchangeServer, build_app, error_response

__all__ = ["TokenExchangeServer", "build_app", "error_response"]
