from .base import (
    ExchangeHandler,
    IssueSignature,
    ParamKind,
    classify_param,
    require_string_params,
    token_response,
)
from .oob import OOBExchangeHandler, oob
from .recovery_code import RecoveryCodeExchangeHandler, recovery_code

__all__ = [
    "ExchangeHandler",
    "IssueSignature",
    "ParamKind",
    "classify_param",
    "require_string_params",
    "token_response",
    "OOBExchangeHandler",
    "oob",
    "RecoveryCodeExchangeHandler",
    "recovery_code",
]
