"""Recovery-code MFA grant: exchanges an MFA token and a one-time recovery code."""

from typing import Callable, Optional, Union

from .base import ExchangeHandler, IssueSignature


class RecoveryCodeExchangeHandler(ExchangeHandler):
    """Exchanges an MFA token and a recovery code for an access token."""

    name = "recovery_code"
    label = "recoveryCode"
    required_params = ("mfa_token", "recovery_code")
    # The recovery-code grant carries no scope, so there is no FULL layout
    issue_layouts = {
        IssueSignature.MINIMAL: ("client", "user", "recovery_code"),
        IssueSignature.WITH_EXTRA: ("client", "user", "recovery_code", "mfa_token"),
        IssueSignature.WITH_BODY_INFO: (
            "client",
            "user",
            "recovery_code",
            "mfa_token",
            "body",
            "info",
        ),
    }
    invalid_grant_message = "Invalid recovery code"


def recovery_code(
    authenticate: Optional[Callable] = None,
    issue: Optional[Callable] = None,
    *,
    signature: Optional[Union[IssueSignature, str]] = None,
) -> RecoveryCodeExchangeHandler:
    """Build the ``recovery_code`` exchange handler."""
    return RecoveryCodeExchangeHandler(authenticate, issue, signature=signature)
