"""
Out-of-band (OOB) MFA grant.

The client presents the ``mfa_token`` received when the first factor
succeeded together with the ``oob_code`` delivered out of band (push
notification, SMS, email). An optional ``scope`` is handed to ``issue``
untouched.

Example:
    ```python
    async def authenticate(mfa_token):
        session = await sessions.find(mfa_token)
        return session.user, {"provider": session.provider}

    async def issue(client, user, oob_code, mfa_token, scope):
        if not await challenges.verify(user, oob_code):
            return None
        return await tokens.create(client, user, scope)

    server.exchange(oob(authenticate, issue))
    ```
"""

from typing import Callable, Optional, Union

from .base import ExchangeHandler, IssueSignature


class OOBExchangeHandler(ExchangeHandler):
    """Exchanges an MFA token and an OOB code for an access token."""

    name = "oob"
    label = "oob"
    required_params = ("mfa_token", "oob_code")
    optional_params = ("scope",)
    issue_layouts = {
        IssueSignature.MINIMAL: ("client", "user", "oob_code", "mfa_token"),
        IssueSignature.WITH_EXTRA: ("client", "user", "oob_code", "mfa_token", "scope"),
        IssueSignature.WITH_BODY_INFO: (
            "client",
            "user",
            "oob_code",
            "mfa_token",
            "body",
            "info",
        ),
        IssueSignature.FULL: (
            "client",
            "user",
            "oob_code",
            "mfa_token",
            "scope",
            "body",
            "info",
        ),
    }
    invalid_grant_message = "Invalid OOB code"


def oob(
    authenticate: Optional[Callable] = None,
    issue: Optional[Callable] = None,
    *,
    signature: Optional[Union[IssueSignature, str]] = None,
) -> OOBExchangeHandler:
    """
    Build the ``oob`` exchange handler.

    Args:
        authenticate: ``authenticate(mfa_token)`` returning a user, a
            ``(user, info)`` tuple or None.
        issue: callback minting the access token; see
            ``OOBExchangeHandler.issue_layouts`` for the accepted arguments.
        signature: which layout ``issue`` takes. Inferred from its
            positional parameters when omitted.

    Raises:
        ConfigurationError: if a callback is missing or ``issue`` takes an
            unsupported set of arguments.
    """
    return OOBExchangeHandler(authenticate, issue, signature=signature)
