"""
Shared machinery for the MFA grant exchange handlers.

Every exchange runs the same protocol:

1. Validate the required body parameters in a fixed order, stopping at the
   first failure with an ``invalid_request`` TokenError.
2. Call ``authenticate(mfa_token)`` to resolve the partially authenticated
   user.
3. Call ``issue(...)`` with the argument layout selected at construction.
4. Send the access token back as a non-cacheable JSON response.

Errors raised by the callbacks are never wrapped.
"""

import inspect
from enum import Enum, auto
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from starlette.responses import JSONResponse

from oauth2_mfa.config import get_settings
from oauth2_mfa.errors import ConfigurationError, TokenError
from oauth2_mfa.logger import get_logger
from oauth2_mfa.models import (
    AuthenticatedPrincipal,
    ExchangeRequest,
    IssuedToken,
    TokenResponse,
)

logger = get_logger()

TOKEN_RESPONSE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


class ParamKind(Enum):
    """Shape of a single body parameter."""

    ABSENT = auto()
    STRING = auto()
    OTHER = auto()


class IssueSignature(str, Enum):
    """Declared shape of an ``issue`` callback."""

    MINIMAL = "minimal"
    WITH_EXTRA = "with_extra"
    WITH_BODY_INFO = "with_body_info"
    FULL = "full"


def classify_param(body: Optional[Mapping[str, Any]], name: str) -> ParamKind:
    """Classify ``body[name]``; ``None`` and the empty string count as absent."""
    value = body.get(name) if body is not None else None
    if value is None or value == "":
        return ParamKind.ABSENT
    if isinstance(value, str):
        return ParamKind.STRING
    return ParamKind.OTHER


def require_string_params(
    body: Optional[Mapping[str, Any]], names: Sequence[str]
) -> Tuple[str, ...]:
    """
    Return the values of ``names`` from ``body``, checked in order.

    Raises:
        TokenError: ``invalid_request`` for the first parameter that is
            missing or is not a string.
    """
    values = []
    for name in names:
        kind = classify_param(body, name)
        if kind is ParamKind.ABSENT:
            raise TokenError(f"Missing required parameter: {name}", "invalid_request")
        if kind is ParamKind.OTHER:
            raise TokenError(f"{name} must be a string", "invalid_request")
        values.append(body[name])
    return tuple(values)


def infer_issue_signature(
    issue: Callable,
    layouts: Mapping[IssueSignature, Tuple[str, ...]],
    exchange: str,
) -> IssueSignature:
    """
    Pick the layout whose length matches the positional parameters of ``issue``.

    Callables taking ``*args`` get the longest supported layout.
    """
    try:
        parameters = list(inspect.signature(issue).parameters.values())
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"oauth2_mfa.{exchange} exchange cannot inspect the issue callback; "
            "pass signature= explicitly"
        )

    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters):
        return max(layouts, key=lambda signature: len(layouts[signature]))

    positional = [
        p
        for p in parameters
        if p.kind
        in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    for signature, layout in layouts.items():
        if len(layout) == len(positional):
            return signature

    arities = sorted({len(layout) for layout in layouts.values()})
    accepted = ", ".join(str(n) for n in arities)
    raise ConfigurationError(
        f"oauth2_mfa.{exchange} exchange issue callback must accept {accepted} "
        f"positional arguments, got {len(positional)}"
    )


def as_principal(result: Any) -> AuthenticatedPrincipal:
    """
    Normalize the value returned by ``authenticate``.

    Only a plain ``tuple`` is unpacked into ``(user, info)``; namedtuples and
    other tuple subclasses are users in their own right.
    """
    if isinstance(result, AuthenticatedPrincipal):
        return result
    if type(result) is tuple:
        if len(result) == 1:
            return AuthenticatedPrincipal(user=result[0])
        if len(result) == 2:
            return AuthenticatedPrincipal(user=result[0], info=result[1])
        raise TypeError(
            "authenticate must return a user or a (user, info) tuple, "
            f"got a tuple of {len(result)} items"
        )
    return AuthenticatedPrincipal(user=result)


def as_issued_token(result: Any) -> Optional[IssuedToken]:
    """
    Normalize the value returned by ``issue``.

    Accepts an access token, an IssuedToken, or one of the tuples
    ``(access_token, refresh_token)``, ``(access_token, params)`` and
    ``(access_token, refresh_token, params)`` as a plain ``tuple``. Returns
    None when no access token was issued.
    """
    if isinstance(result, IssuedToken):
        return result

    refresh_token = None
    params = None
    if type(result) is tuple:
        if not result:
            return None
        if len(result) > 3:
            raise TypeError(
                "issue must return at most (access_token, refresh_token, params)"
            )
        access_token, *rest = result
        if len(rest) == 1 and isinstance(rest[0], Mapping):
            params = rest[0]
        elif rest:
            refresh_token = rest[0]
            params = rest[1] if len(rest) == 2 else None
    else:
        access_token = result

    if not access_token:
        return None
    return IssuedToken(
        access_token=access_token,
        refresh_token=refresh_token or None,
        params=dict(params) if params else None,
    )


def token_response(issued: IssuedToken, token_type: str = "Bearer") -> JSONResponse:
    """Serialize an issued token into the OAuth2 token response."""
    payload = TokenResponse.from_issued(issued, token_type).to_dict()
    return JSONResponse(payload, headers=TOKEN_RESPONSE_HEADERS)


async def _call(callback: Callable, *args: Any) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class ExchangeHandler:
    """
    Base class for grant exchange handlers.

    Subclasses declare the grant name, the required and optional body
    parameters and the argument layouts their ``issue`` callback accepts.
    Layout entries name either a body parameter or one of ``client``,
    ``user``, ``body`` and ``info``.
    """

    name: str = ""
    # Label used in configuration error messages
    label: str = ""
    required_params: Tuple[str, ...] = ()
    optional_params: Tuple[str, ...] = ()
    issue_layouts: Dict[IssueSignature, Tuple[str, ...]] = {}
    invalid_grant_message: str = "Invalid grant"

    def __init__(
        self,
        authenticate: Optional[Callable] = None,
        issue: Optional[Callable] = None,
        *,
        signature: Optional[Union[IssueSignature, str]] = None,
        token_type: Optional[str] = None,
    ):
        if not callable(authenticate):
            raise ConfigurationError(
                f"oauth2_mfa.{self.label} exchange requires an authenticate callback"
            )
        if not callable(issue):
            raise ConfigurationError(
                f"oauth2_mfa.{self.label} exchange requires an issue callback"
            )

        self._authenticate = authenticate
        self._issue = issue
        self.signature = self._resolve_signature(issue, signature)
        self.token_type = token_type or get_settings().token_type

    def _resolve_signature(
        self, issue: Callable, signature: Optional[Union[IssueSignature, str]]
    ) -> IssueSignature:
        if signature is None:
            return infer_issue_signature(issue, self.issue_layouts, self.label)

        try:
            signature = IssueSignature(signature)
        except ValueError:
            raise ConfigurationError(
                f"oauth2_mfa.{self.label} exchange got unknown issue signature {signature!r}"
            )
        if signature not in self.issue_layouts:
            raise ConfigurationError(
                f"oauth2_mfa.{self.label} exchange does not support "
                f"the {signature.value} issue signature"
            )
        return signature

    async def __call__(self, client: Any, body: Mapping[str, Any]) -> JSONResponse:
        return await self.handle(ExchangeRequest(client=client, body=body))

    async def handle(self, request: ExchangeRequest) -> JSONResponse:
        """
        Exchange the grant in ``request`` for an access token response.

        Raises:
            TokenError: if the body is malformed, the MFA token matches no
                user, or no access token was issued.
            Exception: anything raised by ``authenticate`` or ``issue``,
                unchanged.
        """
        body = request.body if request.body is not None else {}
        try:
            values = require_string_params(body, self.required_params)
        except TokenError as e:
            logger.warning(f"Rejected {self.name} exchange: {e.message}")
            raise

        arguments: Dict[str, Any] = dict(zip(self.required_params, values))
        for name in self.optional_params:
            arguments[name] = body.get(name)

        logger.debug(f"Authenticating MFA token for {self.name} exchange")
        principal = as_principal(await _call(self._authenticate, arguments["mfa_token"]))
        if principal.user is None or principal.user is False:
            logger.warning(f"MFA token did not resolve to a user in {self.name} exchange")
            raise TokenError("Invalid MFA token", "invalid_grant")

        arguments.update(
            client=request.client, user=principal.user, body=body, info=principal.info
        )
        layout = self.issue_layouts[self.signature]
        issued = as_issued_token(await _call(self._issue, *(arguments[n] for n in layout)))
        if issued is None:
            logger.warning(f"No access token issued in {self.name} exchange")
            raise TokenError(self.invalid_grant_message, "invalid_grant")

        logger.info(f"Issued access token via {self.name} exchange")
        return token_response(issued, self.token_type)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, signature={self.signature.value!r})"
