"""
Tests for the recovery-code MFA exchange.
"""

import pytest
from unittest.mock import Mock

from oauth2_mfa.errors import ConfigurationError, TokenError
from oauth2_mfa.exchange import IssueSignature, recovery_code
from oauth2_mfa.models import AuthenticatedPrincipal, IssuedToken

EXPECTED_BODY = b'{"access_token":"s3cr1t","token_type":"Bearer"}'


def ignore_authenticate(token):
    return {"id": "0"}


def ignore_issue(client, user, code):
    return ".ignore"


class TestRecoveryCodeConstruction:
    """Test building the recovery_code exchange."""

    def test_named_recovery_code(self):
        assert recovery_code(ignore_authenticate, ignore_issue).name == "recovery_code"

    def test_requires_authenticate_callback(self):
        with pytest.raises(
            ConfigurationError,
            match="oauth2_mfa.recoveryCode exchange requires an authenticate callback",
        ):
            recovery_code()

    def test_requires_issue_callback(self):
        with pytest.raises(
            ConfigurationError,
            match="oauth2_mfa.recoveryCode exchange requires an issue callback",
        ):
            recovery_code(ignore_authenticate)

    @pytest.mark.parametrize(
        "issue,expected",
        [
            (lambda c, u, code: None, IssueSignature.MINIMAL),
            (lambda c, u, code, token: None, IssueSignature.WITH_EXTRA),
            (lambda c, u, code, token, body, info: None, IssueSignature.WITH_BODY_INFO),
            (lambda *args: None, IssueSignature.WITH_BODY_INFO),
        ],
    )
    def test_infers_issue_signature(self, issue, expected):
        assert recovery_code(ignore_authenticate, issue).signature is expected

    def test_full_signature_not_supported(self):
        """The recovery-code grant has no scope slot."""
        with pytest.raises(ConfigurationError, match="does not support the full"):
            recovery_code(ignore_authenticate, ignore_issue, signature=IssueSignature.FULL)

    def test_five_argument_issue_rejected(self):
        with pytest.raises(ConfigurationError, match="got 5"):
            recovery_code(ignore_authenticate, lambda c, u, code, token, body: None)


class TestRecoveryCodeIssuing:
    """Test authenticating and issuing an access token."""

    @pytest.mark.asyncio
    async def test_issues_access_token(self, client, johndoe):
        """A three-argument issue callback gets client, user and recovery code."""

        def authenticate(token):
            if token != "ey...":
                raise ValueError("incorrect token argument")
            return johndoe

        def issue(client, user, code):
            if client["id"] != "c123":
                raise ValueError("incorrect client argument")
            if user["username"] != "johndoe":
                raise ValueError("incorrect user argument")
            if code != "123456":
                raise ValueError("incorrect recoveryCode argument")
            return "s3cr1t"

        response = await recovery_code(authenticate, issue)(
            client, {"mfa_token": "ey...", "recovery_code": "123456"}
        )

        assert response.headers["content-type"] == "application/json"
        assert response.headers["cache-control"] == "no-store"
        assert response.headers["pragma"] == "no-cache"
        assert response.body == EXPECTED_BODY

    @pytest.mark.asyncio
    async def test_issues_access_token_with_token(self, client, johndoe):
        issue = Mock(return_value="s3cr1t")

        def issue_with_token(client, user, code, token):
            return issue(client, user, code, token)

        response = await recovery_code(lambda t: johndoe, issue_with_token)(
            client, {"mfa_token": "ey...", "recovery_code": "123456"}
        )

        issue.assert_called_once_with(client, johndoe, "123456", "ey...")
        assert response.body == EXPECTED_BODY

    @pytest.mark.asyncio
    async def test_issues_access_token_with_token_body_and_info(self, client, johndoe):
        """authenticate's info and the raw body reach a six-argument issue."""
        received = {}

        async def authenticate(token):
            return johndoe, {"provider": "XXX"}

        async def issue(client, user, code, token, body, info):
            received.update(code=code, token=token, body=body, info=info)
            return "s3cr1t"

        response = await recovery_code(authenticate, issue)(
            client, {"mfa_token": "ey...", "recovery_code": "123456"}
        )

        assert received["code"] == "123456"
        assert received["token"] == "ey..."
        assert received["body"]["mfa_token"] == "ey..."
        assert received["body"]["recovery_code"] == "123456"
        assert received["info"]["provider"] == "XXX"
        assert response.body == EXPECTED_BODY

    @pytest.mark.asyncio
    async def test_principal_and_issued_token_models(self, client, johndoe, decode):
        """Callbacks may return the model types directly."""

        def authenticate(token):
            return AuthenticatedPrincipal(user=johndoe, info={"provider": "XXX"})

        def issue(client, user, code):
            return IssuedToken(access_token="s3cr1t", params={"token_type": "mac"})

        response = await recovery_code(authenticate, issue)(
            client, {"mfa_token": "ey...", "recovery_code": "123456"}
        )

        assert decode(response) == {"access_token": "s3cr1t", "token_type": "mac"}

    @pytest.mark.asyncio
    async def test_used_recovery_code_is_invalid_grant(self, client, johndoe):
        handler = recovery_code(lambda t: johndoe, lambda c, u, code: "")

        with pytest.raises(TokenError) as exc_info:
            await handler(client, {"mfa_token": "ey...", "recovery_code": "123456"})

        assert exc_info.value.message == "Invalid recovery code"
        assert exc_info.value.code == "invalid_grant"


class TestRecoveryCodeErrors:
    """Test request validation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body,message",
        [
            ({"recovery_code": "123456"}, "Missing required parameter: mfa_token"),
            ({"mfa_token": 1}, "mfa_token must be a string"),
            ({"mfa_token": "ey..."}, "Missing required parameter: recovery_code"),
            ({"recovery_code": 1, "mfa_token": "foo"}, "recovery_code must be a string"),
        ],
    )
    async def test_invalid_request(self, client, body, message):
        issue = Mock(return_value=".ignore")
        handler = recovery_code(ignore_authenticate, issue, signature="minimal")

        with pytest.raises(TokenError) as exc_info:
            await handler(client, body)

        err = exc_info.value
        assert err.message == message
        assert err.code == "invalid_request"
        assert err.status == 400
        issue.assert_not_called()

    @pytest.mark.asyncio
    async def test_validation_is_repeatable(self, client):
        """Validating the same body twice gives the same error and leaves it intact."""
        body = {"mfa_token": 1, "recovery_code": "123456"}
        handler = recovery_code(ignore_authenticate, ignore_issue)

        messages = []
        for _ in range(2):
            with pytest.raises(TokenError) as exc_info:
                await handler(client, body)
            messages.append(exc_info.value.message)

        assert messages == ["mfa_token must be a string"] * 2
        assert body == {"mfa_token": 1, "recovery_code": "123456"}

    @pytest.mark.asyncio
    async def test_issue_error_propagates(self, client, johndoe):
        failure = LookupError("recovery code store unavailable")

        def issue(client, user, code):
            raise failure

        with pytest.raises(LookupError) as exc_info:
            await recovery_code(lambda t: johndoe, issue)(
                client, {"mfa_token": "ey...", "recovery_code": "123456"}
            )

        assert exc_info.value is failure
