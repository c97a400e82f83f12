from dataclasses import dataclass
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ClientT = TypeVar("ClientT")
UserT = TypeVar("UserT")


@dataclass(frozen=True)
class ExchangeRequest(Generic[ClientT]):
    """A token request as seen by an exchange handler."""

    client: ClientT
    body: Mapping[str, Any]


@dataclass(frozen=True)
class AuthenticatedPrincipal(Generic[UserT]):
    """Result of a successful ``authenticate`` callback."""

    user: UserT
    info: Optional[Any] = None


class IssuedToken(BaseModel):
    """Model for the credentials minted by an ``issue`` callback."""

    access_token: str = Field(..., description="The access token")
    refresh_token: Optional[str] = Field(None, description="The refresh token")
    params: Optional[Dict[str, Any]] = Field(
        None, description="Additional fields merged into the token response"
    )


class TokenResponse(BaseModel):
    """Model for the OAuth token response sent to the client."""

    access_token: str = Field(..., description="Access token")
    token_type: str = Field("Bearer", description="Token type")
    refresh_token: Optional[str] = Field(None, description="Refresh token")

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_issued(
        cls, issued: IssuedToken, token_type: str = "Bearer"
    ) -> "TokenResponse":
        """Build the response envelope, letting ``params`` override the token type."""
        params = dict(issued.params or {})
        token_type = params.pop("token_type", token_type)
        params.pop("access_token", None)
        params.pop("refresh_token", None)
        return cls(
            access_token=issued.access_token,
            token_type=token_type,
            refresh_token=issued.refresh_token,
            **params,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
