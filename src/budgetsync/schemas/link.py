"""Bank link request/response schemas."""

from pydantic import Field

from budgetsync.schemas.common import ApiModel


class LinkTokenResponse(ApiModel):
    link_token: str


class PublicTokenExchangeRequest(ApiModel):
    public_token: str = Field(min_length=1, description="Public token returned by the link widget")
