"""Bank link endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from budgetsync.api.deps import get_current_user_id, get_db, get_provider
from budgetsync.providers.base import TransactionProvider
from budgetsync.schemas.common import OkResponse
from budgetsync.schemas.link import LinkTokenResponse, PublicTokenExchangeRequest
from budgetsync.services.link import LinkService

router = APIRouter(tags=["link"])


@router.post(
    "/create-link-token",
    response_model=LinkTokenResponse,
    summary="Create a link token",
    description="Obtain a short-lived token that opens the provider's bank link widget.",
)
async def create_link_token(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    provider: TransactionProvider = Depends(get_provider),
) -> LinkTokenResponse:
    link_token = await LinkService(db, provider).create_link_token(user_id)
    return LinkTokenResponse(link_token=link_token)


@router.post(
    "/exchange-public-token",
    response_model=OkResponse,
    summary="Store the bank access credential",
    description="""
    Exchange the public token returned by the link widget for a long-lived
    access token and store it for the caller.

    Re-linking the same item keeps the sync cursor; linking a different
    item restarts sync from the beginning.
    """,
)
async def exchange_public_token(
    body: PublicTokenExchangeRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    provider: TransactionProvider = Depends(get_provider),
) -> OkResponse:
    await LinkService(db, provider).exchange_public_token(user_id, body.public_token)
    return OkResponse()
