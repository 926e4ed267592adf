"""Payment Link API Routes

Owner-scoped management of payment links. The owner is identified by the
X-Owner-Id header set by the upstream authentication layer.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import to_client_error
from src.api.schemas.payment_link_request import (
    CreatePaymentLinkRequestSchema,
    UpdatePaymentLinkRequestSchema,
)
from src.app.use_cases.payment_links import (
    CreatePaymentLink,
    CreatePaymentLinkCommandDTO,
    GetPaymentLink,
    ListPaymentLinks,
    ListPaymentLinksResponseDTO,
    PaymentLinkResponseDTO,
    UpdatePaymentLink,
    UpdatePaymentLinkCommandDTO,
)
from src.adapter.repositories.payment_link_repository import SqlAlchemyPaymentLinkRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.payment_link import LinkStatus
from src.depends import get_owner_id, get_session

router = APIRouter(prefix="/payment-links", tags=["Payment Links"])

_NOT_FOUND = {
    "description": "Payment link not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "LINK_NOT_FOUND",
                    "message": "Payment link 9f1c2a7be04d4c11 not found"
                }
            }
        }
    }
}


@router.post(
    "",
    response_model=PaymentLinkResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invalid payment link",
                            "reason": "amount, max_uses",
                            "details": [
                                {"field": "amount", "message": "Amount must be a positive number"},
                                {"field": "max_uses", "message": "Max uses must be a positive integer"}
                            ]
                        }
                    }
                }
            }
        }
    }
)
async def create_payment_link(
    request: CreatePaymentLinkRequestSchema,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Create a payment link.

    **Request body:**
    - `amount` (required): Amount per redemption (> 0)
    - `currency` (optional): 3-letter code, default USD
    - `description` (optional): Up to 500 characters
    - `expires_at` (optional): Future timestamp
    - `max_uses` (optional): Redemption cap (>= 1), omit for unlimited

    **Returns:**
    - 201: Link created, including its `payment_url`
    - 400: One or more fields are invalid (all listed in `details`)
    """
    uow = SqlAlchemyUnitOfWork(session)
    link_repo = SqlAlchemyPaymentLinkRepository(session)

    command = CreatePaymentLinkCommandDTO(
        owner_id=owner_id,
        amount=request.amount,
        currency=request.currency,
        description=request.description,
        expires_at=request.expires_at,
        max_uses=request.max_uses,
    )

    use_case = CreatePaymentLink(
        uow,
        link_repo,
        base_url=ApplicationConfig.PAYMENT_LINK_BASE_URL,
        token_length=ApplicationConfig.LINK_TOKEN_LENGTH,
        default_expiry_hours=ApplicationConfig.DEFAULT_LINK_EXPIRY_HOURS,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.get(
    "",
    response_model=ListPaymentLinksResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_payment_links(
    status_filter: Optional[LinkStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
):
    """
    List the caller's payment links, newest first.

    **Query parameters:**
    - `status` (optional): active, inactive, expired or exhausted
    - `limit` (optional): Page size, 1-100 (default 10)
    - `offset` (optional): Rows to skip (default 0)
    """
    link_repo = SqlAlchemyPaymentLinkRepository(session)
    use_case = ListPaymentLinks(link_repo, base_url=ApplicationConfig.PAYMENT_LINK_BASE_URL)
    result = await use_case.execute(owner_id, status=status_filter, limit=limit, offset=offset)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.get(
    "/{link_token}",
    response_model=PaymentLinkResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: _NOT_FOUND}
)
async def get_payment_link(
    link_token: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
):
    """Get one of the caller's payment links with its transaction aggregates."""
    link_repo = SqlAlchemyPaymentLinkRepository(session)
    use_case = GetPaymentLink(link_repo, base_url=ApplicationConfig.PAYMENT_LINK_BASE_URL)
    result = await use_case.execute(owner_id, link_token)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.patch(
    "/{link_token}",
    response_model=PaymentLinkResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: _NOT_FOUND,
        400: {
            "description": "No fields to update or invalid description",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NO_FIELDS_TO_UPDATE",
                            "message": "No fields to update"
                        }
                    }
                }
            }
        }
    }
)
async def update_payment_link(
    link_token: str,
    request: UpdatePaymentLinkRequestSchema,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Update a payment link's description and/or activation flag.

    Amount, currency and usage counters cannot be changed.
    """
    uow = SqlAlchemyUnitOfWork(session)
    link_repo = SqlAlchemyPaymentLinkRepository(session)

    command = UpdatePaymentLinkCommandDTO(**request.model_dump(exclude_unset=True))

    use_case = UpdatePaymentLink(uow, link_repo, base_url=ApplicationConfig.PAYMENT_LINK_BASE_URL)
    result = await use_case.execute(owner_id, link_token, command)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value
