"""Public Payment API Routes

Unauthenticated, payer-facing endpoints: view a link and redeem it.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import to_client_error
from src.api.schemas.redemption_request import RedeemRequestSchema
from src.app.services.authorization_gateway import AuthorizationGateway
from src.app.use_cases.payment_links import GetPublicPaymentLink, PublicPaymentLinkDTO
from src.app.use_cases.redemption import RedeemCommandDTO, RedeemPaymentLink, RedemptionResponseDTO
from src.adapter.repositories.payment_link_repository import SqlAlchemyPaymentLinkRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_authorization_gateway, get_session

router = APIRouter(prefix="/pay", tags=["Public Payments"])


def _ineligible_example(code: str, message: str) -> dict:
    return {
        "description": message,
        "content": {"application/json": {"example": {"error": {"code": code, "message": message}}}}
    }


@router.get(
    "/{link_token}",
    response_model=PublicPaymentLinkDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: _ineligible_example("LINK_NOT_FOUND", "Payment link not found"),
        409: _ineligible_example("LINK_INACTIVE", "This payment link is inactive"),
        410: _ineligible_example("LINK_EXPIRED", "This payment link has expired"),
    }
)
async def get_public_payment_link(
    link_token: str,
    session: AsyncSession = Depends(get_session)
):
    """Show what a payer is about to pay for."""
    link_repo = SqlAlchemyPaymentLinkRepository(session)
    result = await GetPublicPaymentLink(link_repo).execute(link_token)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.post(
    "/{link_token}/redeem",
    response_model=RedemptionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Validation error (nothing recorded)",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Invalid payment details",
                            "reason": "card_number, cvv",
                            "details": [
                                {"field": "card_number", "message": "Card number must be 13-19 digits"},
                                {"field": "cvv", "message": "CVV must be 3 or 4 digits"}
                            ]
                        }
                    }
                }
            }
        },
        404: _ineligible_example("LINK_NOT_FOUND", "Payment link not found"),
        409: _ineligible_example("LINK_EXHAUSTED", "This payment link has reached its maximum usage limit"),
        410: _ineligible_example("LINK_EXPIRED", "This payment link has expired"),
    }
)
async def redeem_payment_link(
    link_token: str,
    request: RedeemRequestSchema,
    session: AsyncSession = Depends(get_session),
    gateway: AuthorizationGateway = Depends(get_authorization_gateway)
):
    """
    Pay through a payment link.

    Once the attempt has been recorded the response is always 200 with the
    finalized transaction; check `transaction.status` (`completed` or
    `failed`) and `gateway_response.failure_reason`.

    **Request body:**
    - `payer_email`, `payer_name` (required)
    - `card_number`, `expiry_month`, `expiry_year`, `cvv` (required)

    **Returns:**
    - 200: Attempt finalized (completed or failed)
    - 400: Invalid payer or card fields (nothing recorded)
    - 404 / 409 / 410: Link unknown, inactive or exhausted, or expired
    """
    uow = SqlAlchemyUnitOfWork(session)
    link_repo = SqlAlchemyPaymentLinkRepository(session)
    transaction_repo = SqlAlchemyTransactionRepository(session)

    command = RedeemCommandDTO(
        link_token=link_token,
        payer_email=request.payer_email,
        payer_name=request.payer_name,
        card_number=request.card_number,
        expiry_month=request.expiry_month,
        expiry_year=request.expiry_year,
        cvv=request.cvv,
    )

    use_case = RedeemPaymentLink(
        uow,
        link_repo,
        transaction_repo,
        gateway,
        gateway_timeout=ApplicationConfig.GATEWAY_TIMEOUT_SECONDS,
        finalize_max_attempts=ApplicationConfig.FINALIZE_MAX_ATTEMPTS,
        finalize_retry_backoff=ApplicationConfig.FINALIZE_RETRY_BACKOFF_SECONDS,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value
