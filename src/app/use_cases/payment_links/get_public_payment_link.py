"""Get Public Payment Link Use Case

Payer-facing lookup that only shows links that can currently be redeemed.
"""

from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.payment_link_repository import PaymentLinkRepository
from src.domain.errors import ErrorCode
from .dtos import PublicPaymentLinkDTO
from .mappers import to_public_link

INELIGIBLE_MESSAGES = {
    ErrorCode.LINK_INACTIVE: "This payment link is inactive",
    ErrorCode.LINK_EXPIRED: "This payment link has expired",
    ErrorCode.LINK_EXHAUSTED: "This payment link has reached its maximum usage limit",
}


class GetPublicPaymentLink:
    def __init__(self, link_repo: PaymentLinkRepository):
        self.link_repo = link_repo

    async def execute(self, link_token: str, now: Optional[datetime] = None) -> Result[PublicPaymentLinkDTO]:
        now = now or datetime.utcnow()

        link = await self.link_repo.get_by_token(link_token)
        if link is None:
            return Return.err(
                Error(code=ErrorCode.LINK_NOT_FOUND, message="Payment link not found")
            )

        ineligible = link.eligibility_error(now)
        if ineligible is not None:
            return Return.err(Error(code=ineligible, message=INELIGIBLE_MESSAGES[ineligible]))

        return Return.ok(to_public_link(link))
