"""Get Payment Link Use Case

Retrieves one of an owner's payment links with its transaction aggregates.
"""

from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.payment_link_repository import PaymentLinkRepository
from src.domain.errors import ErrorCode
from .dtos import PaymentLinkResponseDTO
from .mappers import to_link_response


class GetPaymentLink:
    """
    Get Payment Link Use Case

    Read-only, owner-scoped. A link owned by someone else is reported as
    not found.
    """

    def __init__(self, link_repo: PaymentLinkRepository, base_url: str):
        self.link_repo = link_repo
        self.base_url = base_url

    async def execute(
        self, owner_id: str, link_token: str, now: Optional[datetime] = None
    ) -> Result[PaymentLinkResponseDTO]:
        now = now or datetime.utcnow()

        row = await self.link_repo.get_owned_with_stats(owner_id, link_token)
        if row is None:
            return Return.err(
                Error(
                    code=ErrorCode.LINK_NOT_FOUND,
                    message=f"Payment link {link_token} not found",
                )
            )

        link, transaction_count, total_collected = row
        return Return.ok(
            to_link_response(link, self.base_url, now, transaction_count, total_collected)
        )
