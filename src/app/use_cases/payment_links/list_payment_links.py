"""
List Payment Links Use Case

Retrieves an owner's payment links with pagination and an optional derived
status filter.
"""
from datetime import datetime
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.payment_link_repository import PaymentLinkRepository
from src.domain.payment_link import LinkStatus
from .dtos import ListPaymentLinksResponseDTO
from .mappers import to_link_response


class ListPaymentLinks:
    """
    Use case: List an owner's payment links

    Links are ordered by created_at DESC (most recent first).
    """

    def __init__(self, link_repo: PaymentLinkRepository, base_url: str):
        self.link_repo = link_repo
        self.base_url = base_url

    async def execute(
        self,
        owner_id: str,
        status: Optional[LinkStatus] = None,
        limit: int = 10,
        offset: int = 0,
        now: Optional[datetime] = None,
    ) -> Result[ListPaymentLinksResponseDTO]:
        """
        List payment links for an owner.

        Args:
            owner_id: Owner identifier
            status: Optional derived status filter
            limit: Maximum number of links to return (default 10)
            offset: Number of links to skip (default 0)

        Returns:
            Result[ListPaymentLinksResponseDTO]: Paginated link list
        """
        now = now or datetime.utcnow()

        rows, total = await self.link_repo.list_for_owner(
            owner_id=owner_id,
            now=now,
            status=status,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListPaymentLinksResponseDTO(
                payment_links=[
                    to_link_response(link, self.base_url, now, count, collected)
                    for link, count, collected in rows
                ],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
