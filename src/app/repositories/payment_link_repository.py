"""Payment Link Repository Interface

Defines the contract for payment link persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.payment_link import LinkStatus, PaymentLink

# (link, transaction_count, total_collected)
LinkWithStats = Tuple[PaymentLink, int, Decimal]


class PaymentLinkRepository(ABC):
    """
    Repository interface for PaymentLink persistence

    current_uses is only ever written through try_consume_slot, which must be
    a single indivisible check-and-increment.
    """

    @abstractmethod
    async def create(self, link: PaymentLink) -> PaymentLink:
        """
        Create a new payment link

        Args:
            link: PaymentLink entity to persist

        Returns:
            Created PaymentLink with generated ID
        """
        pass

    @abstractmethod
    async def get_by_token(self, link_token: str) -> Optional[PaymentLink]:
        """
        Retrieve link by its public token

        Args:
            link_token: Public link token

        Returns:
            PaymentLink if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_owned_with_stats(self, owner_id: str, link_token: str) -> Optional[LinkWithStats]:
        """
        Retrieve an owner's link with its transaction aggregates

        Returns:
            (link, transaction_count, total_collected) or None when the link
            does not exist or belongs to another owner
        """
        pass

    @abstractmethod
    async def list_for_owner(
        self,
        owner_id: str,
        now: datetime,
        status: Optional[LinkStatus] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[LinkWithStats], int]:
        """
        List an owner's links, newest first, optionally filtered by derived status

        Returns:
            Tuple of (page of link aggregates, total count)
        """
        pass

    @abstractmethod
    async def update_metadata(
        self,
        link_id: int,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        update_description: bool = False,
    ) -> None:
        """
        Update owner-editable fields (last writer wins)

        Args:
            link_id: Link ID
            description: New description (applied when update_description is True)
            is_active: New activation flag (applied when not None)
            update_description: Whether description was supplied
        """
        pass

    @abstractmethod
    async def try_consume_slot(self, link_id: int) -> bool:
        """
        Atomically increment current_uses if capacity remains

        Returns:
            True if a slot was consumed, False if the link was already at max_uses
        """
        pass
