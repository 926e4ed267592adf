"""UpdatePaymentLink Use Case

Applies owner edits to description and is_active. amount, currency, owner
and current_uses are never touched here.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.payment_link_repository import PaymentLinkRepository
from src.app.use_cases.validation import FieldIssues
from src.domain.errors import ErrorCode
from .create_payment_link import MAX_DESCRIPTION_LENGTH
from .dtos import PaymentLinkResponseDTO, UpdatePaymentLinkCommandDTO
from .mappers import to_link_response

logger = logging.getLogger(__name__)


class UpdatePaymentLink:
    """
    Use Case: Update payment link metadata

    Business Rules:
    1. Only the owner may update the link (others see LINK_NOT_FOUND)
    2. At least one of description / is_active must be supplied
    3. Last writer wins; the usage counter is not part of this update
    """

    def __init__(self, uow: UnitOfWork, link_repo: PaymentLinkRepository, base_url: str):
        self.uow = uow
        self.link_repo = link_repo
        self.base_url = base_url

    async def execute(
        self,
        owner_id: str,
        link_token: str,
        command: UpdatePaymentLinkCommandDTO,
        now: Optional[datetime] = None,
    ) -> Result[PaymentLinkResponseDTO]:
        now = now or datetime.utcnow()
        supplied = command.model_fields_set
        update_description = "description" in supplied
        update_active = "is_active" in supplied and command.is_active is not None

        if not update_description and not update_active:
            return Return.err(
                Error(
                    code=ErrorCode.NO_FIELDS_TO_UPDATE,
                    message="No fields to update",
                    reason="Provide description and/or is_active",
                )
            )

        issues = FieldIssues()
        if command.description is not None and len(command.description) > MAX_DESCRIPTION_LENGTH:
            issues.add("description", f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
        if issues:
            return Return.err(issues.to_error("Invalid payment link update"))

        try:
            row = await self.link_repo.get_owned_with_stats(owner_id, link_token)
            if row is None:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.LINK_NOT_FOUND,
                        message=f"Payment link {link_token} not found",
                    )
                )

            link, _, _ = row
            await self.link_repo.update_metadata(
                link.id,
                description=command.description,
                is_active=command.is_active if update_active else None,
                update_description=update_description,
            )
            await self.uow.commit()

            link, transaction_count, total_collected = await self.link_repo.get_owned_with_stats(
                owner_id, link_token
            )
            response = to_link_response(link, self.base_url, now, transaction_count, total_collected)
            await self.uow.commit()

            logger.info(f"Payment link updated by owner {owner_id}: {link_token}")
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update payment link {link_token}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to update payment link",
                    reason=str(e),
                )
            )
