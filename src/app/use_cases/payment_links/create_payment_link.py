"""CreatePaymentLink Use Case

Validates and persists a new payment link for an owner.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.payment_link_repository import PaymentLinkRepository
from src.app.use_cases.validation import CURRENCY_PATTERN, FieldIssues
from src.domain.errors import ErrorCode
from src.domain.payment_link import PaymentLink
from .dtos import CreatePaymentLinkCommandDTO, PaymentLinkResponseDTO
from .mappers import to_link_response

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 500
MAX_TOKEN_ATTEMPTS = 3


def generate_link_token(length: int = 16) -> str:
    return uuid.uuid4().hex[:length]


class CreatePaymentLink:
    """
    Use Case: Create a payment link

    Business Rules:
    1. amount > 0 with at most two decimal places
    2. currency is a 3-letter code (stored upper-case)
    3. expires_at, when given, is strictly in the future
    4. max_uses, when given, is >= 1
    5. All violations are reported together
    6. link_token is unique and distinct from the internal id
    """

    def __init__(
        self,
        uow: UnitOfWork,
        link_repo: PaymentLinkRepository,
        base_url: str,
        token_length: int = 16,
        default_expiry_hours: Optional[float] = None,
    ):
        self.uow = uow
        self.link_repo = link_repo
        self.base_url = base_url
        self.token_length = token_length
        self.default_expiry_hours = default_expiry_hours

    async def execute(
        self, command: CreatePaymentLinkCommandDTO, now: Optional[datetime] = None
    ) -> Result[PaymentLinkResponseDTO]:
        now = now or datetime.utcnow()

        issues = self._validate(command, now)
        if issues:
            return Return.err(issues.to_error("Invalid payment link"))

        expires_at = command.expires_at
        if expires_at is None and self.default_expiry_hours:
            expires_at = now + timedelta(hours=self.default_expiry_hours)

        try:
            link_token = await self._unique_token()

            link = PaymentLink(
                link_token=link_token,
                owner_id=command.owner_id,
                amount=command.amount,
                currency=command.currency.upper(),
                description=command.description,
                expires_at=expires_at,
                max_uses=command.max_uses,
                current_uses=0,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            created = await self.link_repo.create(link)
            await self.uow.commit()

            logger.info(f"Payment link created by owner {command.owner_id}: {created.link_token}")
            return Return.ok(to_link_response(created, self.base_url, now))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create payment link for owner {command.owner_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to create payment link",
                    reason=str(e),
                )
            )

    def _validate(self, command: CreatePaymentLinkCommandDTO, now: datetime) -> FieldIssues:
        issues = FieldIssues()

        if command.amount <= 0:
            issues.add("amount", "Amount must be a positive number")
        elif command.amount.normalize().as_tuple().exponent < -2:
            issues.add("amount", "Amount must have at most two decimal places")

        if not command.currency or not CURRENCY_PATTERN.match(command.currency):
            issues.add("currency", "Currency must be a 3-letter code")

        if command.description is not None and len(command.description) > MAX_DESCRIPTION_LENGTH:
            issues.add("description", f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")

        if command.expires_at is not None and command.expires_at <= now:
            issues.add("expires_at", "Expiry must be in the future")

        if command.max_uses is not None and command.max_uses < 1:
            issues.add("max_uses", "Max uses must be a positive integer")

        return issues

    async def _unique_token(self) -> str:
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = generate_link_token(self.token_length)
            if await self.link_repo.get_by_token(token) is None:
                return token
        raise RuntimeError("Could not generate a unique link token")
