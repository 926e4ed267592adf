"""RedeemPaymentLink Use Case

Turns one payer's card submission into exactly one finalized Transaction
while keeping ``current_uses <= max_uses`` under concurrent redemptions.
"""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from sqlalchemy.exc import DBAPIError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_gateway import (
    AuthorizationDecision,
    AuthorizationGateway,
    AuthorizationRequest,
)
from src.app.repositories.payment_link_repository import PaymentLinkRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.use_cases.payment_links.get_public_payment_link import INELIGIBLE_MESSAGES
from src.app.use_cases.transactions.dtos import TransactionDTO
from src.app.use_cases.validation import CARD_NUMBER_PATTERN, CVV_PATTERN, FieldIssues, is_valid_email
from src.domain.card import detect_card_brand, last_four, normalize_card_number
from src.domain.errors import ErrorCode, FailureReason
from src.domain.transaction import Transaction, TransactionStatus
from .dtos import GatewayResponseDTO, RedeemCommandDTO, RedemptionResponseDTO

logger = logging.getLogger(__name__)


class RedeemPaymentLink:
    """
    Use Case: Redeem a payment link

    Business Rules:
    1. Unknown, inactive, expired or exhausted links are rejected before
       anything is persisted
    2. Card and payer fields are validated together; all violations are reported
    3. amount/currency always come from the link, never from the payer
    4. A slot is consumed only by an approved attempt, through one atomic
       conditional UPDATE executed at finalization
    5. Once the attempt row exists the caller always gets it back in a
       terminal state, never a bare error

    Flow:
    1. Resolve link and run the optimistic eligibility pre-check
    2. Validate payer and card
    3. Insert Transaction in processing and commit
    4. Call the gateway with a bounded timeout (timeouts become declines)
    5. Finalize: consume slot (approved only) + mark terminal, in one
       database transaction, retried on storage faults
    """

    def __init__(
        self,
        uow: UnitOfWork,
        link_repo: PaymentLinkRepository,
        transaction_repo: TransactionRepository,
        gateway: AuthorizationGateway,
        gateway_timeout: float = 8.0,
        finalize_max_attempts: int = 3,
        finalize_retry_backoff: float = 0.05,
    ):
        self.uow = uow
        self.link_repo = link_repo
        self.transaction_repo = transaction_repo
        self.gateway = gateway
        self.gateway_timeout = gateway_timeout
        self.finalize_max_attempts = max(1, finalize_max_attempts)
        self.finalize_retry_backoff = finalize_retry_backoff

    async def execute(
        self, command: RedeemCommandDTO, now: Optional[datetime] = None
    ) -> Result[RedemptionResponseDTO]:
        """
        Execute a redemption attempt

        Args:
            command: RedeemCommandDTO with link token, payer and card fields
            now: Evaluation time for expiry checks (defaults to utcnow)

        Returns:
            Result[RedemptionResponseDTO]: the finalized attempt (completed,
            failed or cancelled) or a pre-persistence error
        """
        now = now or datetime.utcnow()

        try:
            link = await self.link_repo.get_by_token(command.link_token)
            if link is None:
                await self.uow.rollback()
                return Return.err(
                    Error(code=ErrorCode.LINK_NOT_FOUND, message="Payment link not found")
                )

            ineligible = link.eligibility_error(now)
            if ineligible is not None:
                await self.uow.rollback()
                logger.info(f"Redemption rejected for link {command.link_token}: {ineligible.value}")
                return Return.err(Error(code=ineligible, message=INELIGIBLE_MESSAGES[ineligible]))

            issues, card_number, expiry_year = self._validate(command, now)
            if issues:
                await self.uow.rollback()
                return Return.err(issues.to_error("Invalid payment details"))

            transaction = Transaction(
                payment_link_id=link.id,
                payer_email=command.payer_email.strip(),
                payer_name=command.payer_name.strip(),
                amount=link.amount,
                currency=link.currency,
                status=TransactionStatus.PROCESSING.value,
                card_brand=detect_card_brand(card_number).value,
                card_last4=last_four(card_number),
                created_at=now,
                updated_at=now,
            )
            created = await self.transaction_repo.create(transaction)
            await self.uow.commit()

            transaction_id = created.id
            link_id = link.id
            amount = Decimal(link.amount)
            currency = link.currency

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record redemption attempt for link {command.link_token}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to record redemption attempt",
                    reason=str(e),
                )
            )

        logger.info(f"Redemption {transaction_id} processing for link {command.link_token}")

        request = AuthorizationRequest(
            amount=amount,
            currency=currency,
            card_number=card_number,
            expiry_month=command.expiry_month,
            expiry_year=expiry_year,
            cvv=command.cvv.strip(),
        )

        try:
            decision = await self._authorize(request, transaction_id)
        except asyncio.CancelledError:
            logger.warning(f"Redemption {transaction_id} cancelled before a gateway decision")
            await self._finalize(
                transaction_id,
                link_id,
                AuthorizationDecision.decline(
                    code="ABORTED",
                    message="Redemption aborted before a gateway decision",
                    reason=FailureReason.ABORTED,
                ),
                declined_status=TransactionStatus.CANCELLED,
            )
            raise

        finalized = await self._finalize(transaction_id, link_id, decision)
        if finalized is None:
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to finalize redemption attempt",
                    reason=f"transaction_id={transaction_id}",
                )
            )

        logger.info(
            f"Redemption {transaction_id} {finalized.status} "
            f"(code={finalized.response_code}, reason={finalized.failure_reason})"
        )
        return Return.ok(self._to_response(finalized, command.link_token))

    async def _authorize(self, request: AuthorizationRequest, transaction_id: str) -> AuthorizationDecision:
        """Call the gateway, folding timeouts and provider faults into declines"""
        try:
            return await asyncio.wait_for(self.gateway.authorize(request), timeout=self.gateway_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Gateway timed out after {self.gateway_timeout}s for redemption {transaction_id}"
            )
            return AuthorizationDecision.decline(
                code="TIMEOUT",
                message=f"Authorization gateway did not respond within {self.gateway_timeout} seconds",
                reason=FailureReason.GATEWAY_TIMEOUT,
            )
        except Exception as e:
            logger.warning(f"Gateway error for redemption {transaction_id}: {e}")
            return AuthorizationDecision.decline(
                code="GATEWAY_ERROR",
                message="Authorization gateway unavailable",
                reason=FailureReason.GATEWAY_UNAVAILABLE,
            )

    async def _finalize(
        self,
        transaction_id: str,
        link_id: int,
        decision: AuthorizationDecision,
        declined_status: TransactionStatus = TransactionStatus.FAILED,
    ) -> Optional[Transaction]:
        """
        Apply the decision: slot consumption and the terminal status commit together

        Storage faults roll back both writes and the whole step is retried with
        exponential backoff. After the last attempt the row is forced to
        failed/INTERNAL_ERROR.
        """
        for attempt in range(1, self.finalize_max_attempts + 1):
            try:
                if decision.approved:
                    if await self.link_repo.try_consume_slot(link_id):
                        status, reason = TransactionStatus.COMPLETED, None
                    else:
                        logger.warning(
                            f"Redemption {transaction_id} approved but link {link_id} "
                            f"was exhausted by a concurrent redemption"
                        )
                        status, reason = TransactionStatus.FAILED, FailureReason.LINK_EXHAUSTED_CONCURRENTLY
                else:
                    status, reason = declined_status, decision.failure_reason

                applied = await self.transaction_repo.finalize(
                    transaction_id,
                    status=status,
                    response_code=decision.response_code,
                    response_message=decision.response_message,
                    failure_reason=reason,
                    processed_at=datetime.utcnow(),
                )
                if not applied:
                    # already terminal; undo any slot taken above
                    await self.uow.rollback()
                    logger.warning(f"Redemption {transaction_id} was already finalized")
                    existing = await self.transaction_repo.get_by_id(transaction_id)
                    await self.uow.commit()
                    return existing

                transaction = await self.transaction_repo.get_by_id(transaction_id)
                await self.uow.commit()
                return transaction

            except DBAPIError as e:
                await self.uow.rollback()
                if attempt == self.finalize_max_attempts:
                    logger.error(
                        f"Finalize of redemption {transaction_id} failed after {attempt} attempts: {e}"
                    )
                    break
                delay = self.finalize_retry_backoff * (2 ** (attempt - 1))
                logger.warning(
                    f"Finalize of redemption {transaction_id} failed (attempt {attempt}), "
                    f"retrying in {delay:.3f}s: {e}"
                )
                await asyncio.sleep(delay)

            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Unexpected error finalizing redemption {transaction_id}: {e}")
                break

        return await self._force_failed(transaction_id)

    async def _force_failed(self, transaction_id: str) -> Optional[Transaction]:
        try:
            await self.transaction_repo.finalize(
                transaction_id,
                status=TransactionStatus.FAILED,
                response_code="INTERNAL_ERROR",
                response_message="Could not record the redemption outcome",
                failure_reason=FailureReason.INTERNAL_ERROR,
                processed_at=datetime.utcnow(),
            )
            transaction = await self.transaction_repo.get_by_id(transaction_id)
            await self.uow.commit()
            return transaction
        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Could not mark redemption {transaction_id} as failed, "
                f"leaving it to the stale transaction sweeper: {e}"
            )
            return None

    def _validate(self, command: RedeemCommandDTO, now: datetime) -> Tuple[FieldIssues, str, Optional[int]]:
        issues = FieldIssues()

        card_number = normalize_card_number(command.card_number)
        if not CARD_NUMBER_PATTERN.fullmatch(card_number):
            issues.add("card_number", "Card number must be 13-19 digits")

        cvv = (command.cvv or "").strip()
        if not CVV_PATTERN.fullmatch(cvv):
            issues.add("cvv", "CVV must be 3 or 4 digits")

        month = command.expiry_month
        month_ok = month is not None and 1 <= month <= 12
        if not month_ok:
            issues.add("expiry_month", "Expiry month must be between 1 and 12")

        year = command.expiry_year
        if year is not None and 0 <= year < 100:
            year += 2000
        if year is None or year < 2000:
            issues.add("expiry_year", "Expiry year is invalid")
        elif month_ok and (year, month) < (now.year, now.month):
            issues.add("expiry_year", "Card has expired")

        if not is_valid_email((command.payer_email or "").strip()):
            issues.add("payer_email", "A valid email address is required")

        if not (command.payer_name or "").strip():
            issues.add("payer_name", "Payer name is required")

        return issues, card_number, year

    def _to_response(self, transaction: Transaction, link_token: str) -> RedemptionResponseDTO:
        return RedemptionResponseDTO(
            transaction=TransactionDTO.from_entity(transaction, link_token),
            gateway_response=GatewayResponseDTO(
                response_code=transaction.response_code,
                response_message=transaction.response_message,
                failure_reason=transaction.failure_reason,
            ),
        )
