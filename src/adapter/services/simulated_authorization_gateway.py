"""Simulated authorization gateway

Deterministic demo decision policy keyed off the last digit of the card
number and CVV, behind a random network-like delay.
"""

import asyncio
import logging
import random
from typing import Optional
from src.app.services.authorization_gateway import (
    AuthorizationDecision,
    AuthorizationGateway,
    AuthorizationRequest,
)
from src.domain.errors import FailureReason

logger = logging.getLogger(__name__)


class SimulatedAuthorizationGateway(AuthorizationGateway):
    """
    In-process gateway for development and tests

    Decision policy:
    - card number ending in 0: DECLINED (CARD_DECLINED)
    - CVV ending in 0: INVALID_CVV (INVALID_CVV)
    - anything else: APPROVED
    """

    def __init__(
        self,
        min_delay_seconds: float = 1.0,
        max_delay_seconds: float = 3.0,
        seed: Optional[int] = None,
    ):
        """
        Args:
            min_delay_seconds: Lower bound of the simulated response time
            max_delay_seconds: Upper bound of the simulated response time
            seed: Optional seed for reproducible delays
        """
        if max_delay_seconds < min_delay_seconds:
            raise ValueError("max_delay_seconds must be >= min_delay_seconds")
        self.min_delay_seconds = min_delay_seconds
        self.max_delay_seconds = max_delay_seconds
        self._random = random.Random(seed)

    async def authorize(self, request: AuthorizationRequest) -> AuthorizationDecision:
        delay = self._random.uniform(self.min_delay_seconds, self.max_delay_seconds)
        if delay > 0:
            await asyncio.sleep(delay)

        if request.card_number.endswith("0"):
            decision = AuthorizationDecision.decline(
                code="DECLINED",
                message="Card declined by issuer: insufficient funds",
                reason=FailureReason.CARD_DECLINED,
            )
        elif request.cvv.endswith("0"):
            decision = AuthorizationDecision.decline(
                code="INVALID_CVV",
                message="Invalid security code",
                reason=FailureReason.INVALID_CVV,
            )
        else:
            decision = AuthorizationDecision.approve()

        logger.debug(f"Simulated gateway answered {decision.response_code} after {delay:.2f}s")
        return decision
