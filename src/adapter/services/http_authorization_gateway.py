"""HTTP authorization gateway

Talks to a remote card-authorization provider over JSON.
"""

import logging
from typing import Optional
import httpx
from src.app.services.authorization_gateway import (
    AuthorizationDecision,
    AuthorizationGateway,
    AuthorizationRequest,
)
from src.domain.errors import FailureReason

logger = logging.getLogger(__name__)

_KNOWN_REASONS = {reason.value: reason for reason in FailureReason}


class HttpAuthorizationGateway(AuthorizationGateway):
    """
    Gateway backed by an HTTP provider

    Request body:
        {"amount", "currency", "cardNumber", "expiryMonth", "expiryYear", "cvv"}
    Response body:
        {"approved", "responseCode", "responseMessage", "failureReason"}

    Transport errors and non-2xx responses are reported as a
    GATEWAY_UNAVAILABLE decline rather than raised.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            url: Provider authorization endpoint
            timeout: HTTP timeout in seconds
            client: Optional preconfigured client (owned by the caller)
        """
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def authorize(self, request: AuthorizationRequest) -> AuthorizationDecision:
        payload = {
            "amount": str(request.amount),
            "currency": request.currency,
            "cardNumber": request.card_number,
            "expiryMonth": request.expiry_month,
            "expiryYear": request.expiry_year,
            "cvv": request.cvv,
        }

        try:
            response = await self._client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Authorization gateway request to {self.url} failed: {e}")
            return self._unavailable()
        except ValueError as e:
            logger.error(f"Authorization gateway returned invalid JSON: {e}")
            return self._unavailable()

        if body.get("approved"):
            return AuthorizationDecision.approve(
                code=body.get("responseCode") or "APPROVED",
                message=body.get("responseMessage") or "Transaction approved",
            )

        reason = _KNOWN_REASONS.get(body.get("failureReason"), FailureReason.CARD_DECLINED)
        return AuthorizationDecision.decline(
            code=body.get("responseCode") or "DECLINED",
            message=body.get("responseMessage") or "Card declined",
            reason=reason,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _unavailable() -> AuthorizationDecision:
        return AuthorizationDecision.decline(
            code="GATEWAY_ERROR",
            message="Authorization gateway unavailable",
            reason=FailureReason.GATEWAY_UNAVAILABLE,
        )
