"""Authorization Gateway Interface

Contract for the external card-authorization provider. The redemption
coordinator only depends on this request/decision shape.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.errors import FailureReason


class AuthorizationRequest(BaseModel):
    """Card authorization request; card secrets are excluded from repr"""

    amount: Decimal = Field(..., gt=0, description="Amount to authorize")
    currency: str = Field(..., description="Currency code (ISO 4217)")
    card_number: str = Field(..., repr=False, description="Full card number")
    expiry_month: int = Field(..., description="Card expiry month (1-12)")
    expiry_year: int = Field(..., description="Card expiry year (4 digits)")
    cvv: str = Field(..., repr=False, description="Card security code")


class AuthorizationDecision(BaseModel):
    """Approve/decline decision returned by the gateway"""

    approved: bool = Field(..., description="Whether the charge was approved")
    response_code: str = Field(..., description="Provider response code")
    response_message: str = Field(..., description="Provider response message")
    failure_reason: Optional[FailureReason] = Field(
        default=None,
        description="Decline reason (None when approved)"
    )

    @classmethod
    def approve(cls, code: str = "APPROVED", message: str = "Transaction approved") -> "AuthorizationDecision":
        return cls(approved=True, response_code=code, response_message=message)

    @classmethod
    def decline(cls, code: str, message: str, reason: FailureReason) -> "AuthorizationDecision":
        return cls(approved=False, response_code=code, response_message=message, failure_reason=reason)


class AuthorizationGateway(ABC):
    """
    Authorization gateway interface

    Implementations may take anywhere from milliseconds to seconds to answer;
    the caller bounds the wait with its own timeout.
    """

    @abstractmethod
    async def authorize(self, request: AuthorizationRequest) -> AuthorizationDecision:
        """
        Request an approve/decline decision

        Args:
            request: AuthorizationRequest with amount, currency and card data

        Returns:
            AuthorizationDecision
        """
        pass

    async def close(self) -> None:
        """Release any held resources"""
        return None
