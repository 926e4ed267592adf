"""Entity to DTO conversion for payment links"""

from datetime import datetime
from decimal import Decimal
from src.domain.payment_link import PaymentLink
from .dtos import PaymentLinkResponseDTO, PublicPaymentLinkDTO

CENTS = Decimal("0.01")


def build_payment_url(base_url: str, link_token: str) -> str:
    return f"{base_url.rstrip('/')}/{link_token}"


def to_link_response(
    link: PaymentLink,
    base_url: str,
    now: datetime,
    transaction_count: int = 0,
    total_collected=None,
) -> PaymentLinkResponseDTO:
    collected = Decimal(str(total_collected or 0)).quantize(CENTS)
    return PaymentLinkResponseDTO(
        id=link.id,
        link_token=link.link_token,
        amount=link.amount,
        currency=link.currency,
        description=link.description,
        expires_at=link.expires_at,
        max_uses=link.max_uses,
        current_uses=link.current_uses,
        is_active=link.is_active,
        status=link.status_at(now).value,
        payment_url=build_payment_url(base_url, link.link_token),
        transaction_count=int(transaction_count or 0),
        total_collected=collected,
        created_at=link.created_at,
        updated_at=link.updated_at,
    )


def to_public_link(link: PaymentLink) -> PublicPaymentLinkDTO:
    return PublicPaymentLinkDTO(
        link_token=link.link_token,
        amount=link.amount,
        currency=link.currency,
        description=link.description,
        expires_at=link.expires_at,
        max_uses=link.max_uses,
        current_uses=link.current_uses,
        remaining_uses=link.remaining_uses(),
        created_at=link.created_at,
    )
