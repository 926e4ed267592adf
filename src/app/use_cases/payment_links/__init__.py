"""Payment link management use cases"""
from .create_payment_link import CreatePaymentLink
from .get_payment_link import GetPaymentLink
from .list_payment_links import ListPaymentLinks
from .update_payment_link import UpdatePaymentLink
from .get_public_payment_link import GetPublicPaymentLink
from .dtos import (
    CreatePaymentLinkCommandDTO,
    UpdatePaymentLinkCommandDTO,
    PaymentLinkResponseDTO,
    ListPaymentLinksResponseDTO,
    PublicPaymentLinkDTO,
)

__all__ = [
    "CreatePaymentLink",
    "GetPaymentLink",
    "ListPaymentLinks",
    "UpdatePaymentLink",
    "GetPublicPaymentLink",
    "CreatePaymentLinkCommandDTO",
    "UpdatePaymentLinkCommandDTO",
    "PaymentLinkResponseDTO",
    "ListPaymentLinksResponseDTO",
    "PublicPaymentLinkDTO",
]
