"""Payment link redemption use case"""
from .redeem_payment_link import RedeemPaymentLink
from .dtos import RedeemCommandDTO, RedemptionResponseDTO, GatewayResponseDTO

__all__ = [
    "RedeemPaymentLink",
    "RedeemCommandDTO",
    "RedemptionResponseDTO",
    "GatewayResponseDTO",
]
