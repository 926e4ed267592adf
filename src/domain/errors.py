"""Closed error taxonomy for payment link operations"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes returned by use cases before anything is persisted"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    LINK_NOT_FOUND = "LINK_NOT_FOUND"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
    LINK_INACTIVE = "LINK_INACTIVE"
    LINK_EXPIRED = "LINK_EXPIRED"
    LINK_EXHAUSTED = "LINK_EXHAUSTED"
    NO_FIELDS_TO_UPDATE = "NO_FIELDS_TO_UPDATE"
    OWNER_REQUIRED = "OWNER_REQUIRED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FailureReason(str, Enum):
    """Why a persisted redemption attempt ended in a non-completed state"""
    CARD_DECLINED = "CARD_DECLINED"
    INVALID_CVV = "INVALID_CVV"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
    GATEWAY_UNAVAILABLE = "GATEWAY_UNAVAILABLE"
    LINK_EXHAUSTED_CONCURRENTLY = "LINK_EXHAUSTED_CONCURRENTLY"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    ABORTED = "ABORTED"

