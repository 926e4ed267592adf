from .unit_of_work import UnitOfWork
from .authorization_gateway import (
    AuthorizationGateway,
    AuthorizationRequest,
    AuthorizationDecision,
)

__all__ = [
    "UnitOfWork",
    "AuthorizationGateway",
    "AuthorizationRequest",
    "AuthorizationDecision",
]
