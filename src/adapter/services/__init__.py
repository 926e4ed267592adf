from .unit_of_work import SqlAlchemyUnitOfWork
from .simulated_authorization_gateway import SimulatedAuthorizationGateway
from .http_authorization_gateway import HttpAuthorizationGateway
from src.app.services.authorization_gateway import AuthorizationGateway


def create_authorization_gateway(config) -> AuthorizationGateway:
    """
    Factory function to create the configured authorization gateway

    Args:
        config: ApplicationConfig-like object (GATEWAY_MODE, GATEWAY_URL, ...)

    Returns:
        HttpAuthorizationGateway when GATEWAY_MODE is "http", otherwise
        SimulatedAuthorizationGateway
    """
    mode = (getattr(config, "GATEWAY_MODE", "simulated") or "simulated").lower()

    if mode == "http":
        if not config.GATEWAY_URL:
            raise ValueError("GATEWAY_URL is required when GATEWAY_MODE is 'http'")
        return HttpAuthorizationGateway(
            url=config.GATEWAY_URL,
            timeout=config.GATEWAY_TIMEOUT_SECONDS,
        )

    return SimulatedAuthorizationGateway(
        min_delay_seconds=config.GATEWAY_SIMULATED_MIN_DELAY_SECONDS,
        max_delay_seconds=config.GATEWAY_SIMULATED_MAX_DELAY_SECONDS,
    )


__all__ = [
    "SqlAlchemyUnitOfWork",
    "SimulatedAuthorizationGateway",
    "HttpAuthorizationGateway",
    "create_authorization_gateway",
]
