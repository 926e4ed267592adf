from typing import Optional
from fastapi import Header, status
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.database import build_engine, build_session_factory
from src.adapter.services import create_authorization_gateway
from src.api.error import ClientError
from src.app.services.authorization_gateway import AuthorizationGateway
from src.domain.errors import ErrorCode

engine = build_engine(ApplicationConfig.DB_URI, ApplicationConfig.DB_BUSY_TIMEOUT_SECONDS)

AsyncSessionLocal = build_session_factory(engine)

_gateway: Optional[AuthorizationGateway] = None


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_authorization_gateway() -> AuthorizationGateway:
    global _gateway
    if _gateway is None:
        _gateway = create_authorization_gateway(ApplicationConfig)
    return _gateway


async def close_authorization_gateway() -> None:
    global _gateway
    if _gateway is not None:
        gateway, _gateway = _gateway, None
        await gateway.close()


async def get_owner_id(x_owner_id: Optional[str] = Header(default=None, alias="X-Owner-Id")) -> str:
    """Owner identity forwarded by the upstream authentication layer"""
    if not x_owner_id or not x_owner_id.strip():
        raise ClientError(
            Error(
                code=ErrorCode.OWNER_REQUIRED,
                message="X-Owner-Id header is required",
            ),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return x_owner_id.strip()
