"""HTTP error surface for use-case error results"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error
from src.domain.errors import ErrorCode


class ClientError(Exception):
    """Raised by routes to return an Error result as an HTTP response"""

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error.model_dump(mode="json", exclude_none=True)},
    )


_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR.value: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NO_FIELDS_TO_UPDATE.value: status.HTTP_400_BAD_REQUEST,
    ErrorCode.OWNER_REQUIRED.value: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.LINK_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.TRANSACTION_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.LINK_INACTIVE.value: status.HTTP_409_CONFLICT,
    ErrorCode.LINK_EXHAUSTED.value: status.HTTP_409_CONFLICT,
    ErrorCode.LINK_EXPIRED.value: status.HTTP_410_GONE,
    ErrorCode.INTERNAL_ERROR.value: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_client_error(error: Error) -> ClientError:
    code = getattr(error.code, "value", error.code)
    return ClientError(error, status_code=_STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST))
