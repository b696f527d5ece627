from fastapi import HTTPException


class AppException(HTTPException):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(AppException):
    status_code = 404
    default_detail = "Resource not found"


class ConflictError(AppException):
    status_code = 409
    default_detail = "Resource conflict"


class BadGatewayError(AppException):
    status_code = 502
    default_detail = "Upstream service unavailable"
