from app.services.error_codes import ErrorCode, message_for


class ServiceError(Exception):
    def __init__(self, code: ErrorCode | str, message: str | None = None) -> None:
        if isinstance(code, ErrorCode):
            message = message or message_for(code)
            code = code.value
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    pass


class AuthenticationError(ServiceError):
    pass
