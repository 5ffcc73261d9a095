class DomainError(Exception):
    """Базовая ошибка use case; status_code уходит клиенту."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400


class Conflict(DomainError):
    # дубликаты на публичном API отдаются как 400
    status_code = 400


class Unauthorized(DomainError):
    status_code = 401


class Forbidden(DomainError):
    status_code = 403


class NotFound(DomainError):
    status_code = 404


class InvalidToken(Exception):
    """Ошибка проверки токена; наружу не выходит, guard превращает её в 403."""
