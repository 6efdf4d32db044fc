"""
Error taxonomy shared by every service.

Services raise these; the HTTP layer turns them into 4xx responses with an
``{"error": ..., "message": ...}`` body (see ``gamecenter.main``).
"""


class ServiceError(Exception):
    status_code = 400
    code = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"


class ValidationError(ServiceError):
    status_code = 422
    code = "validation_error"


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"


class PromotionUnavailableError(ServiceError):
    """A promotion exists for the key but is expired, not yet started, or disabled."""

    status_code = 409
    code = "promotion_unavailable"
