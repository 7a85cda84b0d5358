class AppError(Exception):
    """Base error carrying a user-facing message and the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class AuthError(AppError):
    status_code = 401


class PermissionDeniedError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InvalidInputError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 409


class StoreError(AppError):
    status_code = 500


class UploadError(AppError):
    status_code = 400
