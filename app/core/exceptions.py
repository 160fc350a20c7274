"""
Application error taxonomy.

Every error carries a short, user-presentable message and a machine code.
Technical detail belongs in the log, not in the message.
"""


class AppError(Exception):
    """Base class for errors surfaced to the user through the API."""

    status_code = 400

    def __init__(self, message: str, *, code: str = "app_error"):
        super().__init__(message)
        self.message = message
        self.code = code


class NotAuthenticatedError(AppError):
    status_code = 401

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, code="not_authenticated")


class DevModeDisabledError(AppError):
    status_code = 403

    def __init__(self, message: str = "This tool is only available in developer mode"):
        super().__init__(message, code="dev_mode_disabled")


class InsufficientGuestsError(AppError):
    def __init__(
        self,
        message: str = "Not enough guests to create relationships. Please add at least 2 guests first.",
    ):
        super().__init__(message, code="insufficient_guests")


class NoUniqueRelationshipsError(AppError):
    def __init__(
        self,
        message: str = "Could not create any unique relationships. Try adding more guests first.",
    ):
        super().__init__(message, code="no_unique_relationships")


class ReminderError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="reminder_failed")


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", code="not_found")


class StoreError(AppError):
    """A record store call failed.

    ``committed`` is the number of rows that were already written by the
    surrounding multi-chunk operation; they are left in place.
    """

    status_code = 502

    def __init__(self, message: str, *, committed: int = 0):
        super().__init__(message, code="store_error")
        self.committed = committed
