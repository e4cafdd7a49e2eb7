class BookingError(Exception):
    """Base for booking failures that map onto an HTTP status."""

    status_code = 400

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class SlotUnavailable(BookingError):
    status_code = 409


class InvalidTransition(BookingError):
    status_code = 400


class AuthenticationRequired(BookingError):
    status_code = 401
