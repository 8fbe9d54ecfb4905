
class InvalidTimeFormat(ValueError):
    """Raised when a time-of-day value cannot be parsed as HH:MM within one day."""
    pass


class BookingFeedError(RuntimeError):
    """Raised when the external booking store fails (network errors, bad status, bad payload)."""
    pass
