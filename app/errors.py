class DateParseError(ValueError):
    """A price record date that is neither MM/DD/YYYY nor YYYY-MM-DD."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date format: {value!r}")


class PricesApiError(RuntimeError):
    """The remote price endpoint could not be read or written."""


class StorageError(RuntimeError):
    """A key-value store write failed."""
