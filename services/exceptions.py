class SheetFetchError(Exception):
    """Raised when data could not be retrieved from the spreadsheet."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class TransportError(SheetFetchError):
    """Raised when the spreadsheet service stayed unreachable after every retry."""


class RemoteRefusal(SheetFetchError):
    """Raised when the spreadsheet service answered with a non-2xx status after every retry."""
    def __init__(self, message, status: int):
        super().__init__(message)
        self.status = status


class LayoutError(Exception):
    """Raised when a sheet does not have the layout the parser relies on (e.g. no day headers)."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConfigurationError(SheetFetchError):
    """Raised when there is nothing to connect with: no spreadsheet id, or no usable Google credentials."""
