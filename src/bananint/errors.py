class BananintError(Exception):
    """Base class for client errors"""


class TransportError(BananintError):
    """Network unreachable, timeout, bad status or unreadable body"""


class RejectedError(BananintError):
    """The API refused the request (not enough bananas, invalid skin, ...)"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
