"""Request-scoped errors raised while handling gateway telegrams"""


class TelegramError(Exception):
    """Base class for errors that map to an HTTP response"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedInputError(TelegramError):
    """The telegram envelope could not be parsed as XML"""


class DecodeError(TelegramError):
    """A fragment field failed typed conversion"""


class UnsupportedMethodError(TelegramError):
    """The HTTP method is not GET or POST"""

    status_code = 400
