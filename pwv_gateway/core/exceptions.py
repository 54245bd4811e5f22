# pwv_gateway/core/exceptions.py


class GatewayError(Exception):
    """Base class for errors raised by the gateway itself"""


class ConfigurationError(GatewayError):
    """Configuration file is missing, unreadable, malformed or unusable"""


class ValidationError(GatewayError):
    """Caller supplied path parameters that must not reach the vault CLI"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
