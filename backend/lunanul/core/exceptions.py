"""Shared exceptions module."""

from typing import Optional


class LunanulException(Exception):
    """Base exception for Lunanul services."""

    def __init__(self, message: Optional[str] = "Lunanul error"):
        """Create a new LunanulException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class NotFoundException(LunanulException):
    """Exception raised when an object is not found."""

    def __init__(self, message: Optional[str] = "Object not found"):
        """Create a new NotFoundException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        super().__init__(message)


class ConfigurationError(LunanulException):
    """Exception raised when static configuration or catalog data is inconsistent.

    Signals a programming or data error, never a user-facing condition.
    """

    def __init__(self, message: Optional[str] = "Invalid configuration"):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        super().__init__(message)


class InvalidArgumentError(LunanulException):
    """Exception raised when a caller passes a malformed argument."""

    def __init__(self, message: Optional[str] = "Invalid argument"):
        """Create a new InvalidArgumentError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        super().__init__(message)


class InvalidStateError(LunanulException):
    """Exception raised when an action is not possible in the current state.

    Used when the state of one component forbids an action requested through
    another, e.g. a quota that is already spent.
    """

    def __init__(self, message: Optional[str] = "Object is in an invalid state"):
        """Create a new InvalidStateError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        super().__init__(message)
