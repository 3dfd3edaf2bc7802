"""Exceptions raised by menu-packager."""


class MenuPackagerError(Exception):
    """Base class for every error the tool reports to the user."""


class ConfigurationError(MenuPackagerError, ValueError):
    pass


class UnsupportedFileTypeError(MenuPackagerError, ValueError):
    pass


class UnknownAudienceTypeError(MenuPackagerError, ValueError):
    pass


class InvalidDiscountError(MenuPackagerError, ValueError):
    pass


class MixedCurrencyError(MenuPackagerError, ValueError):
    def __init__(self, markers):
        self.markers = list(markers)
        super().__init__(
            f"Menu items use more than one currency: {', '.join(self.markers)}"
        )


class AIProviderError(MenuPackagerError):
    """
    The AI provider call failed.

    `reason` is one of "auth", "rate_limit" or "unavailable".
    """

    def __init__(self, message: str, reason: str = "unavailable"):
        super().__init__(message)
        self.reason = reason


class PackageGenerationError(MenuPackagerError):
    """The AI answered, but not with a usable package."""
