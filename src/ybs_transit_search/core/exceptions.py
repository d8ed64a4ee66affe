"""Custom exceptions for YBS transit search."""


class TransitSearchError(Exception):
    """Base exception for transit search errors."""

    pass


class StopNotFoundError(TransitSearchError):
    """Raised when a stop name cannot be resolved to a known stop."""

    pass


class CatalogError(TransitSearchError):
    """Raised when a stop or route catalog cannot be read or parsed."""

    pass


class NetworkError(TransitSearchError):
    """Raised when there's a network-related error."""

    pass


class ValidationError(TransitSearchError):
    """Raised when input validation fails."""

    pass
