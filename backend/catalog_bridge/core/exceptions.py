"""Shared exceptions for the catalog bridge."""

from typing import Optional


class CatalogBridgeException(Exception):
    """Base exception for catalog bridge errors."""

    pass


class ExportTransportError(CatalogBridgeException):
    """Raised when the remote export API cannot be reached or rejects a request.

    Covers both transport failures (connection refused, timeout) and non-2xx
    responses. Export requests are never retried; the export for the current
    event is lost and the error propagates to the event handler.
    """

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        status_code: Optional[int] = None,
    ):
        """Initialize transport error.

        Args:
            message: Human-readable description
            method: HTTP method of the failed request
            url: Target URL of the failed request
            status_code: Response status if a response was received
        """
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message)
