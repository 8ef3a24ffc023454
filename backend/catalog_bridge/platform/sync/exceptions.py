"""Sync-specific exceptions for error handling."""

from catalog_bridge.core.exceptions import CatalogBridgeException


class UnsupportedEventError(CatalogBridgeException):
    """Raised when the resolver receives an event type it has no rules for.

    Events for non-catalog content are NOT unsupported: those resolve to an
    empty set and are logged at debug level.
    """

    pass


class ExportDispatchError(CatalogBridgeException):
    """Raised when an export action fails for a reason other than transport.

    Remaining actions of the event are not attempted; the export for the
    event is lost.

    Examples:
    - A graph lookup failed while building a payload
    - A payload could not be serialized

    Usage:
        raise ExportDispatchError(f"export_product(P-100) failed: {e}") from e
    """

    pass


class EntityResolutionError(CatalogBridgeException):
    """Raised when the content graph does not hold what a resolution rule expects.

    Example: the parent link of a product with a price change does not load as
    a product.
    """

    pass
