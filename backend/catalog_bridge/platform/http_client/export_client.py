"""Export sink - HTTP transport to the Ka-ching import API.

The dispatcher and export services only see the ExportSink interface:
one post or delete call per export action, each returning the response
status. HttpExportSink implements it on top of httpx.Client.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import httpx

from catalog_bridge.core.config import settings
from catalog_bridge.core.exceptions import ExportTransportError
from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.schemas.kaching import DeleteRequest, ExportPayload

Payload = Union[ExportPayload, Mapping[str, Any]]


def serialize_payload(payload: Payload) -> Dict[str, Any]:
    """Serialize a payload to a JSON-compatible dict without null fields."""
    if isinstance(payload, ExportPayload):
        return payload.to_json_dict()
    return _drop_none(dict(payload))


def _drop_none(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value]
    return value


class ExportSink(ABC):
    """Outbound interface of the bridge.

    Contract:
    - post sends an entity payload, delete sends a list of ids
    - Both return the HTTP status of a successful (2xx) response
    - Both raise ExportTransportError on transport failure or non-2xx status
    - No retries
    """

    @abstractmethod
    def post(self, payload: Payload, url: str) -> int:
        """Create or update entities at url."""
        pass

    @abstractmethod
    def delete(self, ids: Sequence[str], url: str) -> int:
        """Delete entities by id at url."""
        pass


class HttpExportSink(ExportSink):
    """ExportSink sending JSON over an httpx.Client.

    The client is created with the sink unless one is passed in, and is closed
    by close() or when used as a context manager. One sink may be shared by
    host threads raising events concurrently.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the sink.

        Args:
            client: Client to send requests with (e.g. with a MockTransport in tests)
            timeout: Request timeout in seconds, defaults to settings.EXPORT_HTTP_TIMEOUT
            logger: Optional contextual logger
        """
        self._timeout = timeout if timeout is not None else settings.EXPORT_HTTP_TIMEOUT
        self._client = client if client is not None else httpx.Client(timeout=self._timeout)
        self.logger = logger or default_logger.with_context(component="export_sink")

    @property
    def client(self) -> httpx.Client:
        """Get the underlying client."""
        return self._client

    def post(self, payload: Payload, url: str) -> int:
        """POST a payload as JSON and return the response status."""
        return self._send("POST", url, serialize_payload(payload))

    def delete(self, ids: Sequence[str], url: str) -> int:
        """DELETE entities by id, sent as a JSON body, and return the response status."""
        self.logger.info(f"Delete url: {url}")
        return self._send("DELETE", url, DeleteRequest(ids=list(ids)).to_json_dict())

    def _send(self, method: str, url: str, body: Dict[str, Any]) -> int:
        """Send a JSON request and map failures to ExportTransportError."""
        try:
            # httpx.Client.delete() takes no body, so go through request()
            response = self.client.request(method, url, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            self.logger.with_context(method=method, status_code=status_code).error(
                f"[ExportSink] {method} {url} returned {status_code}"
            )
            raise ExportTransportError(
                f"{method} {url} returned {status_code}",
                method=method,
                url=url,
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            self.logger.with_context(method=method).error(
                f"[ExportSink] {method} {url} failed: {e}"
            )
            raise ExportTransportError(
                f"{method} {url} failed: {e}", method=method, url=url
            ) from e

        self.logger.debug(f"[ExportSink] {method} {url} -> {response.status_code}")
        return response.status_code

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "HttpExportSink":
        return self

    def __exit__(self, *args) -> None:
        self.close()
