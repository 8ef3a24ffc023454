"""HTTP transport to the export API."""

from catalog_bridge.platform.http_client.export_client import ExportSink, HttpExportSink

__all__ = ["ExportSink", "HttpExportSink"]
