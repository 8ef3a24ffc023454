"""Schemas for payloads sent to the export API."""
