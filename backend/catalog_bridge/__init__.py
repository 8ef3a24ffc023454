"""Catalog bridge: forwards commerce catalog changes to the Ka-ching API."""
