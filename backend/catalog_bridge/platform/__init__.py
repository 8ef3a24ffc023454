"""Platform components of the catalog bridge."""
