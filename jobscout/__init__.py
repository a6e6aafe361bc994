"""Job search client core: catalog, query, auth, storage and app state."""

__version__ = "0.1.0"
