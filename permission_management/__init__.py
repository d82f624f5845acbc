"""Permission management: catalog, grant stores, manager decorators and checker."""

__version__ = "1.0.0"
