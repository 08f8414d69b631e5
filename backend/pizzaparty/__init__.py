"""Pizza Party kitchen order tracking service."""

__version__ = "0.1.0"
