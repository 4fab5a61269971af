"""Fortune service: fortune records over HTTP, mirrored to Redis."""

__version__ = "1.0.0"
