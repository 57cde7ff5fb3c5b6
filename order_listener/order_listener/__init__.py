"""Order-created event listener: decodes and normalizes inbound order events."""

__version__ = "0.1.0"
