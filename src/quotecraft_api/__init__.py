"""QuoteCraft API - quote lifecycle, quota and statistics service."""

__version__ = "0.1.0"
