"""KeelCast: podcast feed ingestion and episode pagination."""

__version__ = "1.0.0"
