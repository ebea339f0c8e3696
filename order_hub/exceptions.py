# order_hub/exceptions.py

class IngestionError(Exception):
    """Base exception for order ingestion errors"""
    error_code = "ingestion_error"


class ValidationError(IngestionError):
    """
    Malformed or missing input fields. Carries the offending field paths
    so the webhook response can list them.
    """
    error_code = "validation_error"

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class UnsupportedPlatformError(IngestionError):
    """Platform key is not registered"""
    error_code = "unsupported_platform"

    def __init__(self, platform: str):
        super().__init__(f"Unsupported platform: {platform}")
        self.platform = platform


class UpstreamAdapterError(IngestionError):
    """Platform fetch or notify call failed"""
    error_code = "upstream_error"

    def __init__(self, platform: str, message: str):
        super().__init__(f"{platform}: {message}")
        self.platform = platform


class PersistenceError(IngestionError):
    """Order store write failed"""
    error_code = "persistence_error"
