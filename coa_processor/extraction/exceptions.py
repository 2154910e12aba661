class ExtractionError(Exception):
    """Raised when a COA cannot be turned into structured data."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
