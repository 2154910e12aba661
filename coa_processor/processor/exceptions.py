class ProcessorError(Exception):
    """Base exception for certificate generation pipeline errors."""


class MissingInputError(ProcessorError):
    """Raised when neither extracted data nor a source PDF was supplied."""
