from abc import ABC, abstractmethod

from coa_processor.rendering.models import ExtractedRecord


class BaseExtractor(ABC):
    """Contract for turning an uploaded COA into an ExtractedRecord."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> ExtractedRecord:
        """Extract structured certificate data.

        Args:
            pdf_bytes: The uploaded certificate, unmodified.

        Returns:
            ExtractedRecord; absent fields are None, never an error.

        Raises:
            ExtractionError: if the provider response cannot be used at all.
        """
