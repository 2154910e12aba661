from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from an uploaded COA.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Text of all pages joined by newlines, stripped. Scanned
            certificates usually come back empty.

        Raises:
            PdfExtractionError: if the bytes are not a readable PDF.
        """
