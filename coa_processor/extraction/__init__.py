from coa_processor.extraction.base import BaseExtractor
from coa_processor.extraction.exceptions import ExtractionError, ExtractionNetworkError
from coa_processor.extraction.factory import ExtractorFactory

__all__ = ["BaseExtractor", "ExtractionError", "ExtractionNetworkError", "ExtractorFactory"]
