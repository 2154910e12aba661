from coa_processor.rendering.composer import DocumentComposer
from coa_processor.rendering.models import (
    BrandingProfile,
    EntitlementDecision,
    ExtractedRecord,
    RenderedDocument,
)

__all__ = [
    "BrandingProfile",
    "DocumentComposer",
    "EntitlementDecision",
    "ExtractedRecord",
    "RenderedDocument",
]
