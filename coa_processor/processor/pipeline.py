from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from coa_processor.entitlement.models import Account, DownloadOption
from coa_processor.rendering.models import (
    BrandingProfile,
    EntitlementDecision,
    ExtractedRecord,
    RenderedDocument,
)


@dataclass(slots=True)
class RenderContext:
    user_id: str
    option: DownloadOption = DownloadOption.FREE
    payment_confirmed: bool = False
    pdf_bytes: bytes = b""
    record: ExtractedRecord | None = None
    branding: BrandingProfile | None = None
    account: Account | None = None
    entitlement: EntitlementDecision | None = None
    document: RenderedDocument | None = None
    output_path: Path | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: RenderContext) -> RenderContext:
        raise NotImplementedError
