from pathlib import Path

from coa_processor.config.settings import Settings
from coa_processor.entitlement.ledger import CreditLedger
from coa_processor.entitlement.models import DownloadOption
from coa_processor.entitlement.policy import EntitlementPolicy
from coa_processor.extraction.base import BaseExtractor
from coa_processor.extraction.factory import ExtractorFactory
from coa_processor.logging.logger import Log
from coa_processor.processor.models import GenerationResult
from coa_processor.processor.pipeline import PipelineStep, RenderContext
from coa_processor.processor.steps import (
    ComposeDocumentStep,
    ConsumeCreditStep,
    DecideEntitlementStep,
    ExtractRecordStep,
    LoadBrandingStep,
    LogFailureStep,
    WriteOutputStep,
)
from coa_processor.rendering.assets import AssetResolver
from coa_processor.rendering.composer import DocumentComposer
from coa_processor.rendering.models import BrandingProfile, ExtractedRecord
from coa_processor.rendering.output import OutputWriter
from coa_processor.storage.base import BaseDocumentStore
from coa_processor.storage.factory import DocumentStoreFactory
from coa_processor.storage.repositories import AccountRepository, BrandingRepository


class Processor:
    """Runs the certificate generation steps in order.

    Pipeline: extract -> branding -> entitlement -> compose -> write -> credit.
    A credit is only consumed once the file is on disk.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        failed_step: PipelineStep | None = None,
    ) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def generate(
        self,
        user_id: str,
        *,
        record: ExtractedRecord | None = None,
        pdf_bytes: bytes = b"",
        option: DownloadOption = DownloadOption.FREE,
        payment_confirmed: bool = False,
        branding: BrandingProfile | None = None,
    ) -> GenerationResult:
        context = RenderContext(
            user_id=user_id,
            option=option,
            payment_confirmed=payment_confirmed,
            pdf_bytes=pdf_bytes,
            record=record,
            branding=branding,
        )
        Log.info("Generating certificate", user_id=user_id, option=option.value)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            if self._failed_step is not None:
                self._failed_step.run(context)
            raise

        if context.output_path is None or context.document is None:
            raise ValueError("Pipeline finished without writing a document")
        return GenerationResult(path=context.output_path, document=context.document)


def build_processor(
    settings: Settings,
    store: BaseDocumentStore | None = None,
    extractor: BaseExtractor | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    store = store if store is not None else DocumentStoreFactory.create(settings)
    extractor = extractor if extractor is not None else ExtractorFactory.create(settings)
    account_repo = AccountRepository(store)
    composer = DocumentComposer(
        AssetResolver(
            timeout_seconds=settings.asset_fetch_timeout_seconds,
            max_bytes=settings.asset_max_bytes,
        ),
        watermark_text=settings.watermark_text,
    )
    steps: list[PipelineStep] = [
        ExtractRecordStep(extractor),
        LoadBrandingStep(BrandingRepository(store), account_repo),
        DecideEntitlementStep(EntitlementPolicy()),
        ComposeDocumentStep(composer),
        WriteOutputStep(OutputWriter(Path(settings.output_dir))),
        ConsumeCreditStep(
            CreditLedger(account_repo, downloads_per_month=settings.downloads_per_month)
        ),
    ]
    return Processor(steps=steps, failed_step=LogFailureStep())
