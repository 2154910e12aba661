from coa_processor.entitlement.ledger import CreditLedger
from coa_processor.entitlement.models import DownloadOption
from coa_processor.entitlement.policy import EntitlementPolicy
from coa_processor.extraction.base import BaseExtractor
from coa_processor.logging.logger import Log
from coa_processor.processor.exceptions import MissingInputError
from coa_processor.processor.pipeline import PipelineStep, RenderContext
from coa_processor.rendering.composer import DocumentComposer
from coa_processor.rendering.models import BrandingProfile
from coa_processor.rendering.output import OutputWriter
from coa_processor.storage.repositories import AccountRepository, BrandingRepository


class ExtractRecordStep(PipelineStep):
    """Runs AI extraction unless the caller already supplied (edited) data."""

    def __init__(self, extractor: BaseExtractor) -> None:
        self._extractor = extractor

    def run(self, context: RenderContext) -> RenderContext:
        if context.record is not None:
            return context
        if not context.pdf_bytes:
            raise MissingInputError("Either extracted data or a source PDF is required")
        context.record = self._extractor.extract(context.pdf_bytes)
        return context


class LoadBrandingStep(PipelineStep):
    def __init__(self, branding_repo: BrandingRepository, account_repo: AccountRepository) -> None:
        self._branding_repo = branding_repo
        self._account_repo = account_repo

    def run(self, context: RenderContext) -> RenderContext:
        if context.branding is None:
            context.branding = self._branding_repo.find(context.user_id) or BrandingProfile()
        context.account = self._account_repo.find(context.user_id)
        Log.info(
            "Loaded branding",
            user_id=context.user_id,
            has_logo=context.branding.logo is not None,
        )
        return context


class DecideEntitlementStep(PipelineStep):
    def __init__(self, policy: EntitlementPolicy) -> None:
        self._policy = policy

    def run(self, context: RenderContext) -> RenderContext:
        context.entitlement = self._policy.decide(
            context.account,
            context.option,
            payment_confirmed=context.payment_confirmed,
        )
        return context


class ComposeDocumentStep(PipelineStep):
    def __init__(self, composer: DocumentComposer) -> None:
        self._composer = composer

    def run(self, context: RenderContext) -> RenderContext:
        if context.record is None or context.branding is None or context.entitlement is None:
            raise ValueError("RenderContext.record, branding and entitlement must be set before compose")
        context.document = self._composer.compose(
            context.record,
            context.branding,
            context.entitlement,
        )
        return context


class WriteOutputStep(PipelineStep):
    def __init__(self, writer: OutputWriter) -> None:
        self._writer = writer

    def run(self, context: RenderContext) -> RenderContext:
        if context.document is None:
            raise ValueError("RenderContext.document must be set before write")
        context.output_path = self._writer.write(context.document)
        return context


class ConsumeCreditStep(PipelineStep):
    def __init__(self, ledger: CreditLedger) -> None:
        self._ledger = ledger

    def run(self, context: RenderContext) -> RenderContext:
        if context.option is not DownloadOption.SUBSCRIPTION:
            return context
        if context.output_path is None:
            raise ValueError("RenderContext.output_path must be set before consuming a credit")
        context.account = self._ledger.consume(context.user_id)
        return context


class LogFailureStep(PipelineStep):
    def run(self, context: RenderContext) -> RenderContext:
        Log.error(
            f"Certificate generation failed: {context.error_message}",
            user_id=context.user_id,
            option=context.option.value,
        )
        return context
