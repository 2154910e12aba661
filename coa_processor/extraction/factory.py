from typing import ClassVar, NamedTuple

from coa_processor.config.settings import Settings
from coa_processor.extraction.base import BaseExtractor
from coa_processor.extraction.client_base import BaseExtractionClient
from coa_processor.extraction.example_client_adapter import ExampleClientAdapter
from coa_processor.extraction.extractor import Extractor
from coa_processor.extraction.openai_client_adapter import OpenAIClientAdapter
from coa_processor.pdf.factory import PdfExtractorFactory
from coa_processor.pdf.rasterizer import PageRasterizer


class ProviderConfig(NamedTuple):
    api_key: str
    model: str
    timeout_seconds: int
    base_url: str | None


class ExtractorFactory:
    """Creates the configured extractor.

    Every non-example provider speaks the OpenAI chat API; they differ only in
    base URL and in which ``extraction_<provider>_*`` settings apply.
    """

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
    }
    DEFAULT_TIMEOUT_SECONDS: ClassVar[int] = 60

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def create(cls, settings: Settings) -> BaseExtractor:
        provider = settings.extraction_provider.strip().lower()
        client: BaseExtractionClient
        if provider == "example":
            client = ExampleClientAdapter()
            model, temperature = "example", 0.0
        else:
            config = cls._provider_config(provider, settings)
            client = OpenAIClientAdapter(
                api_key=config.api_key,
                timeout_seconds=config.timeout_seconds,
                base_url=config.base_url,
            )
            model = config.model
            temperature = settings.extraction_openai_temperature if provider == "openai" else 0.0
        return Extractor(
            client=client,
            pdf_extractor=PdfExtractorFactory.create(settings),
            rasterizer=PageRasterizer(max_pages=settings.extraction_max_pages),
            model=model,
            temperature=temperature,
            min_text_chars=settings.extraction_min_text_chars,
        )

    @classmethod
    def _provider_config(cls, provider: str, settings: Settings) -> ProviderConfig:
        if provider not in cls.supported_providers():
            raise ValueError(
                f"Unknown extraction provider '{provider}'. Choose from: {cls.supported_providers()}"
            )
        prefix = f"extraction_{provider}_"
        return ProviderConfig(
            api_key=getattr(settings, prefix + "api_key", "") or "",
            model=getattr(settings, prefix + "model_name", "") or "",
            timeout_seconds=getattr(settings, prefix + "timeout_seconds", 0)
            or cls.DEFAULT_TIMEOUT_SECONDS,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.extraction_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "extraction_openai_compatible_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        return cls.OPENAI_COMPATIBLE_BASE_URLS[provider]
