import io

import httpx
import pdfplumber
import pytest
from reportlab.lib.pagesizes import A4

from coa_processor.rendering.assets import AssetResolver
from coa_processor.rendering.composer import DEFAULT_WATERMARK_TEXT, DocumentComposer
from coa_processor.rendering.models import (
    BrandingProfile,
    EntitlementDecision,
    ExtractedRecord,
    SpecificationRow,
)

FREE = EntitlementDecision(watermarked=True, use_custom_header=False)
ONE_TIME = EntitlementDecision(watermarked=False, use_custom_header=False)
SUBSCRIPTION = EntitlementDecision(watermarked=False, use_custom_header=True)
WATERMARK = DEFAULT_WATERMARK_TEXT.replace(" ", "")
TABLE_HEADER = "ItemStandardResult"


def _composer(resolver: AssetResolver | None = None) -> DocumentComposer:
    return DocumentComposer(resolver or AssetResolver(), clock=lambda: 1700000000.0)


def _page_texts(content: bytes) -> list[str]:
    """Per-page text in drawing order, whitespace removed."""
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return ["".join(char["text"] for char in page.chars if not char["text"].isspace())
                for page in pdf.pages]


def _image_counts(content: bytes) -> list[int]:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return [len(page.images) for page in pdf.pages]


def _word_box(content: bytes, text: str) -> tuple[float, float]:
    """``(x0, x1)`` of the first word on page one equal to ``text``."""
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        page = pdf.pages[0]
        word = next(w for w in page.extract_words() if w["text"] == text)
        return word["x0"], word["x1"]


def _many_rows(count: int) -> ExtractedRecord:
    return ExtractedRecord(
        product_name="Bulk Reagent",
        lot_no="LOT-40",
        specifications=tuple(
            SpecificationRow(parameter=f"Param {i:02d}", specification="<= 0.5%", result="0.1%")
            for i in range(count)
        ),
    )


def _unreachable_resolver() -> AssetResolver:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return AssetResolver(http_client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestSodiumChlorideScenario:
    def test_single_page_certificate(self, sodium_chloride_record: ExtractedRecord) -> None:
        document = _composer().compose(sodium_chloride_record, BrandingProfile(), FREE)
        assert document.page_count == 1
        assert document.rows_rendered == 1
        assert document.filename == "Sodium-Chloride_L123_COA.pdf"

        (text,) = _page_texts(document.content)
        assert "CertificateofAnalysis" in text
        assert "ProductName:SodiumChloride" in text
        assert "LOTNO:L123" in text
        assert TABLE_HEADER + "PURITY>=99%99.5%" in text
        assert WATERMARK in text

    def test_modern_layout_left_aligns_header(self, sodium_chloride_record: ExtractedRecord) -> None:
        branding = BrandingProfile(name="Acme", layout="modern")
        document = _composer().compose(sodium_chloride_record, branding, FREE)
        assert document.page_count == 1
        assert document.filename == "Acme_Sodium-Chloride_L123_COA.pdf"

        x0, _ = _word_box(document.content, "Acme")
        assert x0 == pytest.approx(DocumentComposer.MARGIN)
        (text,) = _page_texts(document.content)
        assert TABLE_HEADER + "PURITY>=99%99.5%" in text
        assert WATERMARK in text

    def test_output_is_idempotent(self, sodium_chloride_record: ExtractedRecord, png_bytes: bytes) -> None:
        branding = BrandingProfile(name="Acme Labs", address="1 Main St", logo=png_bytes)
        first = _composer().compose(sodium_chloride_record, branding, FREE)
        second = _composer().compose(sodium_chloride_record, branding, FREE)
        assert first.content == second.content
        assert first.filename == second.filename


class TestPagination:
    def test_every_row_rendered_with_header_on_each_page(self) -> None:
        document = _composer().compose(_many_rows(40), BrandingProfile(name="Acme"), ONE_TIME)
        texts = _page_texts(document.content)

        assert document.rows_rendered == 40
        assert document.page_count >= 2
        assert len(texts) == document.page_count
        assert all(TABLE_HEADER in text for text in texts)
        combined = "".join(texts)
        for i in range(40):
            assert combined.count(f"PARAM{i:02d}") == 1

    def test_watermark_repeats_on_continuation_pages(self) -> None:
        document = _composer().compose(_many_rows(40), BrandingProfile(), FREE)
        texts = _page_texts(document.content)
        assert len(texts) >= 2
        assert all(WATERMARK in text for text in texts)

    def test_no_trailing_empty_page(self) -> None:
        document = _composer().compose(_many_rows(40), BrandingProfile(), ONE_TIME)
        assert "PARAM39" in _page_texts(document.content)[-1]


class TestWatermark:
    @pytest.mark.parametrize("entitlement", [ONE_TIME, SUBSCRIPTION])
    def test_paid_downloads_are_clean(self, entitlement: EntitlementDecision) -> None:
        document = _composer().compose(_many_rows(40), BrandingProfile(), entitlement)
        assert all(WATERMARK not in text for text in _page_texts(document.content))

    def test_custom_watermark_text(self, sodium_chloride_record: ExtractedRecord) -> None:
        composer = DocumentComposer(AssetResolver(), watermark_text="DRAFT COPY")
        document = composer.compose(sodium_chloride_record, BrandingProfile(), FREE)
        (text,) = _page_texts(document.content)
        assert "DRAFTCOPY" in text
        assert WATERMARK not in text


class TestHeader:
    def test_branding_header_shows_company(self, sodium_chloride_record: ExtractedRecord, png_bytes: bytes) -> None:
        branding = BrandingProfile(name="Acme Labs", address="1 Main St\nSpringfield", logo=png_bytes)
        document = _composer().compose(sodium_chloride_record, branding, ONE_TIME)
        (text,) = _page_texts(document.content)
        assert "AcmeLabs" in text
        assert "1MainStSpringfield" in text
        assert _image_counts(document.content) == [1]

    def test_custom_header_replaces_branding_block(
        self, sodium_chloride_record: ExtractedRecord, png_bytes: bytes
    ) -> None:
        branding = BrandingProfile(name="Acme Labs", logo=png_bytes, custom_background=png_bytes)
        document = _composer().compose(sodium_chloride_record, branding, SUBSCRIPTION)
        (text,) = _page_texts(document.content)
        assert "AcmeLabs" not in text
        assert "CertificateofAnalysis" in text
        assert _image_counts(document.content) == [1]

    def test_custom_header_requires_entitlement(
        self, sodium_chloride_record: ExtractedRecord, png_bytes: bytes
    ) -> None:
        branding = BrandingProfile(name="Acme Labs", custom_background=png_bytes)
        document = _composer().compose(sodium_chloride_record, branding, ONE_TIME)
        (text,) = _page_texts(document.content)
        assert "AcmeLabs" in text
        assert _image_counts(document.content) == [0]

    def test_failed_custom_header_falls_back_to_branding(
        self, sodium_chloride_record: ExtractedRecord
    ) -> None:
        branding = BrandingProfile(
            name="Acme Labs",
            custom_background="https://cdn.example.com/banner.png",
        )
        document = _composer(_unreachable_resolver()).compose(
            sodium_chloride_record, branding, SUBSCRIPTION
        )
        (text,) = _page_texts(document.content)
        assert "AcmeLabs" in text

    def test_unreachable_logo_still_renders(self, sodium_chloride_record: ExtractedRecord) -> None:
        branding = BrandingProfile(name="Acme Labs", logo="https://unreachable.example.com/logo.png")
        document = _composer(_unreachable_resolver()).compose(
            sodium_chloride_record, branding, FREE
        )
        assert document.page_count == 1
        assert _image_counts(document.content) == [0]
        (text,) = _page_texts(document.content)
        assert "AcmeLabs" in text
        assert TABLE_HEADER in text


class TestLayouts:
    @pytest.mark.parametrize("layout", ["classic", "modern", "minimal", "unknown", None])
    def test_each_layout_renders(self, layout: str | None, sodium_chloride_record: ExtractedRecord) -> None:
        branding = BrandingProfile(name="Acme Labs", layout=layout)
        document = _composer().compose(sodium_chloride_record, branding, ONE_TIME)
        (text,) = _page_texts(document.content)
        assert TABLE_HEADER in text

    def test_classic_layout_centres_header(self, sodium_chloride_record: ExtractedRecord) -> None:
        branding = BrandingProfile(name="Acme", layout="classic")
        document = _composer().compose(sodium_chloride_record, branding, ONE_TIME)
        x0, x1 = _word_box(document.content, "Acme")
        page_width, _ = A4
        assert x0 > DocumentComposer.MARGIN
        assert (x0 + x1) / 2 == pytest.approx(page_width / 2, abs=0.5)

    def test_fallback_table_from_scalar_fields(self) -> None:
        record = ExtractedRecord.from_dict({"productName": "Glycerol", "casNo": "56-81-5", "purity": "99.7%"})
        document = _composer().compose(record, BrandingProfile(), ONE_TIME)
        (text,) = _page_texts(document.content)
        assert "CASNO-56-81-5" in text
        assert "PURITY-99.7%" in text
        assert document.rows_rendered == 2

    def test_overlong_values_stay_on_one_page(self) -> None:
        record = ExtractedRecord(
            product_name="X" * 500,
            supplier="Y" * 500,
            specifications=(SpecificationRow(parameter="Z" * 500, specification="W" * 500),),
        )
        document = _composer().compose(record, BrandingProfile(address="A" * 500), ONE_TIME)
        assert document.page_count == 1
        assert document.rows_rendered == 1

    def test_missing_product_name(self) -> None:
        document = _composer().compose(ExtractedRecord(), BrandingProfile(), ONE_TIME)
        (text,) = _page_texts(document.content)
        assert "ProductNameNotFound" in text
        assert "PRODUCTINFORMATION-Seeabove" in text
        assert document.filename.startswith("COA_")
