"""Top-level certificate layout.

Draw order is fixed: watermark, header (custom banner or branding block),
title and metadata, table. The document is saved straight after the table so
no trailing footer can open an empty final page.
"""

import io
import time
from collections.abc import Callable
from typing import ClassVar

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen.canvas import Canvas

from coa_processor.logging.logger import Log
from coa_processor.rendering.assets import AssetResolver, scale_to_fit
from coa_processor.rendering.filename import derive_filename
from coa_processor.rendering.layout import LayoutEngine
from coa_processor.rendering.models import (
    Alignment,
    BrandingProfile,
    EntitlementDecision,
    ExtractedRecord,
    RenderedDocument,
    RenderGeometry,
    ResolvedAsset,
)
from coa_processor.rendering.page_flow import TOP_MARGIN, PageFlowController
from coa_processor.rendering.table import TableRenderer
from coa_processor.rendering.text import clean_text, ellipsize, truncate
from coa_processor.rendering.themes import ThemeColors, resolve_theme

DEFAULT_WATERMARK_TEXT = "COA Processor - Free Version"


class DocumentComposer:
    """Lays out one certificate from extracted data, branding and entitlement."""

    MARGIN: ClassVar[float] = 50.0
    TITLE: ClassVar[str] = "Certificate of Analysis"
    PRODUCT_NOT_FOUND: ClassVar[str] = "Product Name Not Found"
    LOGO_MAX_SIZE: ClassVar[tuple[float, float]] = (150.0, 80.0)
    CUSTOM_HEADER_MAX_HEIGHT: ClassVar[float] = 120.0
    # (x, y) as fractions of the page, measured from the top-left corner
    WATERMARK_POSITIONS: ClassVar[tuple[tuple[float, float], ...]] = (
        (0.3, 0.3),
        (0.5, 0.5),
        (0.7, 0.7),
    )
    TEXT_COLOR: ClassVar[str] = "#333333"

    def __init__(
        self,
        asset_resolver: AssetResolver,
        watermark_text: str = DEFAULT_WATERMARK_TEXT,
        clock: Callable[[], float] = time.time,
        page_size: tuple[float, float] = A4,
    ) -> None:
        self._assets = asset_resolver
        self._watermark_text = watermark_text
        self._clock = clock
        self._page_width, self._page_height = page_size

    @property
    def content_width(self) -> float:
        return self._page_width - 2 * self.MARGIN

    def compose(
        self,
        record: ExtractedRecord,
        branding: BrandingProfile,
        entitlement: EntitlementDecision,
    ) -> RenderedDocument:
        filename = derive_filename(record, branding, self._clock)
        theme = resolve_theme(branding.theme)
        geometry = LayoutEngine.resolve(branding.layout)
        Log.info(
            "Composing certificate",
            filename=filename,
            layout=branding.layout or LayoutEngine.DEFAULT_LAYOUT,
            watermarked=entitlement.watermarked,
        )

        buffer = io.BytesIO()
        canvas = Canvas(
            buffer,
            pagesize=(self._page_width, self._page_height),
            invariant=1,
        )
        canvas.setTitle(self.TITLE)
        canvas.setCreator("COA Processor")
        flow = PageFlowController(canvas, self._page_height)

        if entitlement.watermarked:
            self._draw_watermark(canvas)
            flow.add_page_start_hook(lambda: self._draw_watermark(canvas))

        if not self._draw_custom_header(canvas, flow, branding, entitlement):
            self._draw_branding_header(canvas, flow, branding, geometry, theme)

        self._draw_title_block(canvas, flow, record, geometry, theme)

        table = TableRenderer(canvas, flow, self.MARGIN, self.content_width)
        rows_rendered = table.render(TableRenderer.build_rows(record), geometry, theme)

        page_count = flow.page_count
        canvas.save()
        content = buffer.getvalue()
        Log.info(
            f"Certificate composed: {page_count} page(s), {len(content)} bytes",
            filename=filename,
        )
        return RenderedDocument(
            content=content,
            filename=filename,
            page_count=page_count,
            rows_rendered=rows_rendered,
        )

    def _draw_watermark(self, canvas: Canvas) -> None:
        canvas.saveState()
        canvas.setFillColor(colors.HexColor("#999999"))
        canvas.setFillAlpha(0.25)
        canvas.setFont("Helvetica-Bold", 24)
        for fx, fy in self.WATERMARK_POSITIONS:
            canvas.saveState()
            canvas.translate(self._page_width * fx, self._page_height * (1 - fy))
            canvas.rotate(45)
            canvas.drawCentredString(0, 0, self._watermark_text)
            canvas.restoreState()
        canvas.restoreState()

    def _draw_custom_header(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        branding: BrandingProfile,
        entitlement: EntitlementDecision,
    ) -> bool:
        """Draw the Pro header banner in place of the branding block.

        Returns False when the caller must fall back to the branding block.
        """
        if not (entitlement.use_custom_header and branding.custom_background):
            return False
        asset = self._assets.resolve(branding.custom_background)
        if asset is None:
            Log.warning("Custom header unavailable, using branding header")
            return False

        width, height = scale_to_fit(
            asset.width,
            asset.height,
            self.content_width,
            self.CUSTOM_HEADER_MAX_HEIGHT,
            upscale=True,
        )
        x = (self._page_width - width) / 2
        if not self._draw_image(canvas, flow, asset, x, TOP_MARGIN, width, height):
            return False
        flow.move_to(TOP_MARGIN + height + 15)
        return True

    def _draw_branding_header(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        branding: BrandingProfile,
        geometry: RenderGeometry,
        theme: ThemeColors,
    ) -> None:
        canvas.saveState()
        if geometry.header_style == "banner":
            canvas.setFillColor(colors.HexColor(theme.secondary))
            canvas.rect(0, self._page_height - 40, self._page_width, 40, stroke=0, fill=1)
            flow.move_to(60)
        elif geometry.header_style == "minimal":
            canvas.setFillColor(colors.HexColor(theme.secondary))
            canvas.rect(0, self._page_height - 8, self._page_width, 8, stroke=0, fill=1)
            canvas.setFillColor(colors.HexColor(theme.primary))
            canvas.rect(0, self._page_height - 11, self._page_width, 3, stroke=0, fill=1)
            flow.move_to(30)
        else:
            flow.move_to(30)
        canvas.restoreState()

        logo_height = self._draw_logo(canvas, flow, branding, geometry)
        flow.advance(logo_height + 10 if logo_height else 20)

        if branding.name:
            self._draw_line(
                canvas, flow, branding.name, "Helvetica-Bold", 14, theme.primary,
                geometry.text_align,
            )
            flow.advance(20)

        if branding.address:
            address_height = self._draw_paragraph(
                canvas, flow, branding.address, "Helvetica", 9, self.TEXT_COLOR,
                geometry.text_align,
            )
            flow.advance(address_height + 10)

    def _draw_logo(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        branding: BrandingProfile,
        geometry: RenderGeometry,
    ) -> float:
        if not branding.logo:
            return 0.0
        asset = self._assets.resolve(branding.logo)
        if asset is None:
            return 0.0
        max_width, max_height = self.LOGO_MAX_SIZE
        width, height = scale_to_fit(asset.width, asset.height, max_width, max_height)
        if geometry.logo_align == "left":
            x = self.MARGIN
        else:
            x = (self._page_width - width) / 2
        if not self._draw_image(canvas, flow, asset, x, flow.cursor.y, width, height):
            return 0.0
        return height

    def _draw_image(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        asset: ResolvedAsset,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> bool:
        try:
            image = ImageReader(io.BytesIO(asset.data))
            canvas.drawImage(
                image, x, flow.to_pdf_y(y + height), width=width, height=height, mask="auto"
            )
        except Exception as exc:  # noqa: BLE001
            Log.warning(f"Image could not be placed: {exc}")
            return False
        return True

    def _draw_title_block(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        record: ExtractedRecord,
        geometry: RenderGeometry,
        theme: ThemeColors,
    ) -> None:
        flow.advance(10)
        self._draw_line(
            canvas, flow, self.TITLE, "Helvetica-Bold", 20, theme.primary, geometry.text_align
        )
        flow.advance(30)

        product = truncate(record.product_name, 70) if record.product_name else self.PRODUCT_NOT_FOUND
        self._draw_line(
            canvas, flow, f"Product Name: {product}", "Helvetica-Bold", 12, theme.primary,
            geometry.text_align,
        )
        flow.advance(20)

        info: list[str] = []
        if record.lot_no:
            info.append(f"LOT NO: {truncate(record.lot_no, 25)}")
        elif record.batch_no:
            info.append(f"BATCH NO: {truncate(record.batch_no, 25)}")
        if record.date:
            info.append(f"DATE: {truncate(record.date, 25)}")
        if info:
            self._draw_line(canvas, flow, "  |  ".join(info), "Helvetica", 8, "#000000", "center")
            flow.advance(12)

        if record.supplier:
            self._draw_line(
                canvas, flow, f"Supplier: {truncate(record.supplier, 70)}", "Helvetica", 7.5,
                "#000000", "center",
            )
            flow.advance(10)

        flow.advance(5)

    def _draw_line(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        text: str,
        font_name: str,
        font_size: float,
        color: str,
        align: Alignment,
    ) -> None:
        line = ellipsize(clean_text(text), font_name, font_size, self.content_width)
        baseline = flow.to_pdf_y(flow.cursor.y + font_size * 0.8)
        canvas.saveState()
        canvas.setFont(font_name, font_size)
        canvas.setFillColor(colors.HexColor(color))
        if align == "center":
            canvas.drawCentredString(self._page_width / 2, baseline, line)
        else:
            canvas.drawString(self.MARGIN, baseline, line)
        canvas.restoreState()

    def _draw_paragraph(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        text: str,
        font_name: str,
        font_size: float,
        color: str,
        align: Alignment,
    ) -> float:
        """Draw wrapped text at the cursor; returns the measured height."""
        leading = font_size * 1.2
        lines: list[str] = []
        for raw_line in text.splitlines():
            cleaned = clean_text(raw_line).strip()
            if cleaned:
                lines.extend(
                    ellipsize(part, font_name, font_size, self.content_width)
                    for part in simpleSplit(cleaned, font_name, font_size, self.content_width)
                )
        if not lines:
            return 0.0

        canvas.saveState()
        canvas.setFont(font_name, font_size)
        canvas.setFillColor(colors.HexColor(color))
        top = flow.cursor.y
        for index, line in enumerate(lines):
            baseline = flow.to_pdf_y(top + index * leading + font_size * 0.8)
            if align == "center":
                canvas.drawCentredString(self._page_width / 2, baseline, line)
            else:
                canvas.drawString(self.MARGIN, baseline, line)
        canvas.restoreState()
        return len(lines) * leading
