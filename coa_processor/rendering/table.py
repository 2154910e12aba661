"""Specification table: row selection, value splitting and paginated drawing."""

from dataclasses import dataclass
from typing import ClassVar

from reportlab.lib import colors
from reportlab.pdfgen.canvas import Canvas

from coa_processor.logging.logger import Log
from coa_processor.rendering.models import ExtractedRecord, RenderGeometry, SpecificationRow
from coa_processor.rendering.page_flow import PageFlowController
from coa_processor.rendering.text import clean_text, ellipsize, format_field_label
from coa_processor.rendering.themes import ThemeColors

PLACEHOLDER = "-"


@dataclass(frozen=True)
class TableRow:
    item: str
    standard: str
    result: str
    font_size: float = 8.5


def split_standard_result(specification: str | None, result: str | None) -> tuple[str, str]:
    """Resolve the Standard/Result pair for one specification entry.

    An explicit ``result`` always wins. Otherwise ``specification`` is read as
    the legacy ``"standard | result"`` encoding: one part is a standard with no
    result, two parts map directly, more parts are halved at the midpoint.
    """
    if result and result.strip():
        return (specification or "").strip() or PLACEHOLDER, result.strip()

    parts = [part.strip() for part in (specification or "").split("|") if part.strip()]
    if not parts:
        return PLACEHOLDER, PLACEHOLDER
    if len(parts) == 1:
        return parts[0], PLACEHOLDER
    if len(parts) == 2:
        return parts[0], parts[1]
    mid = len(parts) // 2
    return " ".join(parts[:mid]), " ".join(parts[mid:])


def specification_rows(specs: tuple[SpecificationRow, ...]) -> list[TableRow]:
    rows: list[TableRow] = []
    for spec in specs:
        standard, result = split_standard_result(spec.specification, spec.result)
        rows.append(
            TableRow(
                item=clean_text(spec.parameter).upper() or PLACEHOLDER,
                standard=clean_text(standard),
                result=clean_text(result),
            )
        )
    return rows


class TableRenderer:
    """Draws the Item / Standard / Result table through the page flow."""

    COLUMN_RATIOS: ClassVar[tuple[float, float, float]] = (0.35, 0.325, 0.325)
    COLUMN_LABELS: ClassVar[tuple[str, str, str]] = ("Item", "Standard", "Result")
    HEADER_HEIGHT: ClassVar[float] = 32.0
    ROW_HEIGHT: ClassVar[float] = 28.0
    CELL_PADDING: ClassVar[float] = 10.0
    HEADER_FONT: ClassVar[str] = "Helvetica-Bold"
    BODY_FONT: ClassVar[str] = "Helvetica"

    # shown elsewhere on the page, or internal to the extractor
    FALLBACK_EXCLUDED: ClassVar[frozenset[str]] = frozenset(
        {"productName", "supplier", "fullText", "_metadata", "additionalInfo"}
    )

    def __init__(
        self,
        canvas: Canvas,
        flow: PageFlowController,
        left: float,
        width: float,
    ) -> None:
        self._canvas = canvas
        self._flow = flow
        self._left = left
        self._widths = tuple(width * ratio for ratio in self.COLUMN_RATIOS)
        self._width = width

    @classmethod
    def build_rows(cls, record: ExtractedRecord) -> list[TableRow]:
        """Specification rows, or pseudo-rows from scalar fields when there are none."""
        if record.specifications:
            return specification_rows(record.specifications)

        rows: list[TableRow] = []
        for key, value in record.scalar_items():
            if key in cls.FALLBACK_EXCLUDED or not value:
                continue
            if isinstance(value, (dict, list, tuple, set)):
                continue
            rows.append(
                TableRow(
                    item=clean_text(format_field_label(key)).upper(),
                    standard=PLACEHOLDER,
                    result=clean_text(value),
                    font_size=9,
                )
            )
        if not rows:
            rows.append(
                TableRow(
                    item="PRODUCT INFORMATION",
                    standard=PLACEHOLDER,
                    result="See above",
                    font_size=9,
                )
            )
        return rows

    def render(
        self,
        rows: list[TableRow],
        geometry: RenderGeometry,
        theme: ThemeColors,
    ) -> int:
        """Draw header and rows; returns the number of rows laid out."""
        self._draw_header(geometry, theme)
        self._flow.set_repeat_on_break(lambda: self._draw_header(geometry, theme))
        rendered = 0
        try:
            for index, row in enumerate(rows):
                y = self._flow.reserve(self.ROW_HEIGHT)
                try:
                    self._draw_row(row, y, geometry, theme)
                except Exception as exc:  # noqa: BLE001
                    Log.warning(f"Row {index + 1} could not be drawn: {exc}")
                rendered += 1
        finally:
            self._flow.set_repeat_on_break(None)
        Log.info(f"Rendered {rendered} table rows across {self._flow.page_count} page(s)")
        return rendered

    def _draw_header(self, geometry: RenderGeometry, theme: ThemeColors) -> None:
        y = self._flow.reserve(self.HEADER_HEIGHT)
        c = self._canvas
        primary = colors.HexColor(theme.primary)
        bottom = self._flow.to_pdf_y(y + self.HEADER_HEIGHT)

        c.saveState()
        c.setLineWidth(geometry.table_border_width)
        c.setStrokeColor(primary)
        if geometry.table_header_fill == "filled":
            c.setFillColor(primary)
            c.rect(self._left, bottom, self._width, self.HEADER_HEIGHT, stroke=1, fill=1)
            c.setFillColor(colors.white)
        else:
            c.rect(self._left, bottom, self._width, self.HEADER_HEIGHT, stroke=1, fill=0)
            c.setFillColor(primary)

        c.setFont(self.HEADER_FONT, 11)
        baseline = self._flow.to_pdf_y(y + self.HEADER_HEIGHT / 2 + 11 * 0.35)
        x = self._left
        for label, col_width in zip(self.COLUMN_LABELS, self._widths):
            c.drawCentredString(x + col_width / 2, baseline, label)
            x += col_width
        c.restoreState()

    def _draw_row(
        self,
        row: TableRow,
        y: float,
        geometry: RenderGeometry,
        theme: ThemeColors,
    ) -> None:
        c = self._canvas
        bottom = self._flow.to_pdf_y(y + self.ROW_HEIGHT)
        baseline = self._flow.to_pdf_y(y + self.ROW_HEIGHT / 2 + row.font_size * 0.35)

        c.saveState()
        try:
            self._draw_cells(row, bottom, baseline, theme, geometry)
        finally:
            c.restoreState()

    def _draw_cells(
        self,
        row: TableRow,
        bottom: float,
        baseline: float,
        theme: ThemeColors,
        geometry: RenderGeometry,
    ) -> None:
        c = self._canvas
        c.setLineWidth(geometry.table_border_width)
        c.setStrokeColor(colors.HexColor(theme.primary))
        x = self._left
        for col_width in self._widths:
            c.rect(x, bottom, col_width, self.ROW_HEIGHT, stroke=1, fill=0)
            x += col_width

        c.setFillColor(colors.black)
        c.setFont(self.BODY_FONT, row.font_size)
        item_w, standard_w, result_w = self._widths
        inner = 2 * self.CELL_PADDING
        c.drawString(
            self._left + self.CELL_PADDING,
            baseline,
            self._fit(row.item, row.font_size, item_w - inner),
        )
        c.drawCentredString(
            self._left + item_w + standard_w / 2,
            baseline,
            self._fit(row.standard, row.font_size, standard_w - inner),
        )
        c.drawCentredString(
            self._left + item_w + standard_w + result_w / 2,
            baseline,
            self._fit(row.result, row.font_size, result_w - inner),
        )

    def _fit(self, text: str, font_size: float, max_width: float) -> str:
        return ellipsize(text, self.BODY_FONT, font_size, max_width)
