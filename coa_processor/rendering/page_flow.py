"""Vertical cursor and page-break control for one render.

Positions are measured top-down from the upper page edge, the way the
layout constants are written; ``to_pdf_y`` converts to ReportLab's bottom-up space.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from reportlab.pdfgen.canvas import Canvas

from coa_processor.logging.logger import Log

TOP_MARGIN = 50.0
BOTTOM_MARGIN = 60.0

PageHook = Callable[[], None]


class FlowState(Enum):
    WITHIN_PAGE = "within_page"
    JUST_BROKE = "just_broke"


@dataclass
class PageCursor:
    y: float
    page_index: int = 0


class PageFlowController:
    """Owns the write cursor and page count of a single document."""

    def __init__(
        self,
        canvas: Canvas,
        page_height: float,
        top_margin: float = TOP_MARGIN,
        bottom_margin: float = BOTTOM_MARGIN,
    ) -> None:
        self._canvas = canvas
        self._page_height = page_height
        self._top_margin = top_margin
        self._bottom_margin = bottom_margin
        self._page_start_hooks: list[PageHook] = []
        self._repeat_on_break: PageHook | None = None
        self.cursor = PageCursor(y=top_margin)
        self.state = FlowState.WITHIN_PAGE

    @property
    def threshold(self) -> float:
        return self._page_height - self._bottom_margin

    @property
    def page_count(self) -> int:
        return self.cursor.page_index + 1

    def add_page_start_hook(self, hook: PageHook) -> None:
        """Run ``hook`` on every page opened by a break, before repeated chrome."""
        self._page_start_hooks.append(hook)

    def set_repeat_on_break(self, callback: PageHook | None) -> None:
        """Register the chrome (e.g. table column headers) redrawn after a break."""
        self._repeat_on_break = callback

    def move_to(self, y: float) -> None:
        self.cursor.y = y

    def advance(self, height: float) -> None:
        self.cursor.y += height

    def reserve(self, height: float) -> float:
        """Claim ``height`` points; break first if they would cross the threshold.

        Returns the top of the claimed band. A request taller than a page is
        placed at the top of a fresh page rather than breaking again.
        """
        at_page_top = self.cursor.y <= self._top_margin
        if self.cursor.y + height > self.threshold and not at_page_top:
            self._break_page()
        y_start = self.cursor.y
        self.cursor.y += height
        return y_start

    def to_pdf_y(self, y: float) -> float:
        return self._page_height - y

    def _break_page(self) -> None:
        self._canvas.showPage()
        self.cursor = PageCursor(y=self._top_margin, page_index=self.cursor.page_index + 1)
        Log.debug(f"Page break, now on page {self.page_count}")
        self.state = FlowState.JUST_BROKE
        try:
            for hook in self._page_start_hooks:
                hook()
            if self._repeat_on_break is not None:
                self._repeat_on_break()
        finally:
            self.state = FlowState.WITHIN_PAGE
