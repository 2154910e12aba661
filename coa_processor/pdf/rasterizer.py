import base64

import pymupdf

from coa_processor.logging.logger import Log
from coa_processor.pdf.exceptions import PdfExtractionError


class PageRasterizer:
    """Renders PDF pages to base64 PNG for vision-model extraction."""

    def __init__(self, max_pages: int = 5, dpi: int = 150) -> None:
        self._max_pages = max_pages
        self._dpi = dpi

    def render(self, pdf_bytes: bytes) -> list[str]:
        """Return one base64 PNG per page, up to ``max_pages``.

        Raises:
            PdfExtractionError: if the document cannot be opened or rendered.
        """
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                images = [
                    base64.b64encode(page.get_pixmap(dpi=self._dpi).tobytes("png")).decode("ascii")
                    for index, page in enumerate(doc)
                    if index < self._max_pages
                ]
        except Exception as exc:
            raise PdfExtractionError(f"page rendering failed: {exc}") from exc
        Log.info(f"Rasterized {len(images)} page(s) for vision extraction")
        return images
