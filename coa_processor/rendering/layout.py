from typing import ClassVar

from coa_processor.rendering.models import RenderGeometry


class LayoutEngine:
    """Maps a layout id to its fixed geometry. Unknown ids fall back to classic."""

    DEFAULT_LAYOUT: ClassVar[str] = "classic"

    LAYOUTS: ClassVar[dict[str, RenderGeometry]] = {
        # full-width top banner, centred, bold borders
        "classic": RenderGeometry(
            header_style="banner",
            logo_align="center",
            text_align="center",
            table_border_width=2.0,
            table_header_fill="filled",
        ),
        # thin accent line, left-aligned
        "modern": RenderGeometry(
            header_style="minimal",
            logo_align="left",
            text_align="left",
            table_border_width=1.0,
            table_header_fill="filled",
        ),
        # no decoration, outlined table header
        "minimal": RenderGeometry(
            header_style="none",
            logo_align="center",
            text_align="center",
            table_border_width=0.5,
            table_header_fill="outline",
        ),
    }

    @classmethod
    def resolve(cls, layout_id: str | None) -> RenderGeometry:
        key = (layout_id or "").strip().lower()
        return cls.LAYOUTS.get(key, cls.LAYOUTS[cls.DEFAULT_LAYOUT])
