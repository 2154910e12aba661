import pytest

from coa_processor.rendering.layout import LayoutEngine
from coa_processor.rendering.models import Theme
from coa_processor.rendering.themes import DEFAULT_THEME_ID, THEME_PRESETS, resolve_theme


class TestLayoutEngine:
    def test_classic_geometry(self) -> None:
        geometry = LayoutEngine.resolve("classic")
        assert geometry.header_style == "banner"
        assert geometry.logo_align == "center"
        assert geometry.table_border_width == 2.0
        assert geometry.table_header_fill == "filled"

    def test_modern_geometry(self) -> None:
        geometry = LayoutEngine.resolve("modern")
        assert geometry.header_style == "minimal"
        assert geometry.logo_align == "left"
        assert geometry.text_align == "left"
        assert geometry.table_border_width == 1.0

    def test_minimal_geometry(self) -> None:
        geometry = LayoutEngine.resolve("minimal")
        assert geometry.header_style == "none"
        assert geometry.table_border_width == 0.5
        assert geometry.table_header_fill == "outline"

    @pytest.mark.parametrize("layout_id", [None, "", "fancy", "  "])
    def test_unknown_layout_falls_back_to_classic(self, layout_id: str | None) -> None:
        assert LayoutEngine.resolve(layout_id) == LayoutEngine.LAYOUTS["classic"]

    def test_is_case_insensitive(self) -> None:
        assert LayoutEngine.resolve(" Modern ") == LayoutEngine.LAYOUTS["modern"]


class TestResolveTheme:
    def test_default_theme(self) -> None:
        colors = resolve_theme(None)
        assert colors == THEME_PRESETS[DEFAULT_THEME_ID]
        assert colors.primary == "#1A376B"
        assert colors.secondary == "#568259"

    def test_preset_by_id(self) -> None:
        assert resolve_theme(Theme(id="ocean-teal")) == THEME_PRESETS["ocean-teal"]

    def test_unknown_preset_uses_default(self) -> None:
        assert resolve_theme(Theme(id="neon")) == THEME_PRESETS[DEFAULT_THEME_ID]

    def test_custom_colors_override_preset(self) -> None:
        colors = resolve_theme(Theme(id="ocean-teal", primary_color="#ff0000"))
        assert colors.primary == "#FF0000"
        assert colors.secondary == THEME_PRESETS["ocean-teal"].secondary

    def test_invalid_hex_is_ignored(self) -> None:
        colors = resolve_theme(Theme(primary_color="red", secondary_color="#12345"))
        assert colors == THEME_PRESETS[DEFAULT_THEME_ID]

    def test_theme_from_profile_value(self) -> None:
        theme = Theme.from_value({"id": "custom", "primaryColor": "#112233", "secondaryColor": "#445566"})
        colors = resolve_theme(theme)
        assert (colors.primary, colors.secondary) == ("#112233", "#445566")
