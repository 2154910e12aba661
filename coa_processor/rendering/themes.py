import re
from dataclasses import dataclass

from coa_processor.rendering.models import Theme

_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class ThemeColors:
    primary: str
    secondary: str


THEME_PRESETS: dict[str, ThemeColors] = {
    "navy-green": ThemeColors(primary="#1A376B", secondary="#568259"),
    "ocean-teal": ThemeColors(primary="#0B4F6C", secondary="#20A39E"),
    "crimson-slate": ThemeColors(primary="#8B1E3F", secondary="#4A5568"),
    "forest-gold": ThemeColors(primary="#1F4D2B", secondary="#C9A227"),
    "royal-purple": ThemeColors(primary="#4B2882", secondary="#9F7AEA"),
    "charcoal-orange": ThemeColors(primary="#2D3142", secondary="#EF8354"),
}

DEFAULT_THEME_ID = "navy-green"


def resolve_theme(theme: Theme | None) -> ThemeColors:
    """Pick concrete colours: valid custom hex, then preset id, then default."""
    if theme is None:
        return THEME_PRESETS[DEFAULT_THEME_ID]
    base = THEME_PRESETS.get((theme.id or "").lower(), THEME_PRESETS[DEFAULT_THEME_ID])
    return ThemeColors(
        primary=_valid_hex(theme.primary_color) or base.primary,
        secondary=_valid_hex(theme.secondary_color) or base.secondary,
    )


def _valid_hex(value: str | None) -> str | None:
    if value and _HEX_RE.match(value):
        return value.upper()
    return None
