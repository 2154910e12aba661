"""Display-text sanitising for the standard PDF fonts."""

import re

from reportlab.pdfbase.pdfmetrics import stringWidth

ELLIPSIS = "..."

# the standard Type 1 fonts lack these glyphs
_GLYPH_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("≤", "<="),
    ("≥", ">="),
    ("℃", "degC"),
    ("±", "+/-"),
    ("°", " deg"),
)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")
_WHITESPACE_RE = re.compile(r"[\t\r\n]+")
_CAMEL_RE = re.compile(r"([A-Z])")


def normalize_glyphs(text: str) -> str:
    for source, target in _GLYPH_REPLACEMENTS:
        text = text.replace(source, target)
    return text


def clean_text(value: object) -> str:
    """Make untrusted text safe to draw on a single line with a WinAnsi font."""
    if value is None:
        return ""
    text = normalize_glyphs(str(value))
    text = _WHITESPACE_RE.sub(" ", text)
    text = _CONTROL_RE.sub("", text)
    return text.encode("cp1252", errors="replace").decode("cp1252")


def truncate(value: object, max_length: int = 50) -> str:
    """Character-count truncation with a trailing ellipsis."""
    if value is None:
        return ""
    text = str(value)
    if len(text) > max_length:
        return text[:max_length] + ELLIPSIS
    return text


def ellipsize(text: str, font_name: str, font_size: float, max_width: float) -> str:
    """Shorten ``text`` until it fits ``max_width`` points, ending in an ellipsis."""
    if stringWidth(text, font_name, font_size) <= max_width:
        return text
    low, high = 0, len(text)
    while low < high:
        mid = (low + high + 1) // 2
        candidate = text[:mid].rstrip() + ELLIPSIS
        if stringWidth(candidate, font_name, font_size) <= max_width:
            low = mid
        else:
            high = mid - 1
    if low == 0:
        return ""
    return text[:low].rstrip() + ELLIPSIS


def format_field_label(key: str) -> str:
    """``supplierAddress`` -> ``Supplier Address``."""
    spaced = _CAMEL_RE.sub(r" \1", key).strip()
    if not spaced:
        return spaced
    return spaced[0].upper() + spaced[1:]
