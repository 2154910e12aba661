import re
import time
from collections.abc import Callable

from coa_processor.rendering.models import BrandingProfile, ExtractedRecord

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

COMPANY_MAX_LENGTH = 15
PRODUCT_MAX_LENGTH = 25
LOT_MAX_LENGTH = 15


def sanitize_component(text: str | None, max_length: int) -> str:
    """Reduce free text to ``[A-Za-z0-9-]``, hyphenated and capped."""
    if not text:
        return ""
    cleaned = _UNSAFE_RE.sub("", text).strip()
    cleaned = _WHITESPACE_RE.sub("-", cleaned)
    return cleaned[:max_length].strip("-")


def to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def derive_filename(
    record: ExtractedRecord,
    branding: BrandingProfile,
    clock: Callable[[], float] = time.time,
) -> str:
    """``Company_Product_Lot_COA.pdf``; ``COA_<id>.pdf`` when nothing usable is left."""
    parts = [
        sanitize_component(branding.name, COMPANY_MAX_LENGTH),
        sanitize_component(record.product_name, PRODUCT_MAX_LENGTH),
        sanitize_component(record.lot_no or record.batch_no, LOT_MAX_LENGTH),
    ]
    parts = [part for part in parts if part]
    if not parts:
        return f"COA_{to_base36(int(clock() * 1000))}.pdf"
    return "_".join([*parts, "COA"]) + ".pdf"
