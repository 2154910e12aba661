"""Domain models consumed and produced by the certificate renderer.

Everything in an ``ExtractedRecord`` comes from LLM output or user edits and
is treated as untrusted display text: values are coerced to strings and
length-bounded at ingest, and never interpreted as markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

MAX_FIELD_LENGTH = 500
MAX_KEY_LENGTH = 100

HeaderStyle = Literal["banner", "minimal", "none"]
Alignment = Literal["left", "center"]
HeaderFill = Literal["filled", "outline"]


def bounded_text(value: Any, limit: int = MAX_FIELD_LENGTH) -> str | None:
    """Coerce a scalar to a stripped, length-bounded string; blanks become None."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return None
    text = str(value).strip()
    if not text:
        return None
    return text[:limit]


@dataclass(frozen=True)
class SpecificationRow:
    """One test line of the certificate: parameter, standard and result."""

    parameter: str | None = None
    specification: str | None = None
    result: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SpecificationRow:
        return cls(
            parameter=bounded_text(raw.get("parameter", raw.get("item"))),
            specification=bounded_text(raw.get("specification")),
            result=bounded_text(raw.get("result")),
        )


@dataclass(frozen=True)
class ExtractedRecord:
    """Semi-structured output of the extraction step.

    Known scalar fields are optional; anything the extractor returned that is
    not recognised is kept, in order, in ``extra_fields`` when it is a scalar.
    ``additionalInfo`` is requested from the extractor but never displayed, so
    it is dropped here.
    """

    # (attribute, wire key) in display order
    SCALAR_FIELDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("product_name", "productName"),
        ("batch_no", "batchNo"),
        ("lot_no", "lotNo"),
        ("cas_no", "casNo"),
        ("date", "date"),
        ("expiry_date", "expiryDate"),
        ("purity", "purity"),
        ("appearance", "appearance"),
        ("supplier", "supplier"),
        ("supplier_address", "supplierAddress"),
    )

    product_name: str | None = None
    batch_no: str | None = None
    lot_no: str | None = None
    cas_no: str | None = None
    date: str | None = None
    expiry_date: str | None = None
    purity: str | None = None
    appearance: str | None = None
    supplier: str | None = None
    supplier_address: str | None = None
    specifications: tuple[SpecificationRow, ...] = ()
    extra_fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtractedRecord:
        """Build a record from the camelCase JSON shape returned by extraction."""
        known = {wire: attr for attr, wire in cls.SCALAR_FIELDS}
        scalars: dict[str, str | None] = {}
        extras: dict[str, str] = {}
        for key, value in data.items():
            if key in known:
                scalars[known[key]] = bounded_text(value)
            elif key in ("specifications", "additionalInfo"):
                continue
            else:
                label = bounded_text(key, MAX_KEY_LENGTH)
                text = bounded_text(value)
                if label is not None and text is not None:
                    extras[label] = text

        raw_specs = data.get("specifications") or []
        specs = tuple(
            SpecificationRow.from_dict(item)
            for item in (raw_specs if isinstance(raw_specs, list) else [])
            if isinstance(item, dict)
        )

        return cls(
            **scalars,
            specifications=specs,
            extra_fields=extras,
        )

    def scalar_items(self) -> list[tuple[str, Any]]:
        """Return ``(wire_key, value)`` for known fields then extra fields, in order."""
        items: list[tuple[str, Any]] = [
            (wire, getattr(self, attr)) for attr, wire in self.SCALAR_FIELDS
        ]
        items.extend(self.extra_fields.items())
        return items


@dataclass(frozen=True)
class Theme:
    """Primary/secondary colour pair; ``id`` names a preset."""

    id: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None

    @classmethod
    def from_value(cls, raw: Any) -> Theme:
        if isinstance(raw, str):
            return cls(id=raw)
        if not isinstance(raw, dict):
            return cls()
        return cls(
            id=bounded_text(raw.get("id"), 40),
            primary_color=bounded_text(raw.get("primaryColor"), 16),
            secondary_color=bounded_text(raw.get("secondaryColor"), 16),
        )


@dataclass(frozen=True)
class BrandingProfile:
    """User-owned branding applied to generated certificates."""

    name: str | None = None
    address: str | None = None
    logo: str | bytes | None = None
    theme: Theme = field(default_factory=Theme)
    layout: str | None = None
    custom_background: str | bytes | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BrandingProfile:
        """Accept both the render request shape and the stored profile shape."""
        return cls(
            name=bounded_text(data.get("name") or data.get("companyName"), 200),
            address=bounded_text(data.get("address") or data.get("companyAddress")),
            logo=data.get("logo") or data.get("logoUrl") or None,
            theme=Theme.from_value(data.get("theme")),
            layout=bounded_text(data.get("layout"), 40),
            custom_background=data.get("customBackground") or None,
        )


@dataclass(frozen=True)
class EntitlementDecision:
    """Per-request decision on watermarking and Pro-only customisation."""

    watermarked: bool = True
    use_custom_header: bool = False


@dataclass(frozen=True)
class RenderGeometry:
    """Concrete style directives for one layout."""

    header_style: HeaderStyle
    logo_align: Alignment
    text_align: Alignment
    table_border_width: float
    table_header_fill: HeaderFill


@dataclass(frozen=True)
class ResolvedAsset:
    """Image bytes with pixel dimensions read from the format header."""

    data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class RenderedDocument:
    """A finished certificate."""

    content: bytes
    filename: str
    page_count: int
    rows_rendered: int
