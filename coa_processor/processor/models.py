from dataclasses import dataclass
from pathlib import Path

from coa_processor.rendering.models import RenderedDocument


@dataclass(frozen=True)
class GenerationResult:
    """Where a certificate was written and what was written."""

    path: Path
    document: RenderedDocument
