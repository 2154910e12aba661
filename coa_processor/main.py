import argparse
import json
import sys
from pathlib import Path

from coa_processor.config.settings import Settings
from coa_processor.entitlement.exceptions import EntitlementError
from coa_processor.entitlement.models import DownloadOption
from coa_processor.extraction.exceptions import ExtractionError
from coa_processor.logging.logger import Log
from coa_processor.processor.processor import build_processor
from coa_processor.rendering.exceptions import RenderError
from coa_processor.rendering.models import ExtractedRecord
from coa_processor.storage.base import BaseDocumentStore
from coa_processor.storage.factory import DocumentStoreFactory


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Re-render a supplier COA with your branding")
    parser.add_argument("source", type=Path, help="Supplier COA PDF, or extracted data as JSON")
    parser.add_argument("--user", required=True, help="User ID owning the branding profile")
    parser.add_argument(
        "--option",
        choices=[option.value for option in DownloadOption],
        default=DownloadOption.FREE.value,
    )
    parser.add_argument(
        "--payment-confirmed",
        action="store_true",
        help="Treat a one-time download as paid",
    )
    return parser


def load_record(path: Path) -> ExtractedRecord:
    """Read extracted data saved as JSON.

    Raises:
        ValueError: if the file is not valid JSON or not a JSON object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return ExtractedRecord.from_dict(data)


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> processor -> one certificate written to output_dir."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    record: ExtractedRecord | None = None
    pdf_bytes = b""
    store: BaseDocumentStore | None = None
    try:
        if args.source.suffix.lower() == ".json":
            record = load_record(args.source)
        else:
            pdf_bytes = args.source.read_bytes()
        store = DocumentStoreFactory.create(settings)
        processor = build_processor(settings, store=store)
        result = processor.generate(
            args.user,
            record=record,
            pdf_bytes=pdf_bytes,
            option=DownloadOption(args.option),
            payment_confirmed=args.payment_confirmed,
        )
    except (EntitlementError, ExtractionError, RenderError, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if store is not None:
            store.close()

    print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
