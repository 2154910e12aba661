"""AI-powered COA extractor: text prompt first, page images as fallback."""

import json
from pathlib import Path

from coa_processor.extraction.base import BaseExtractor
from coa_processor.extraction.client_base import BaseExtractionClient
from coa_processor.extraction.exceptions import ExtractionError
from coa_processor.extraction.prompt_loader import load_json_schema, load_prompt
from coa_processor.logging.logger import Log
from coa_processor.pdf.base import BasePdfExtractor
from coa_processor.pdf.exceptions import PdfExtractionError
from coa_processor.pdf.rasterizer import PageRasterizer
from coa_processor.rendering.models import ExtractedRecord


class Extractor(BaseExtractor):
    """Extracts structured certificate data using an AI provider.

    Certificates with a usable text layer go through the cheaper text prompt.
    Scanned certificates, or ones whose text layer is too short, are
    rasterised and sent through the vision prompt.
    """

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        pdf_extractor: BasePdfExtractor,
        rasterizer: PageRasterizer,
        model: str,
        temperature: float = 0.1,
        min_text_chars: int = 100,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._pdf_extractor = pdf_extractor
        self._rasterizer = rasterizer
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._min_text_chars = min_text_chars
        self._system_prompt = load_prompt("system_prompt.txt", _prompt_path(prompt_dir, "system_prompt.txt"))
        self._text_template = load_prompt("text_prompt.txt", _prompt_path(prompt_dir, "text_prompt.txt"))
        self._vision_template = load_prompt(
            "vision_prompt.txt", _prompt_path(prompt_dir, "vision_prompt.txt")
        )
        self._json_schema = load_json_schema(_prompt_path(prompt_dir, "extraction_schema.json"))

    def extract(self, pdf_bytes: bytes) -> ExtractedRecord:
        text = self._read_text(pdf_bytes)
        if len(text) > self._min_text_chars:
            Log.info(f"Extracting from {len(text)} chars of text")
            raw_response = self._client.create_chat_completion(
                model=self._model,
                temperature=self._temperature,
                system_prompt=self._system_prompt,
                user_prompt=self._text_template.format(
                    coa_text=text,
                    json_schema=self._json_schema,
                ),
            )
            method = "text"
        else:
            images = self._rasterize(pdf_bytes)
            Log.info(f"Insufficient text, extracting from {len(images)} page image(s)")
            raw_response = self._client.create_chat_completion(
                model=self._model,
                temperature=self._temperature,
                system_prompt=self._system_prompt,
                user_prompt=self._vision_template.format(
                    page_count=len(images),
                    json_schema=self._json_schema,
                ),
                images=images,
            )
            method = "vision"
        Log.debug(f"AI raw response:\n{raw_response}")

        record = ExtractedRecord.from_dict(self._parse_json(raw_response))
        Log.info(
            f"Extraction complete: {len(record.specifications)} specifications",
            method=method,
        )
        return record

    def _read_text(self, pdf_bytes: bytes) -> str:
        try:
            return self._pdf_extractor.extract(pdf_bytes).strip()
        except PdfExtractionError as exc:
            Log.warning(f"Text extraction failed, falling back to vision: {exc}")
            return ""

    def _rasterize(self, pdf_bytes: bytes) -> list[str]:
        try:
            images = self._rasterizer.render(pdf_bytes)
        except PdfExtractionError as exc:
            raise ExtractionError(f"Uploaded file is not a readable PDF: {exc}") from exc
        if not images:
            raise ExtractionError("Uploaded PDF has no pages")
        return images

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ExtractionError("JSON response must be an object")
        return parsed


def _prompt_path(prompt_dir: Path | None, name: str) -> Path | None:
    return prompt_dir / name if prompt_dir is not None else None
