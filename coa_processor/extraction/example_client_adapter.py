"""Offline extraction client.

Returns a fixed certificate so the whole pipeline can run locally and in
tests without an API key.
"""

import json
from typing import ClassVar

from coa_processor.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Adapter that returns a fixed, valid extraction JSON."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "productName": "Sodium Chloride",
        "batchNo": None,
        "lotNo": "L123",
        "casNo": "7647-14-5",
        "date": "2025-01-10",
        "expiryDate": None,
        "purity": "99.5%",
        "appearance": "White crystalline powder",
        "supplier": "Example Chemicals Ltd.",
        "supplierAddress": None,
        "specifications": [
            {"parameter": "Purity", "specification": "≥99%", "result": "99.5%"},
        ],
        "additionalInfo": {},
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        images: list[str] | None = None,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, images
        return json.dumps(self.DEFAULT_RESPONSE)
