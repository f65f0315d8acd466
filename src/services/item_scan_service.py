"""Product photo extraction using Claude Vision."""

import base64
import json
import logging
import re
from dataclasses import dataclass
from datetime import date

import anthropic

from src.config import get_settings
from src.services.errors import AIServiceUnavailableError
from src.services.expiry import days_between
from src.services.llm import strip_code_fences
from src.services.llm_prompts import ITEM_EXTRACTION_PROMPT

logger = logging.getLogger(__name__)

MAX_SHELF_LIFE_DAYS = 3650
EXPIRY_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass
class ExtractedItemDetails:
    """Validated details read off a product photo."""

    item_found: bool
    barcode: str | None = None
    expiry_date: date | None = None
    product_name: str | None = None


def parse_expiry_date(value: object) -> date | None:
    """Parse a YYYY-MM-DD string; anything else is treated as absent."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if EXPIRY_DATE_PATTERN.fullmatch(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    logger.warning(f"Discarding malformed expiry date from vision model: {value!r}")
    return None


def shelf_life_from_expiry(expiry_date: date | None, today: date) -> int | None:
    """Shelf life that makes an item added today expire on ``expiry_date``.

    None when there is no date or it is today or earlier, since a shelf life
    must be at least one day.
    """
    if expiry_date is None:
        return None
    days = days_between(today, expiry_date)
    if days < 1:
        return None
    return min(days, MAX_SHELF_LIFE_DAYS)


def _clean_text(value: object, max_length: int) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text[:max_length] if text else None


def parse_extraction(data: object) -> ExtractedItemDetails:
    """Turn raw model output into validated details."""
    if not isinstance(data, dict):
        raise ValueError("Vision model did not return a JSON object")

    barcode = _clean_text(data.get("barcode"), 64)
    expiry = parse_expiry_date(data.get("expiry_date"))
    product_name = _clean_text(data.get("product_name"), 100)
    item_found = bool(data.get("item_found")) and any((barcode, expiry, product_name))

    return ExtractedItemDetails(
        item_found=item_found,
        barcode=barcode,
        expiry_date=expiry,
        product_name=product_name,
    )


class ItemScanService:
    """Service for extracting product details from photos using Claude Vision."""

    def __init__(self, client: anthropic.Anthropic | None = None) -> None:
        """Initialize the scan service."""
        settings = get_settings()
        self.api_key = settings.anthropic_api_key
        self.model = settings.vision_model
        self._client = client
        self._configured = bool(self.api_key) or client is not None

    @property
    def is_configured(self) -> bool:
        """Check if the Anthropic API is configured."""
        return self._configured

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    async def extract_item_details(self, image_data: bytes, media_type: str) -> ExtractedItemDetails:
        """Extract barcode, expiry date and product name from a product photo.

        Args:
            image_data: Raw bytes of the image
            media_type: MIME type (e.g., "image/jpeg", "image/png")

        Returns:
            Validated details; a malformed expiry date comes back as None

        Raises:
            AIServiceUnavailableError: If the API is not configured or the call fails
            ValueError: If the response is not the expected JSON object
        """
        if not self.is_configured:
            raise AIServiceUnavailableError("Anthropic API not configured")

        image_base64 = base64.standard_b64encode(image_data).decode("utf-8")

        try:
            message = self._get_client().messages.create(
                model=self.model,
                max_tokens=1024,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": image_base64,
                                },
                            },
                            {
                                "type": "text",
                                "text": ITEM_EXTRACTION_PROMPT,
                            },
                        ],
                    }
                ],
            )
        except anthropic.APIError as e:
            logger.error(f"Claude Vision request failed: {e}")
            raise AIServiceUnavailableError(f"Vision service error: {e}") from e

        response_text = strip_code_fences(message.content[0].text)

        try:
            data = json.loads(response_text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse Claude response as JSON: {e}")
            logger.error(f"Response was: {response_text}")
            raise ValueError(f"Failed to read product details: {e}") from e

        return parse_extraction(data)
