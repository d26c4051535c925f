"""
Gemini-backed helpers: listing descriptions and photo analysis.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

from fastapi import Depends
from google import genai
from google.genai import types as genai_types

from carmarket.config import Settings, get_settings
from carmarket.exceptions import ServerError
from carmarket.schemas.car import ImageAnalysis

logger = logging.getLogger(__name__)

YEAR_PATTERN = re.compile(r"\b(\d{4})\b")
FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
UNKNOWN_VALUES = {"", "unknown", "n/a", "none", "null", "not specified"}

DESCRIPTION_PROMPT = """As a professional car dealer, write a brief, well-structured, and engaging description for a used car. The description should sound like a real person wrote it and should be formatted for easy reading.

Car Specifications:
- Make: {make}
- Model: {model}
- Year: {year}
- Mileage: {mileage} miles
- Condition: {condition}
- Details: {details}

Key requirements:
1. Start with an eye-catching headline.
2. The description should be 2-3 short paragraphs, not a single long block of text.
3. Highlight key features like the engine, transmission, and color.
4. Use a friendly, persuasive tone.
5. End with a call to action, encouraging the buyer to contact you or schedule a test drive."""

ANALYSIS_PROMPT = (
    "Analyze this car image. Provide a detailed description including the car's make, model, "
    "year, color, and any visible features like body style or trim. Respond in a JSON object "
    "with 'make', 'model', 'year', 'color' and 'description' keys. If the model or year is not "
    "specified, you can give a best guess or state it's unknown."
)


class AIServiceError(ServerError):
    default_message = "AI service request failed"


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in UNKNOWN_VALUES:
        return None
    return text


def extract_year(value: Any) -> Optional[int]:
    """Take the first 4-digit number from a free-form year answer."""
    if value is None:
        return None
    match = YEAR_PATTERN.search(str(value))
    return int(match.group(1)) if match else None


def parse_analysis(raw: str) -> ImageAnalysis:
    """
    Turn the model's reply into search criteria.

    The reply should be a JSON object but may arrive wrapped in a markdown
    code fence. Unknown or empty values become None.
    """
    text = FENCE_PATTERN.sub("", (raw or "").strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Fall back to the first {...} block in the reply
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise AIServiceError("Could not analyze car image.")
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            raise AIServiceError("Could not analyze car image.")

    if not isinstance(data, dict):
        raise AIServiceError("Could not analyze car image.")

    return ImageAnalysis(
        make=_clean_text(data.get("make")),
        model=_clean_text(data.get("model")),
        year=extract_year(data.get("year")),
        color=_clean_text(data.get("color")),
    )


class CarVisionClient:
    """Thin async wrapper around the Gemini client."""

    def __init__(self, api_key: str, model: str):
        self.model = model
        self._client = genai.Client(api_key=api_key)

    async def _generate(self, contents) -> str:
        response = await self._client.aio.models.generate_content(model=self.model, contents=contents)
        return (getattr(response, "text", "") or "").strip()

    async def generate_description(self, car: Dict[str, Any]) -> str:
        details = {key: car.get(key) for key in ("engine", "transmission", "color") if car.get(key)}
        prompt = DESCRIPTION_PROMPT.format(
            make=car.get("make"),
            model=car.get("model"),
            year=car.get("year"),
            mileage=car.get("mileage"),
            condition=car.get("condition"),
            details=json.dumps(details, indent=2),
        )
        logger.info("[AI] generating description for %s %s", car.get("make"), car.get("model"))
        try:
            return await self._generate(prompt)
        except Exception as e:
            logger.error("[AI] description failed: %r", e)
            raise AIServiceError("Could not generate car description.") from e

    async def analyze_image(self, image: bytes, mime_type: str = "image/jpeg") -> ImageAnalysis:
        logger.info("[AI] analyzing image (%d bytes)", len(image))
        try:
            raw = await self._generate([
                ANALYSIS_PROMPT,
                genai_types.Part.from_bytes(data=image, mime_type=mime_type),
            ])
        except Exception as e:
            logger.error("[AI] image analysis failed: %r", e)
            raise AIServiceError("Error analyzing image or searching for cars.") from e
        return parse_analysis(raw)


_client_cache: Dict[tuple, CarVisionClient] = {}


def get_ai_client(settings: Settings = Depends(get_settings)) -> Optional[CarVisionClient]:
    """Dependency returning the shared AI client, or None when no key is configured."""
    if not settings.gemini_api_key:
        return None
    key = (settings.gemini_api_key, settings.gemini_model)
    if key not in _client_cache:
        _client_cache[key] = CarVisionClient(settings.gemini_api_key, settings.gemini_model)
    return _client_cache[key]
