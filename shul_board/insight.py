"""Daily dvar torah generation using Google Gemini (google-genai SDK)."""

import logging
from typing import Any

from google import genai
from google.genai import types

from .errors import InsightLookupFailed

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

PROMPT_TEMPLATE = (
    "כתוב דבר תורה קצר (2-3 משפטים) ומעורר השראה על פרשת {parasha}, "
    "המתאים להצגה על לוח בית הכנסת בתאריך {hebrew_date}. "
    "כתוב בעברית בלבד, ללא כותרת וללא מרכאות."
)


def build_prompt(parasha: str, hebrew_date: str) -> str:
    """Build the generation prompt for a parasha and Hebrew date."""
    return PROMPT_TEMPLATE.format(parasha=parasha, hebrew_date=hebrew_date)


class InsightClient:
    """Client generating the daily insight text."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        timeout: float = 15,
        client: Any = None,
    ):
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            )

    @property
    def enabled(self) -> bool:
        """Whether an API client is configured."""
        return self._client is not None

    async def get_insight(self, parasha: str, hebrew_date: str) -> str:
        """Generate the insight text for the given parasha and date."""
        if self._client is None:
            raise InsightLookupFailed("Gemini API key is not configured")

        prompt = build_prompt(parasha, hebrew_date)
        try:
            logger.info(f"Requesting insight for פרשת {parasha} ({hebrew_date})")
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except Exception as e:
            raise InsightLookupFailed(f"Gemini request failed: {e}") from e

        text = (response.text or "").strip().strip('"').strip()
        if not text:
            raise InsightLookupFailed("Gemini returned an empty insight")
        return text
