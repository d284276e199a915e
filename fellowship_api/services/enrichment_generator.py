# ============================================================================
# fellowship_api/services/enrichment_generator.py
# ============================================================================
#
# Enrichment Generator
#
# Asks an OpenAI-compatible chat model for structured study notes on a verse
# and coerces whatever comes back into a typed Enrichment. The model is told
# to answer with a single JSON object; its output is still treated as
# untrusted and every field gets a defined default.
#
# ============================================================================

import json
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from fellowship_api.config import Settings
from fellowship_api.errors import GenerationError
from fellowship_api.models.verse import Enrichment, Testament

logger = logging.getLogger("fellowship.services.enrichment_generator")

SYSTEM_PROMPT = " ".join([
    "You are a biblical study assistant for a men's fellowship app.",
    "Output STRICT JSON only. No markdown. No commentary.",
    "When highlighting key words, use ENGLISH transliterations with a short gloss in parentheses, "
    "e.g., 'hesed (steadfast love)'.",
])

STRING_FIELDS = (
    "author_name",
    "author_role",
    "setting_context",
    "simplified_explanation",
    "book_context_summary",
    "classification",
    "heart_snapshot",
    "then_now_bridge",
)

EMOTIONAL_CLIMATE_LIMIT = 8
CROSS_REFERENCE_LIMIT = 6
KEYWORD_LIMIT = 8


def coerce_string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def coerce_string_list(value: Any, limit: Optional[int] = None) -> List[str]:
    """Non-empty strings from ``value`` if it is a list, else []."""
    if not isinstance(value, list):
        return []
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items[:limit] if limit is not None else items


def normalize_enrichment(payload: Dict[str, Any], testament: Testament) -> Enrichment:
    """
    Coerce a parsed model response into an Enrichment.

    Only the keyword list for ``testament`` is attached; the other one is
    left as None.
    """
    fields: Dict[str, Any] = {name: coerce_string(payload.get(name)) for name in STRING_FIELDS}
    fields["tags"] = coerce_string_list(payload.get("tags"))
    fields["emotional_climate"] = coerce_string_list(payload.get("emotional_climate"), EMOTIONAL_CLIMATE_LIMIT)
    fields["cross_references"] = coerce_string_list(payload.get("cross_references"), CROSS_REFERENCE_LIMIT)

    if testament == Testament.OLD:
        fields["hebrew_keywords"] = coerce_string_list(payload.get("hebrew_keywords"), KEYWORD_LIMIT)
    else:
        fields["greek_keywords"] = coerce_string_list(payload.get("greek_keywords"), KEYWORD_LIMIT)

    return Enrichment(**fields)


def build_user_prompt(reference: str, verse_text: str, testament: Testament) -> Dict[str, Any]:
    """Task document sent as the user message; keyword language follows the testament."""
    keywords = "array of 2-6 transliterations + gloss"
    requirements: Dict[str, str] = {
        "author_name": "string",
        "author_role": "string",
        "setting_context": "string",
        "simplified_explanation": "string: the verse explained at a 5th-grade reading level",
        "book_context_summary": "string",
        "classification": "string",
        "tags": "array of 3-7 concise topical tags",
    }
    if testament == Testament.OLD:
        requirements["hebrew_keywords"] = keywords
    else:
        requirements["greek_keywords"] = keywords
    requirements.update({
        "heart_snapshot": "string: one-sentence 'God is ___ here' statement",
        "emotional_climate": (
            "array of 2-6 emotions or moral climates, e.g., rebellion, lament, awe, "
            "gratitude, fear, hope, repentance"
        ),
        "then_now_bridge": "string: 1-2 short lines connecting ancient context to life today",
        "cross_references": "array of 2-4 verse references as strings, e.g., 'Isaiah 53:5'",
    })

    return {
        "task": "enrich_verse",
        "reference": reference,
        "testament": testament.value,
        "verse_text": verse_text,
        "requirements": requirements,
        "notes": [
            "Prefer conservative, widely-accepted biblical scholarship.",
            "Do NOT include Hebrew/Greek script; use transliterations with English gloss.",
        ],
    }


class EnrichmentGenerator:
    """
    Generates verse enrichment with a single chat completion call.

    The client is built on first use and without retries; a failed call
    surfaces immediately as GenerationError.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.model = settings.openai_model
        self.temperature = settings.openai_temperature
        self.api_key = settings.openai_api_key
        self.base_url = settings.openai_base_url
        self.timeout = settings.openai_timeout
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self.api_key,
                    base_url=self.base_url,
                    timeout=self.timeout,
                    max_retries=0,
                )
            except openai.OpenAIError as e:
                raise GenerationError(f"OpenAI client is not configured: {e}") from e
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def generate(self, reference: str, verse_text: str, testament: Testament) -> Enrichment:
        """
        Produce normalized enrichment for one verse.

        Raises:
            GenerationError: Provider error, empty content or invalid JSON
        """
        user_prompt = build_user_prompt(reference, verse_text, testament)

        try:
            resp = await self._get_client().chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": json.dumps(user_prompt)},
                ],
            )
        except openai.APIStatusError as e:
            body = e.response.text
            raise GenerationError(
                f"OpenAI error {e.status_code}: {body}",
                provider_status=e.status_code,
                provider_body=body,
            ) from e
        except openai.APIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise GenerationError("OpenAI returned no content")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise GenerationError("OpenAI did not return valid JSON (invalid structured output)") from e
        if not isinstance(parsed, dict):
            raise GenerationError("OpenAI did not return a JSON object (invalid structured output)")

        logger.debug(f"Enrichment generated for {reference}")
        return normalize_enrichment(parsed, testament)
