"""
Identification client for the Gemini API.

One request per call: check connectivity, then either return canned mock data
(no credential configured) or call Gemini and run the answer through the
parser and, for images, the confidence gate. Nothing here retries, times out
or cancels; the caller re-triggers on failure.
"""
import asyncio
import base64
import binascii
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from config.mock_responses import MOCK_IMAGE_RECORD, MOCK_TEXT_RECORD
from config.settings import DEFAULT_MODEL_NAME
from config.system_prompts import IMAGE_IDENTIFIER, build_text_prompt
from db.schemas import MedicineRecord
from services.confidence_policy import apply_confidence_gate
from services.connectivity import ConnectivityGate
from services.errors import (
    MissingCredentialError,
    NoConnectivityError,
    UpstreamFailureError,
)
from services.response_parser import parse_medicine_response

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/jpeg"
TEXT_SEARCH_NOTE = "Text search result"


def _decode_image(image_base64: str) -> bytes:
    # tolerate data URLs ("data:image/jpeg;base64,....")
    if image_base64.startswith("data:") and "," in image_base64:
        image_base64 = image_base64.split(",", 1)[1]
    return base64.b64decode(image_base64, validate=True)


def grounding_sources(response) -> List[str]:
    """Web URIs cited by the Google Search tool, in order, without duplicates."""
    sources: List[str] = []
    for candidate in getattr(response, "candidates", None) or []:
        metadata = getattr(candidate, "grounding_metadata", None)
        for chunk in getattr(metadata, "grounding_chunks", None) or []:
            uri = getattr(getattr(chunk, "web", None), "uri", None)
            if uri and uri not in sources:
                sources.append(uri)
    return sources


class GeminiService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = DEFAULT_MODEL_NAME,
        connectivity: Optional[ConnectivityGate] = None,
        mock_mode: Optional[bool] = None,
        client=None,
        mock_image_delay: float = 2.0,
        mock_text_delay: float = 1.5,
    ):
        """
        :param api_key: Gemini credential. Without one the service is in mock mode.
        :param mock_mode: overrides the credential-based decision; fixed for the
            lifetime of the instance.
        :param client: a ready genai.Client (or compatible object). Built from
            api_key when omitted.
        """
        self.model_name = model_name
        self.connectivity = connectivity or ConnectivityGate()
        self.mock_mode = (not api_key) if mock_mode is None else mock_mode
        self.mock_image_delay = mock_image_delay
        self.mock_text_delay = mock_text_delay

        if client is None and api_key and not self.mock_mode:
            client = genai.Client(api_key=api_key)
        self.client = client

        if self.mock_mode:
            logger.warning("GeminiService running in MOCK mode; responses are canned data.")

    async def identify_by_image(self, image_base64: str) -> MedicineRecord:
        await self._require_connectivity()

        if self.mock_mode:
            logger.info("Using MOCK Gemini response for image")
            await asyncio.sleep(self.mock_image_delay)
            return MOCK_IMAGE_RECORD.model_copy(deep=True)

        client = self._require_client()
        try:
            image_bytes = _decode_image(image_base64)
        except (binascii.Error, ValueError) as e:
            raise UpstreamFailureError(f"Failed to process image: {e}") from e

        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=[
                    IMAGE_IDENTIFIER,
                    types.Part.from_bytes(data=image_bytes, mime_type=IMAGE_MIME_TYPE),
                ],
                # Google Search grounding
                config=types.GenerateContentConfig(
                    tools=[types.Tool(google_search=types.GoogleSearch())]
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e, exc_info=True)
            raise UpstreamFailureError(str(e) or "Failed to identify medicine") from e

        parsed = parse_medicine_response(response.text)
        record = apply_confidence_gate(parsed.record, parsed.confidence_score)

        if record.confidence != "low":
            cited = grounding_sources(response)
            if cited:
                merged = list(record.sources or [])
                merged += [uri for uri in cited if uri not in merged]
                record = record.model_copy(update={"sources": merged})

        return record

    async def identify_by_text(self, query: str) -> MedicineRecord:
        await self._require_connectivity()

        if self.mock_mode:
            logger.info("Using MOCK Gemini response for text")
            await asyncio.sleep(self.mock_text_delay)
            return MOCK_TEXT_RECORD.model_copy(deep=True)

        client = self._require_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=build_text_prompt(query),
            )
        except Exception as e:
            logger.error("Gemini text API error: %s", e, exc_info=True)
            raise UpstreamFailureError(str(e) or "Failed to identify medicine") from e

        parsed = parse_medicine_response(response.text)
        # text results are never gated
        return parsed.record.model_copy(
            update={"confidence": "high", "analysis_notes": TEXT_SEARCH_NOTE}
        )

    async def _require_connectivity(self) -> None:
        if not await self.connectivity.check_connected():
            raise NoConnectivityError()

    def _require_client(self):
        if self.client is None:
            raise MissingCredentialError()
        return self.client
