"""Place resolution tool using Google Places API text search."""

import json
import logging
from typing import Annotated

from pydantic import ValidationError

from maps_agent.models import TextSearchRequest
from maps_agent.services import TextSearchService


logger = logging.getLogger(__name__)

TOOL_NAME = "places_text_search"


async def places_text_search(
    query: Annotated[str, "Free-form text to resolve into places (e.g. 'Brandenburg Gate, Berlin')"],
    max_results: Annotated[int, "Maximum number of candidates to return (1-20)"] = 5,
    language_code: Annotated[str | None, "BCP-47 language code (default 'en')"] = None,
) -> str:
    """
    Global text search that returns candidate places with precision flags.

    Each candidate has `is_area` set when it is a region (city, postal code,
    country) rather than a precise point. `resolved` is true only for a
    single precise match; otherwise ask the user to pick or refine.
    """
    try:
        request = TextSearchRequest(
            query=query,
            max_results=max_results,
            language_code=language_code,
        )
    except ValidationError as e:
        return json.dumps({"error": f"{TOOL_NAME} failed: invalid parameters: {e}"})

    try:
        service = TextSearchService()
        result = await service.search(
            request.query,
            request.max_results,
            request.language_code,
        )
    except Exception as e:
        logger.error("%s failed: %s", TOOL_NAME, e)
        return json.dumps({"error": f"{TOOL_NAME} failed: {e}"})

    return result.model_dump_json(indent=2)
