"""
HTTP client for the Gemini text-generation API.

Provides the two AI assist helpers used while editing parts: drafting a
product description and suggesting a reorder quantity. Failures are not
raised; they come back as in-band sentinel strings the caller shows to
the user.
"""
import logging
import re
from typing import Optional

import httpx

from .. import config
from ..schemas import PartCategory

logger = logging.getLogger(__name__)

BRAND = "Terreins"

DESCRIPTION_ERROR = "Error: Could not generate description. Please try again."
REORDER_ERROR = "Error"
DEFAULT_REORDER_QUANTITY = "10"


class GenAIError(Exception):
    """The text-generation call failed or returned an unusable payload."""


def is_error(result: str) -> bool:
    """True when ``result`` is one of the error sentinels."""
    return result == REORDER_ERROR or result.startswith("Error:")


def description_prompt(part_name: str, category: PartCategory) -> str:
    return (
        f'Generate a compelling, concise, and professional product description for a motorcycle part '
        f'for the brand "{BRAND}". The description should be around 2-3 sentences. Do not use markdown.\n\n'
        f"Part Name: {part_name}\n"
        f"Category: {PartCategory(category).value}\n\n"
        f"Description:"
    )


def reorder_prompt(part_name: str, category: PartCategory, current_stock: int) -> str:
    return (
        f'As an expert inventory manager for a motorcycle parts company named "{BRAND}", suggest a '
        f"reorder quantity for the following item.\n"
        f"The goal is to maintain a healthy stock level for the next quarter. Base your suggestion on "
        f"the part category and assume moderate but steady sales velocity.\n"
        f"Consider that items in categories like 'Brakes' or 'Wheels' might be sold less frequently but "
        f"in higher value transactions than 'Accessories' or 'Lighting'.\n\n"
        f"Part Name: {part_name}\n"
        f"Category: {PartCategory(category).value}\n"
        f"Current Stock: {current_stock}\n\n"
        f"Suggested Reorder Quantity (provide only a single number):"
    )


async def generate_text(
    prompt: str,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Send one prompt to the configured model and return the reply text.

    Args:
        prompt: Prompt text
        api_key: API key (defaults to GEMINI_API_KEY)
        transport: Optional httpx transport, used to stub the API in tests

    Returns:
        The model's reply with surrounding whitespace removed

    Raises:
        GenAIError: If the key is missing, the request fails or the reply has no text
    """
    api_key = api_key if api_key is not None else config.GEMINI_API_KEY
    if not api_key:
        raise GenAIError("Gemini API key is missing. Please set the GEMINI_API_KEY environment variable.")

    url = f"{config.GEMINI_API_URL}/models/{config.GEMINI_MODEL}:generateContent"
    payload = {"contents": [{"parts": [{"text": prompt}]}]}

    try:
        async with httpx.AsyncClient(timeout=config.GENAI_TIMEOUT, transport=transport) as client:
            response = await client.post(url, json=payload, headers={"x-goog-api-key": api_key})
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise GenAIError(f"Gemini request failed: {str(e)}") from e

    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError) as e:
        raise GenAIError(f"Unexpected Gemini response: {data!r}") from e

    return text.strip()


async def generate_description(
    part_name: str,
    category: PartCategory,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Draft a 2-3 sentence product description.

    Returns:
        Description text, or DESCRIPTION_ERROR if generation failed
    """
    try:
        return await generate_text(description_prompt(part_name, category), api_key, transport)
    except GenAIError as e:
        logger.error(f"Error generating description: {e}")
        return DESCRIPTION_ERROR


async def suggest_reorder_quantity(
    part_name: str,
    category: PartCategory,
    current_stock: int,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Suggest how many units to reorder.

    Returns:
        A string of decimal digits (DEFAULT_REORDER_QUANTITY when the reply
        holds no number), or REORDER_ERROR if the call failed
    """
    try:
        reply = await generate_text(reorder_prompt(part_name, category, current_stock), api_key, transport)
    except GenAIError as e:
        logger.error(f"Error suggesting reorder quantity: {e}")
        return REORDER_ERROR

    match = re.search(r"\d+", reply)
    return match.group(0) if match else DEFAULT_REORDER_QUANTITY
