"""AI helpers that never fail the caller: concierge advice and listing copy."""

import logging

from havenly.agents.advice_agent import AdviceAgent
from havenly.agents.description_agent import DescriptionAgent

logger = logging.getLogger(__name__)

ADVICE_FALLBACK = (
    "I'm having trouble connecting to my AI brain right now, but this property looks lovely!"
)


async def get_advice(property_title: str, user_context: str) -> str:
    """Return concierge advice for a listing, or a friendly fallback."""
    result = await AdviceAgent().get_property_advice(property_title, user_context)
    if result.ok and result.data and str(result.data).strip():
        return str(result.data).strip()

    logger.warning("Advice unavailable for %r: %s", property_title, result.error)
    return ADVICE_FALLBACK


async def generate_smart_description(details: str) -> str:
    """Draft a listing description; falls back to the host's own notes."""
    result = await DescriptionAgent().generate_description(details)
    if result.ok and result.data and str(result.data).strip():
        description = str(result.data).strip()
        if len(description) > 5000:
            description = description[:4997] + "..."
        logger.info("Description generated (%d chars)", len(description))
        return description

    logger.warning("Description generation failed: %s", result.error)
    return details
