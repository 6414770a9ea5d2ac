"""Gemini model factory for Havenly agents."""

import google.generativeai as genai

from havenly.app.config import get_settings


def get_model(
    model_name: str | None = None,
    temperature: float = 0.7,
    system_instruction: str | None = None,
):
    """Return a configured Gemini GenerativeModel instance.

    Args:
        model_name: Gemini model identifier; defaults to ``settings.gemini_model``.
        temperature: Generation temperature (0.0-2.0).
        system_instruction: Optional system-level instruction.

    Returns:
        A ``google.generativeai.GenerativeModel`` ready for generation.
    """
    settings = get_settings()
    genai.configure(api_key=settings.gemini_api_key)

    return genai.GenerativeModel(
        model_name=model_name or settings.gemini_model,
        generation_config={"temperature": temperature},
        system_instruction=system_instruction,
    )
