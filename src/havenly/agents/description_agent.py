"""Description Agent: drafts listing copy for hosts via Gemini."""

from havenly.agents.base import AgentResult, BaseAgent

DESCRIPTION_SYSTEM_PROMPT = (
    "You are a creative copywriter for Havenly, a vacation-rental website. "
    "Write catchy, vibrant property descriptions.\n\n"
    "Style Guidelines:\n"
    "- Open with what makes the place special\n"
    "- Include a few concrete highlights\n"
    "- Short paragraphs, natural language\n"
    "- Keep it under 1200 characters\n\n"
    "DO NOT:\n"
    "- Invent amenities that were not mentioned\n"
    "- Include prices or availability dates\n\n"
    "OUTPUT: Return ONLY the description text. No JSON, no markdown formatting."
)


class DescriptionAgent(BaseAgent):
    """Generates listing descriptions from a host's rough notes."""

    def __init__(self):
        super().__init__(agent_name="description", temperature=0.8)

    async def generate_description(self, details: str) -> AgentResult:
        """Generate a listing description.

        Args:
            details: Free-form notes about the property from the host.

        Returns:
            AgentResult with the description text in ``data``.
        """
        prompt = (
            f'Based on these details: "{details}", write a catchy, vibrant property '
            "description for a vacation rental website. Include a few highlights."
        )
        return await self.generate(prompt=prompt, system_instruction=DESCRIPTION_SYSTEM_PROMPT)
