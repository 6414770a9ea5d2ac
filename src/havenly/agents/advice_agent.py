"""Advice Agent: a virtual travel concierge for a single listing."""

from havenly.agents.base import AgentResult, BaseAgent

ADVICE_SYSTEM_PROMPT = (
    "You are a virtual travel concierge for Havenly, a vacation-rental marketplace. "
    "Explain why a property is a good fit for the traveller or what they should know. "
    "Keep it brief and encouraging (under 100 words). "
    "Return ONLY the advice text. No markdown formatting."
)


class AdviceAgent(BaseAgent):
    """Generates short, guest-facing advice about a property."""

    def __init__(self):
        super().__init__(agent_name="advice", temperature=0.7)

    async def get_property_advice(self, property_title: str, user_context: str) -> AgentResult:
        prompt = (
            f'User is interested in "{property_title}". They said: "{user_context}".\n'
            "As a virtual travel concierge, explain why this property is a good fit "
            "for them or what they should know."
        )
        return await self.generate(prompt=prompt, system_instruction=ADVICE_SYSTEM_PROMPT)
