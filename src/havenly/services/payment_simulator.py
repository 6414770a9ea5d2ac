"""Payment Simulator: stands in for a real card gateway.

The simulator sleeps for a configurable delay to emulate network latency and
then approves the charge. One well-known test card number is always declined
so callers can exercise their failure path deterministically. No card data is
validated.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

from havenly.app.config import get_settings
from havenly.domain.schemas import CardDetails

logger = logging.getLogger(__name__)

DECLINE_CARD_NUMBER = "4000000000000002"


@dataclass
class PaymentResult:
    """Outcome of a charge attempt.

    Attributes:
        success: True if the gateway accepted the charge.
        reference: Gateway reference for the accepted charge.
        error: Human-readable decline reason when ``success`` is False.
    """

    success: bool
    reference: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def approved(cls, reference: str) -> "PaymentResult":
        return cls(success=True, reference=reference)

    @classmethod
    def declined(cls, error: str) -> "PaymentResult":
        return cls(success=False, error=error)


class PaymentGateway(Protocol):
    async def charge(self, amount: float, card: CardDetails) -> PaymentResult: ...


class PaymentSimulator:
    """Simulated gateway with artificial latency."""

    def __init__(
        self,
        delay_seconds: float = 1.5,
        declined_cards: frozenset[str] = frozenset({DECLINE_CARD_NUMBER}),
    ):
        self.delay_seconds = delay_seconds
        self.declined_cards = declined_cards

    async def charge(self, amount: float, card: CardDetails) -> PaymentResult:
        """Charge ``amount`` to ``card`` after the simulated delay."""
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        card_number = (card.number or "").replace(" ", "")
        if amount <= 0:
            logger.warning("Payment declined: non-positive amount %.2f", amount)
            return PaymentResult.declined("Amount must be positive")
        if card_number in self.declined_cards:
            logger.info("Payment declined for card ending %s", card_number[-4:])
            return PaymentResult.declined("Card declined")

        reference = f"sim_{uuid.uuid4().hex[:16]}"
        logger.info("Payment approved: amount=%.2f reference=%s", amount, reference)
        return PaymentResult.approved(reference)


@lru_cache
def get_payment_gateway() -> PaymentSimulator:
    """FastAPI dependency: the process-wide payment gateway."""
    return PaymentSimulator(delay_seconds=get_settings().payment_delay_seconds)
