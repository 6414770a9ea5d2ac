"""Tests for the simulated payment gateway."""

import pytest

from havenly.domain.schemas import CardDetails
from havenly.services.payment_simulator import DECLINE_CARD_NUMBER, PaymentSimulator


@pytest.fixture
def simulator():
    return PaymentSimulator(delay_seconds=0)


async def test_approves_normal_charge(simulator):
    result = await simulator.charge(1000.0, CardDetails(number="4242 4242 4242 4242"))
    assert result.success is True
    assert result.reference.startswith("sim_")
    assert result.error is None


async def test_references_are_unique(simulator):
    first = await simulator.charge(10.0, CardDetails())
    second = await simulator.charge(10.0, CardDetails())
    assert first.reference != second.reference


async def test_decline_card(simulator):
    result = await simulator.charge(1000.0, CardDetails(number=DECLINE_CARD_NUMBER))
    assert result.success is False
    assert result.reference is None
    assert "declined" in result.error


async def test_decline_card_with_spaces(simulator):
    result = await simulator.charge(50.0, CardDetails(number="4000 0000 0000 0002"))
    assert result.success is False


@pytest.mark.parametrize("amount", [0, -10.0])
async def test_non_positive_amount_declined(simulator, amount):
    result = await simulator.charge(amount, CardDetails())
    assert result.success is False


async def test_custom_declined_cards():
    simulator = PaymentSimulator(delay_seconds=0, declined_cards=frozenset({"1111"}))
    assert (await simulator.charge(10.0, CardDetails(number="1111"))).success is False
    assert (await simulator.charge(10.0, CardDetails(number=DECLINE_CARD_NUMBER))).success is True
