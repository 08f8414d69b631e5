"""Tests for the order lifecycle rules."""

import pytest

from pizzaparty.models.enums import OrderEvent, OrderStatus
from pizzaparty.services.orders.exceptions import InvalidOrderState, OrderAlreadyInPreparation
from pizzaparty.services.orders.lifecycle import allowed_events, transition


def test_take_charge_with_free_slot() -> None:
    assert transition(OrderStatus.WAITING, OrderEvent.TAKE_CHARGE, preparing_count=0) is OrderStatus.PREPARING


@pytest.mark.parametrize("preparing_count", [1, 2])
def test_take_charge_with_occupied_slot(preparing_count: int) -> None:
    with pytest.raises(OrderAlreadyInPreparation):
        transition(OrderStatus.WAITING, OrderEvent.TAKE_CHARGE, preparing_count=preparing_count)


def test_complete_preparing_order() -> None:
    assert transition(OrderStatus.PREPARING, OrderEvent.COMPLETE) is OrderStatus.READY


@pytest.mark.parametrize(
    ("status", "event"),
    [
        (OrderStatus.PREPARING, OrderEvent.TAKE_CHARGE),
        (OrderStatus.READY, OrderEvent.TAKE_CHARGE),
        (OrderStatus.WAITING, OrderEvent.COMPLETE),
        (OrderStatus.READY, OrderEvent.COMPLETE),
    ],
)
def test_illegal_transitions(status: OrderStatus, event: OrderEvent) -> None:
    with pytest.raises(InvalidOrderState) as exc_info:
        transition(status, event, preparing_count=0)

    assert exc_info.value.status is status
    assert exc_info.value.event is event


def test_invalid_state_wins_over_occupied_slot() -> None:
    with pytest.raises(InvalidOrderState):
        transition(OrderStatus.PREPARING, OrderEvent.TAKE_CHARGE, preparing_count=1)


def test_take_charge_requires_preparing_count() -> None:
    with pytest.raises(ValueError):
        transition(OrderStatus.WAITING, OrderEvent.TAKE_CHARGE)


@pytest.mark.parametrize(
    ("status", "events"),
    [
        (OrderStatus.WAITING, [OrderEvent.TAKE_CHARGE]),
        (OrderStatus.PREPARING, [OrderEvent.COMPLETE]),
        (OrderStatus.READY, []),
    ],
)
def test_allowed_events(status: OrderStatus, events: list[OrderEvent]) -> None:
    assert allowed_events(status) == events
