import pytest

from shop_service.db.models import OrderStatus
from shop_service.order_status import (
    TRANSITIONS,
    IllegalStatusTransition,
    StatusEffect,
    resolve_transition,
)

FORWARD = [
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.PAID,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


def test_every_status_has_a_row():
    assert set(TRANSITIONS) == set(OrderStatus)


@pytest.mark.parametrize("current", FORWARD[:-1])
def test_cancelling_restores_stock(current):
    assert resolve_transition(current, OrderStatus.CANCELLED) == StatusEffect.RESTORE_STOCK


def test_recancel_is_a_no_op():
    assert resolve_transition(OrderStatus.CANCELLED, OrderStatus.CANCELLED) == StatusEffect.NONE


@pytest.mark.parametrize("target", list(OrderStatus))
def test_delivered_is_terminal(target):
    with pytest.raises(IllegalStatusTransition) as info:
        resolve_transition(OrderStatus.DELIVERED, target)
    assert info.value.current == OrderStatus.DELIVERED
    assert info.value.target == target


@pytest.mark.parametrize("i", range(len(FORWARD) - 1))
def test_forward_moves_are_allowed(i):
    for target in FORWARD[i:]:
        assert resolve_transition(FORWARD[i], target) == StatusEffect.NONE


@pytest.mark.parametrize("i", range(1, len(FORWARD) - 1))
def test_backward_moves_are_rejected(i):
    for target in FORWARD[:i]:
        with pytest.raises(IllegalStatusTransition):
            resolve_transition(FORWARD[i], target)


@pytest.mark.parametrize("target", FORWARD)
def test_cancelled_cannot_be_reopened(target):
    with pytest.raises(ValueError):
        resolve_transition(OrderStatus.CANCELLED, target)
