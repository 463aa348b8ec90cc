import pytest

from core.exceptions import ConflictError, InvalidStatusTransition
from models.order import ALLOWED_PREDECESSORS, OrderStatus, can_transition, ensure_transition

ALLOWED = [
    ("Rescheduled", "preparing"),
    ("preparing", "OutForDelivery"),
    ("Rescheduled", "OutForDelivery"),
    ("OutForDelivery", "Completed"),
    ("Completed", "Cancelled"),
    ("Cancelled", "Cancelled"),
    ("preparing", "Rescheduled"),
    ("Cancelled", "Rescheduled"),
]

REJECTED = [
    ("preparing", "preparing"),
    ("Completed", "preparing"),
    ("preparing", "Completed"),
    ("Cancelled", "OutForDelivery"),
    ("Completed", "Rescheduled"),
    ("Rescheduled", "Completed"),
]


@pytest.mark.parametrize("current,target", ALLOWED)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)
    assert ensure_transition(current, target) == OrderStatus(target)


@pytest.mark.parametrize("current,target", REJECTED)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStatusTransition) as exc_info:
        ensure_transition(current, target)
    assert exc_info.value.status_code == 409
    assert exc_info.value.current == current
    assert exc_info.value.target == target


def test_every_status_has_an_entry():
    assert set(ALLOWED_PREDECESSORS) == set(OrderStatus)


def test_cancel_is_reachable_from_anywhere():
    assert ALLOWED_PREDECESSORS[OrderStatus.CANCELLED] == frozenset(OrderStatus)


def test_unknown_current_status_cannot_move():
    assert not can_transition("Delivered", OrderStatus.CANCELLED)
    with pytest.raises(ConflictError):
        ensure_transition(None, OrderStatus.COMPLETED)


def test_unknown_target_status():
    with pytest.raises(ValueError):
        can_transition(OrderStatus.PREPARING, "Delivered")


def test_status_values_keep_their_wire_spelling():
    assert [s.value for s in OrderStatus] == ["preparing", "OutForDelivery", "Completed", "Cancelled", "Rescheduled"]
