"""Order and consultation statuses with their allowed transitions.

The tables currently allow moving from any status to any status the admin UI
offers; the store API is trusted to reject transitions it does not support.
"""
import enum
from typing import Dict, FrozenSet, Type, TypeVar


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class ConsultationStatus(str, enum.Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    BAD = "bad"
    GOOD = "good"
    FUTURE = "future"


ORDER_TARGETS: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
})

CONSULTATION_TARGETS: FrozenSet[ConsultationStatus] = frozenset(ConsultationStatus)

ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    status: ORDER_TARGETS for status in OrderStatus
}

CONSULTATION_TRANSITIONS: Dict[ConsultationStatus, FrozenSet[ConsultationStatus]] = {
    status: CONSULTATION_TARGETS for status in ConsultationStatus
}

CONSULTATION_LABELS = {
    ConsultationStatus.BAD: "Bad Lead",
    ConsultationStatus.GOOD: "Good Lead",
    ConsultationStatus.FUTURE: "Keeping this for future",
}

S = TypeVar("S", bound=enum.Enum)


class InvalidStatus(ValueError):
    pass


def parse_status(enum_cls: Type[S], value: str) -> S:
    """Case-insensitive lookup of a status value."""
    wanted = (value or "").strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    raise InvalidStatus(f"Invalid status: {value!r}")


def can_transition(table: Dict[S, FrozenSet[S]], current: S, target: S) -> bool:
    return target in table.get(current, frozenset())


def consultation_wire_value(status: ConsultationStatus) -> str:
    # The booking API stores statuses capitalized ("Completed")
    return status.value[:1].upper() + status.value[1:]


def status_options(targets) -> list:
    return sorted(
        ({"value": s.value, "label": CONSULTATION_LABELS.get(s, s.value.capitalize())} for s in targets),
        key=lambda o: o["value"],
    )
