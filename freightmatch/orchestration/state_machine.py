"""Canonical state transition tables for requests and payments."""

from __future__ import annotations

import enum
from collections.abc import Mapping

from freightmatch.core.exceptions import PreconditionFailed
from freightmatch.models.enums import PaymentStatus, RequestStatus


class InvalidTransitionError(PreconditionFailed):
    """Raised when a disallowed state transition is attempted."""

    error_code = "invalid_transition"


class StateMachine:
    """Explicit transition table over a closed enumeration of states."""

    def __init__(self, name: str, transitions: Mapping[enum.Enum, frozenset[enum.Enum]]) -> None:
        self.name = name
        self._transitions = dict(transitions)

    def allowed_targets(self, current: enum.Enum) -> frozenset[enum.Enum]:
        return self._transitions.get(current, frozenset())

    def can_transition(self, current: enum.Enum, target: enum.Enum) -> bool:
        return target in self.allowed_targets(current)

    def assert_transition(self, current: enum.Enum, target: enum.Enum) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(
                f"{self.name} transition not allowed: {_value(current)} -> {_value(target)}"
            )

    def is_terminal(self, current: enum.Enum) -> bool:
        return not self.allowed_targets(current)

    def sources_for(self, target: enum.Enum) -> frozenset[enum.Enum]:
        """States from which ``target`` is reachable in one step."""
        return frozenset(state for state, targets in self._transitions.items() if target in targets)

    def covers(self, states: type[enum.Enum]) -> bool:
        return set(self._transitions) == set(states)


def _value(state: enum.Enum) -> str:
    return str(getattr(state, "value", state))


REQUEST_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.OPEN: frozenset(
        {
            RequestStatus.PUBLISHED_FOR_MATCHING,
            RequestStatus.ACCEPTED,
            RequestStatus.ARCHIVED,
            RequestStatus.CANCELLED,
            RequestStatus.EXPIRED,
        }
    ),
    RequestStatus.PUBLISHED_FOR_MATCHING: frozenset(
        {
            RequestStatus.ACCEPTED,
            RequestStatus.ARCHIVED,
            RequestStatus.CANCELLED,
            RequestStatus.EXPIRED,
        }
    ),
    RequestStatus.ACCEPTED: frozenset(
        {
            RequestStatus.IN_PROGRESS,
            RequestStatus.COMPLETED,
            RequestStatus.PUBLISHED_FOR_MATCHING,
            RequestStatus.CANCELLED,
        }
    ),
    RequestStatus.IN_PROGRESS: frozenset({RequestStatus.COMPLETED}),
    RequestStatus.COMPLETED: frozenset({RequestStatus.PUBLISHED_FOR_MATCHING}),
    RequestStatus.CANCELLED: frozenset(),
    RequestStatus.EXPIRED: frozenset(),
    RequestStatus.ARCHIVED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.NOT_REQUIRED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.PENDING: frozenset({PaymentStatus.AWAITING_PAYMENT, PaymentStatus.PENDING_ADMIN_VALIDATION}),
    PaymentStatus.AWAITING_PAYMENT: frozenset({PaymentStatus.PENDING_ADMIN_VALIDATION}),
    PaymentStatus.PENDING_ADMIN_VALIDATION: frozenset({PaymentStatus.PAID, PaymentStatus.AWAITING_PAYMENT}),
    PaymentStatus.PAID: frozenset(),
}

# States a request has once some transporter won a selection.
MATCHED_STATUSES = frozenset({RequestStatus.ACCEPTED, RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED})

request_state_machine = StateMachine("request", REQUEST_TRANSITIONS)
payment_state_machine = StateMachine("payment", PAYMENT_TRANSITIONS)

assert request_state_machine.covers(RequestStatus), "every request status needs a transition entry"
assert payment_state_machine.covers(PaymentStatus), "every payment status needs a transition entry"
