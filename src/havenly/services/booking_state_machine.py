"""Booking state machine: validates status transitions and who may drive them.

pending -> approved      host pre-approves the stay
pending -> paid          host confirms the collected payment
approved -> paid
pending/approved -> cancelled

paid and cancelled are terminal; refunds are not modelled, so a paid
booking cannot be cancelled.
"""

from havenly.domain.enums import BookingActor, BookingDecision, BookingStatus
from havenly.domain.errors import HavenlyError


class InvalidTransitionError(HavenlyError):
    """Raised when a booking state transition is not allowed."""

    def __init__(
        self,
        current_status: BookingStatus,
        target_status: BookingStatus,
        reason: str,
    ):
        self.current_status = current_status
        self.target_status = target_status
        self.reason = reason
        super().__init__(
            f"Invalid transition from {current_status.value} to {target_status.value}: {reason}"
        )


S = BookingStatus
A = BookingActor

TRANSITION_MAP: dict[BookingStatus, dict[BookingStatus, set[BookingActor]]] = {
    S.PENDING: {
        S.APPROVED: {A.HOST, A.ADMIN},
        S.PAID: {A.HOST, A.ADMIN},
        S.CANCELLED: {A.HOST, A.ADMIN},
    },
    S.APPROVED: {
        S.PAID: {A.HOST, A.ADMIN},
        S.CANCELLED: {A.HOST, A.ADMIN},
    },
}

TERMINAL_STATES: set[BookingStatus] = {S.PAID, S.CANCELLED}

INITIAL_STATE = S.PENDING

DECISION_TARGETS: dict[BookingDecision, BookingStatus] = {
    BookingDecision.APPROVE: S.APPROVED,
    BookingDecision.APPROVE_PAYMENT: S.PAID,
    BookingDecision.CANCEL: S.CANCELLED,
}


class BookingStateMachine:
    """Validates booking state transitions."""

    def validate_transition(
        self,
        current_status: BookingStatus,
        target_status: BookingStatus,
        actor: BookingActor,
    ) -> bool:
        """Return True if the transition is valid. Raise InvalidTransitionError if not."""
        if current_status in TERMINAL_STATES:
            raise InvalidTransitionError(
                current_status,
                target_status,
                f"{current_status.value} is a terminal state",
            )

        allowed_targets = TRANSITION_MAP.get(current_status, {})
        if target_status not in allowed_targets:
            raise InvalidTransitionError(
                current_status,
                target_status,
                f"Transition from {current_status.value} to {target_status.value} is not allowed",
            )

        allowed_actors = allowed_targets[target_status]
        if actor not in allowed_actors:
            raise InvalidTransitionError(
                current_status,
                target_status,
                f"Actor {actor.value} is not permitted for this transition "
                f"(allowed: {', '.join(sorted(a.value for a in allowed_actors))})",
            )

        return True

    def target_for(self, decision: BookingDecision) -> BookingStatus:
        return DECISION_TARGETS[decision]

    def get_allowed_transitions(
        self,
        current_status: BookingStatus,
        actor: BookingActor,
    ) -> list[BookingStatus]:
        """Return list of valid next states for the given actor from the current status."""
        allowed_targets = TRANSITION_MAP.get(current_status, {})
        return [target for target, actors in allowed_targets.items() if actor in actors]

    def get_allowed_decisions(
        self,
        current_status: BookingStatus,
        actor: BookingActor,
    ) -> list[BookingDecision]:
        targets = set(self.get_allowed_transitions(current_status, actor))
        return [decision for decision, target in DECISION_TARGETS.items() if target in targets]
