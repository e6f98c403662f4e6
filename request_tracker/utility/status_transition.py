"""Utility helpers for request status changes.

Approval links, the intake API and manual updates all go through the same
transition table so a stale email link cannot reopen or skip a decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

CANONICAL_STATUSES: list[str] = [
	"pending",
	"approved",
	"declined",
	"ordered",
	"completed",
]

DECISION_STATUSES: Mapping[str, str] = {
	"approve": "approved",
	"decline": "declined",
	"reject": "declined",
}


class StatusTransitionError(ValueError):
	"""Raised when an invalid transition is requested."""


@dataclass(frozen=True)
class TransitionDecision:
	"""Result of evaluating a status change request."""

	allowed: bool
	requested_status: str
	final_status: str
	reason: str | None = None


class StatusTransitionHelper:
	"""Encapsulates the status transition rules for submitted requests."""

	STATUSES = CANONICAL_STATUSES

	# Identity moves are listed explicitly so re-clicking a link is harmless.
	_BASE_TRANSITIONS: Mapping[str, set[str]] = {
		"pending": {"pending", "approved", "declined"},
		"approved": {"approved", "ordered", "completed", "declined"},
		"declined": {"declined", "pending"},
		"ordered": {"ordered", "completed"},
		"completed": {"completed"},
	}

	@classmethod
	def canonical_status(cls, status: str | None) -> str | None:
		if not isinstance(status, str):
			return None
		status = status.strip().lower()
		return status if status in cls.STATUSES else None

	@classmethod
	def is_valid_status(cls, status: str | None) -> bool:
		return cls.canonical_status(status) is not None

	@classmethod
	def status_for_decision(cls, decision: str | None) -> str | None:
		if not isinstance(decision, str):
			return None
		return DECISION_STATUSES.get(decision.strip().lower())

	@classmethod
	def allowed_targets(cls, current_status: str | None) -> set[str]:
		current = cls.canonical_status(current_status)
		if current is None:
			# Rows written by older forms may carry a blank status; treat them as pending.
			current = "pending"
		return set(cls._BASE_TRANSITIONS[current])

	@classmethod
	def evaluate_transition(
		cls,
		current_status: str | None,
		requested_status: str | None,
	) -> TransitionDecision:
		current = cls.canonical_status(current_status)
		desired = cls.canonical_status(requested_status)

		if desired is None:
			return TransitionDecision(
				allowed=False,
				requested_status=requested_status or "",
				final_status=current_status or "",
				reason="Invalid status value",
			)

		if desired not in cls.allowed_targets(current_status):
			reason = "Requested transition is not permitted"
			if current == "completed":
				reason = "Completed requests are final; submit a new request instead"
			elif current == "declined" and desired != "pending":
				reason = "Declined requests must be reopened before they can move forward"
			elif current == "ordered" and desired == "declined":
				reason = "Ordered requests can no longer be declined"
			return TransitionDecision(
				allowed=False,
				requested_status=desired,
				final_status=current_status or "",
				reason=reason,
			)

		return TransitionDecision(
			allowed=True,
			requested_status=desired,
			final_status=desired,
		)

	@classmethod
	def require_transition(cls, current_status: str | None, requested_status: str | None) -> TransitionDecision:
		decision = cls.evaluate_transition(current_status, requested_status)
		if not decision.allowed:
			raise StatusTransitionError(decision.reason or "Requested transition is not permitted")
		return decision

	@classmethod
	def filter_valid_statuses(cls, statuses: Iterable[str]) -> list[str]:
		return [status for status in statuses if cls.is_valid_status(status)]
