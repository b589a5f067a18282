"""Exceptions raised while composing and submitting proposals.

Three families, by who can fix the problem:

* ``UserInputError``: something the proposer typed or picked is wrong.
  The form stays as it is and the offending fields or slots are reported.
* ``StateError``: the composer is not in a state that allows the request
  (no governance resolved yet, a submission already running).
* ``DownstreamError``: a collaborator outside the composer failed.  The
  original exception is chained as ``__cause__``; retrying is safe because
  nothing was committed.
"""

from __future__ import annotations

__all__ = [
    "AlreadyInProgress",
    "DownstreamError",
    "DownstreamSubmissionFailed",
    "IneligibleInstruction",
    "InstructionDecodeError",
    "InstructionResolutionError",
    "InvalidIndex",
    "NoAuthoritySelected",
    "ProposalKitError",
    "StateError",
    "UserInputError",
    "ValidationFailed",
]


class ProposalKitError(Exception):
    """Base exception for proposalkit errors."""


# ── User input ─────────────────────────────────────────────────────────


class UserInputError(ProposalKitError):
    """Input the proposer can correct."""


class ValidationFailed(UserInputError):
    """The form or at least one instruction slot is invalid."""

    def __init__(
        self,
        errors: dict[str, str] | None = None,
        invalid_slots: list[int] | None = None,
    ) -> None:
        self.errors = dict(errors or {})
        self.invalid_slots = list(invalid_slots or [])
        parts: list[str] = []
        if self.errors:
            parts.append("; ".join(f"{k}: {v}" for k, v in sorted(self.errors.items())))
        if self.invalid_slots:
            parts.append(
                "invalid instructions at slot(s) "
                + ", ".join(str(i) for i in self.invalid_slots)
            )
        super().__init__("Validation failed: " + (" | ".join(parts) or "unknown reason"))


class InvalidIndex(UserInputError, IndexError):
    """A slot index does not address an existing slot."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"No instruction slot at index {index} (have {size})")


class IneligibleInstruction(UserInputError):
    """The instruction type may not be selected at this slot under the current governance."""

    def __init__(self, index: int, type_id: str) -> None:
        self.index = index
        self.type_id = type_id
        super().__init__(
            f"Instruction type '{type_id}' is not available at slot {index} "
            "under the selected governance"
        )


class InstructionDecodeError(UserInputError, ValueError):
    """An encoded instruction payload could not be decoded."""


class InstructionResolutionError(UserInputError):
    """An editor raised while producing its instruction."""

    def __init__(self, index: int, message: str) -> None:
        self.index = index
        super().__init__(f"Instruction {index + 1} could not be resolved: {message}")


# ── State ──────────────────────────────────────────────────────────────


class StateError(ProposalKitError):
    """The composer's current state does not permit the request."""


class NoAuthoritySelected(StateError):
    """No slot has resolved a governance to submit under."""

    def __init__(self) -> None:
        super().__init__("No governance selected")


class AlreadyInProgress(StateError):
    """A submission is already running for this composer."""

    def __init__(self) -> None:
        super().__init__("A proposal submission is already in progress")


# ── Downstream ─────────────────────────────────────────────────────────


class DownstreamError(ProposalKitError):
    """A collaborator outside the composer failed."""


class DownstreamSubmissionFailed(DownstreamError):
    """Refreshing the governance or creating the proposal failed."""
