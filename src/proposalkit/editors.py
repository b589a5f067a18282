"""Instruction editors — the per-type producers of instruction results.

Each slot mounts one editor for its selected type.  While the proposer
edits, the editor reports partial results to the slot store through its
:class:`EditorContext`.  At submission time the composer awaits
``get_instruction()`` on every mounted editor to obtain the final result.

The protocol-specific editors (token transfers, program upgrades, lending
operations, ...) live outside proposalkit; they only need to satisfy
:class:`InstructionEditor`.  The editors here are the generic ones.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from proposalkit.encoding import decode_instruction
from proposalkit.errors import InstructionDecodeError
from proposalkit.types import Governance, InstructionResult, InstructionSlot
from proposalkit.units import get_days_from_timestamp

if TYPE_CHECKING:
    from proposalkit.slots import SlotStore

__all__ = [
    "Base64Editor",
    "EditorContext",
    "EmptyEditor",
    "InstructionEditor",
    "ReportedResultEditor",
]


@runtime_checkable
class InstructionEditor(Protocol):
    """What the composer needs from an editor."""

    async def get_instruction(self) -> InstructionResult: ...


class EditorContext:
    """Request-scoped view of one slot, handed to editor factories.

    The context follows its slot, not a fixed position: if an earlier slot
    is removed, :attr:`index` shifts with it.
    """

    def __init__(self, store: SlotStore, slot: InstructionSlot) -> None:
        self._store = store
        self._slot = slot

    @property
    def index(self) -> int:
        return self._store.index_of(self._slot)

    @property
    def slot(self) -> InstructionSlot:
        return self._slot

    @property
    def governance(self) -> Governance | None:
        """The proposal's resolved governance (from the first slot that has one)."""
        return self._store.governance

    @property
    def governed_account(self) -> Governance | None:
        """The governance this slot's instruction acts under."""
        return self._slot.governed_account

    @property
    def result(self) -> InstructionResult | None:
        return self._slot.result

    def report(self, **fields: Any) -> None:
        """Merge fields into this slot's result."""
        self._store.update_slot_result(self.index, fields)

    def set_governed_account(self, governance: Governance | None) -> None:
        self._store.set_governed_account(self.index, governance)


class ReportedResultEditor:
    """Answers with whatever has been reported for the slot so far.

    This is the editor for types whose encoding happens outside the process
    (a UI, an HTTP client, a proposal document): the reported result is
    the instruction.
    """

    def __init__(self, context: EditorContext) -> None:
        self.context = context

    async def get_instruction(self) -> InstructionResult:
        result = self.context.result
        if result is None:
            return InstructionResult(is_valid=False)
        return replace(result)


class EmptyEditor:
    """The "none" instruction: selects a governance and carries no payload."""

    def __init__(self, context: EditorContext) -> None:
        self.context = context

    async def get_instruction(self) -> InstructionResult:
        return InstructionResult(
            is_valid=self.context.governed_account is not None,
            serialized_instruction="",
        )


class Base64Editor:
    """A custom instruction supplied as a base64 serialized payload.

    The proposer reports ``serialized_instruction`` and optionally
    ``custom_hold_up_time`` (days).  The result is valid when a governance
    is selected, the payload decodes, and the hold-up is not shorter than
    the governance's minimum.
    """

    def __init__(self, context: EditorContext) -> None:
        self.context = context

    def validate(self) -> dict[str, str]:
        """Field errors of the reported result, keyed by field; empty when valid."""
        errors: dict[str, str] = {}
        reported = self.context.result or InstructionResult()
        governance = self.context.governed_account

        if governance is None:
            errors["governed_account"] = "Governed account is required"

        if not reported.serialized_instruction:
            errors["base64"] = "Instruction is required"
        else:
            try:
                decode_instruction(reported.serialized_instruction)
            except InstructionDecodeError as exc:
                errors["base64"] = f"Invalid serialized instruction: {exc}"

        hold_up = reported.custom_hold_up_time
        if hold_up is not None and governance is not None:
            min_days = get_days_from_timestamp(governance.config.min_instruction_hold_up_time)
            if hold_up < min_days:
                errors["hold_up_time"] = f"Hold up time must be at least {min_days:g} days"

        return errors

    async def get_instruction(self) -> InstructionResult:
        reported = self.context.result or InstructionResult()
        errors = self.validate()
        return replace(
            reported,
            is_valid=not errors,
            serialized_instruction=reported.serialized_instruction or None,
        )
