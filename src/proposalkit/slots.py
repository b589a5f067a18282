"""Slot store — the ordered collection of instruction slots.

The store exclusively owns the slots.  Slots are addressed by position;
removing one shifts every later slot down.  Every mutation finishes by
asking the :class:`~proposalkit.authority.AuthorityResolver` to re-derive
the proposal governance, which may in turn reset the store to its first
slot.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Iterator, Mapping

from proposalkit.authority import AuthorityResolver
from proposalkit.errors import InvalidIndex
from proposalkit.types import Governance, InstructionResult, InstructionSlot

if TYPE_CHECKING:
    from proposalkit.editors import InstructionEditor
    from proposalkit.instructions import InstructionType

__all__ = ["SlotStore"]

logger = logging.getLogger(__name__)


class SlotStore:
    """Ordered, index-addressed instruction slots.

    Usage::

        store = SlotStore()
        store.add_slot()
        store.set_slot_type(0, registry.resolve("transfer"))
        store.set_governed_account(0, treasury_governance)
        store.update_slot_result(0, {"is_valid": True, "serialized_instruction": blob})
    """

    def __init__(self, resolver: AuthorityResolver | None = None) -> None:
        self._slots: list[InstructionSlot] = []
        self._resolver = resolver or AuthorityResolver()

    # ── Reading ──────────────────────────────────────────────────────

    @property
    def slots(self) -> tuple[InstructionSlot, ...]:
        return tuple(self._slots)

    @property
    def governance(self) -> Governance | None:
        """Governance of the first slot that has one, or ``None``."""
        return self._resolver.governance

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[InstructionSlot]:
        return iter(tuple(self._slots))

    def __getitem__(self, index: int) -> InstructionSlot:
        return self._slots[self._check(index)]

    def index_of(self, slot: InstructionSlot) -> int:
        """Current position of *slot*.

        Raises:
            ValueError: If the slot is no longer in the store.
        """
        for i, candidate in enumerate(self._slots):
            if candidate is slot:
                return i
        raise ValueError("instruction slot is no longer part of the proposal")

    # ── Mutations ────────────────────────────────────────────────────

    def add_slot(self) -> InstructionSlot:
        """Append an unset slot."""
        slot = InstructionSlot()
        self._slots.append(slot)
        logger.debug("Added instruction slot %d", len(self._slots) - 1)
        self._changed()
        return slot

    def remove_slot(self, index: int) -> None:
        """Remove the slot at *index*; out-of-range indices are ignored."""
        if not 0 <= index < len(self._slots):
            return
        del self._slots[index]
        logger.debug("Removed instruction slot %d", index)
        self._changed()

    def set_slot_type(self, index: int, type_: InstructionType | None) -> None:
        """Select a new type for a slot, dropping its result and editor."""
        slot = self._slots[self._check(index)]
        slot.type = type_
        slot.result = None
        slot.editor = None
        self._changed()

    def update_slot_result(
        self,
        index: int,
        partial: Mapping[str, Any] | InstructionResult,
    ) -> InstructionResult:
        """Shallow-merge *partial* into the slot's result.

        Only the given fields are overwritten.  An ``InstructionResult``
        replaces the result wholesale.

        Raises:
            InvalidIndex: If *index* is out of range.
            ValueError: If *partial* names a field results do not have.
        """
        slot = self._slots[self._check(index)]
        if isinstance(partial, InstructionResult):
            slot.result = replace(partial)
        else:
            unknown = set(partial) - InstructionResult.field_names()
            if unknown:
                raise ValueError(
                    f"unknown instruction result fields: {', '.join(sorted(unknown))}"
                )
            slot.result = replace(slot.result or InstructionResult(), **partial)
        self._changed()
        return slot.result

    def set_governed_account(self, index: int, governance: Governance | None) -> None:
        """Record the governance a slot's instruction acts under."""
        slot = self._slots[self._check(index)]
        slot.governed_account = governance
        self._changed()

    def attach_editor(self, index: int, editor: InstructionEditor | None) -> None:
        slot = self._slots[self._check(index)]
        slot.editor = editor
        self._changed()

    def reset_to_first_slot(self) -> None:
        """Discard every slot after index 0."""
        if len(self._slots) <= 1:
            return
        del self._slots[1:]
        self._changed()

    # ── Internal helpers ─────────────────────────────────────────────

    def _check(self, index: int) -> int:
        if not 0 <= index < len(self._slots):
            raise InvalidIndex(index, len(self._slots))
        return index

    def _changed(self) -> None:
        self._resolver.recompute(self)
