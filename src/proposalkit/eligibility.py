"""Which instruction types a slot may select.

The first slot picks the governance, so it may choose any type.  Later
slots are narrowed by the governance's kind: under a program governance
only the types marked available after program governance remain.

The filter is read-only.  A slot whose current type falls outside its
allowed set is reported by :func:`ineligible_slots`; re-selecting is up to
the caller.
"""

from __future__ import annotations

from typing import Iterable

from proposalkit.instructions import InstructionType, InstructionTypeRegistry
from proposalkit.types import Governance, InstructionSlot

__all__ = ["allowed_types", "ineligible_slots", "is_type_allowed"]


def is_type_allowed(instruction_type: InstructionType, governance: Governance | None) -> bool:
    """Whether *instruction_type* may follow the first slot under *governance*."""
    if governance is None or not governance.is_program_governance:
        return True
    return instruction_type.available_after_program_governance


def allowed_types(
    index: int,
    registry: InstructionTypeRegistry,
    governance: Governance | None,
) -> list[InstructionType]:
    """Instruction types selectable at slot *index*."""
    types = registry.list()
    if index == 0:
        return types
    return [t for t in types if is_type_allowed(t, governance)]


def ineligible_slots(
    slots: Iterable[InstructionSlot],
    governance: Governance | None,
) -> list[int]:
    """Indices of slots whose selected type is no longer allowed."""
    out: list[int] = []
    for i, slot in enumerate(slots):
        if i == 0 or slot.type is None:
            continue
        if not is_type_allowed(slot.type, governance):
            out.append(i)
    return out
