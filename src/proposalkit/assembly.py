"""Flatten instruction results into the proposal's canonical instruction list.

Ordering: every slot's additional instructions come first, slot by slot and
in the order each slot listed them, followed by every slot's primary
instruction in slot order::

    a0[0] a0[1] a1[0] ... an[k]  p0 p1 ... pn

Additional instructions are the setup steps (account creation, refreshes)
that the primaries depend on, so they all execute before any primary.
Slots without a primary payload contribute only their additional ones.
"""

from __future__ import annotations

from typing import Callable, Iterable

from proposalkit.encoding import decode_instruction
from proposalkit.types import (
    CanonicalInstruction,
    Governance,
    InstructionData,
    InstructionResult,
)
from proposalkit.units import get_timestamp_from_days

__all__ = ["Decoder", "assemble_instructions", "resolve_hold_up_time"]

Decoder = Callable[[str], InstructionData]


def resolve_hold_up_time(result: InstructionResult, governance: Governance) -> int:
    """Seconds an approved instruction must wait before execution.

    A custom hold-up (days) wins when set and non-zero; otherwise the
    governance minimum applies.
    """
    if result.custom_hold_up_time:
        return get_timestamp_from_days(result.custom_hold_up_time)
    return governance.config.min_instruction_hold_up_time


def assemble_instructions(
    results: Iterable[InstructionResult],
    governance: Governance,
    decoder: Decoder = decode_instruction,
) -> list[CanonicalInstruction]:
    """Build the canonical list from slot results, in slot order."""
    results = list(results)
    additional: list[CanonicalInstruction] = []
    primary: list[CanonicalInstruction] = []

    for result in results:
        hold_up_time = resolve_hold_up_time(result, governance)
        for encoded in result.additional_serialized_instructions or ():
            if not encoded:
                continue
            additional.append(CanonicalInstruction(
                data=decoder(encoded),
                hold_up_time=hold_up_time,
                prerequisite_instructions=[],
                chunk_split_by_default=result.chunk_split_by_default or False,
                signers=result.signers,
                should_split_into_separate_txs=result.should_split_into_separate_txs,
            ))

    for result in results:
        if not result.serialized_instruction:
            continue
        primary.append(CanonicalInstruction(
            data=decoder(result.serialized_instruction),
            hold_up_time=resolve_hold_up_time(result, governance),
            prerequisite_instructions=list(result.prerequisite_instructions or []),
            chunk_split_by_default=result.chunk_split_by_default or False,
            signers=result.signers,
            should_split_into_separate_txs=result.should_split_into_separate_txs,
        ))

    return additional + primary
