#!/usr/bin/env python3
"""compose-proposal: build and submit a governance proposal in memory.

Run:
    python examples/compose_proposal.py

What happens:
    1. Sets up an in-memory governance book and a dry-run proposal creator
    2. Fills the proposal form and two custom (base64) instructions
    3. Submits with one invalid instruction -- nothing is sent
    4. Fixes it and submits again
    5. Changes the first instruction's governance -- the proposal restarts
    6. Tries a non-custom instruction under a program governance

No installation beyond ``pip install proposalkit`` required.
"""

from __future__ import annotations

import asyncio
import sys

from proposalkit import (
    GovernanceAccountType,
    IneligibleInstruction,
    ProposalComposer,
    ValidationFailed,
)
from proposalkit.encoding import encode_instruction
from proposalkit.offline import GovernanceBook, OfflineProposalCreator
from proposalkit.types import AccountMeta, Governance, GovernanceConfig, InstructionData

# ── ANSI colors (with no-color fallback) ──────────────────────────────

_NO_COLOR = not sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    if _NO_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def _bold(t: str) -> str:
    return _c("1", t)


def _green(t: str) -> str:
    return _c("32", t)


def _red(t: str) -> str:
    return _c("31", t)


def _step(n: int, text: str) -> None:
    print()
    print(_bold(f"  [{n}] {text}"))


def _info(text: str) -> None:
    print(f"      {text}")


def _payload(program: int, data: bytes) -> str:
    return encode_instruction(InstructionData(
        program_id=bytes([program]) * 32,
        accounts=(AccountMeta(pubkey=bytes([9]) * 32, is_writable=True),),
        data=data,
    ))


async def run_demo() -> None:
    treasury = Governance(
        pubkey="TreasuryGov111",
        account_type=GovernanceAccountType.TOKEN_GOVERNANCE_V2,
        config=GovernanceConfig(min_instruction_hold_up_time=86400),
    )
    upgrades = Governance(
        pubkey="ProgramGov222",
        account_type=GovernanceAccountType.PROGRAM_GOVERNANCE_V2,
    )
    book = GovernanceBook([treasury, upgrades])
    creator = OfflineProposalCreator(book)
    composer = ProposalComposer(
        fetch_governance=book.fetch,
        create_proposal=creator.create,
        notify=lambda n: _info(f"notification ({n.type}): {n.message}"),
    )

    _step(1, "Fill the form and two custom instructions")
    composer.set_form_field("title", "Pay the auditors")
    composer.set_governed_account(0, treasury)
    composer.set_instruction_type(0, "base64")
    composer.update_instruction(0, serialized_instruction=_payload(1, b"\x01"), custom_hold_up_time=2)
    composer.add_instruction()
    composer.set_governed_account(1, treasury)
    composer.set_instruction_type(1, "base64")
    composer.update_instruction(1, serialized_instruction=_payload(2, b"\x02"), custom_hold_up_time=0.5)
    _info(f"governance: {composer.governance.pubkey}, slots: {len(composer.slots)}")

    _step(2, "Submit with a hold-up shorter than the governance minimum")
    try:
        await composer.submit()
    except ValidationFailed as exc:
        _info(_red(f"rejected: {exc}"))
    _info(f"proposals created so far: {len(creator.requests)}")

    _step(3, "Fix the hold-up and submit")
    composer.update_instruction(1, custom_hold_up_time=1)
    address = await composer.submit()
    _info(_green(f"created {address}"))
    for i, instruction in enumerate(creator.requests[-1].instructions, 1):
        _info(f"  {i}. hold-up {instruction.hold_up_time}s, data {instruction.data.data.hex()}")

    _step(4, "Switch the first instruction to another governance")
    composer.set_governed_account(0, upgrades)
    _info(f"governance: {composer.governance.pubkey}, slots: {len(composer.slots)}")

    _step(5, "Add a token transfer under a program governance")
    composer.add_instruction()
    _info(f"allowed at slot 1: {[t.id for t in composer.allowed_types(1)]}")
    try:
        composer.set_instruction_type(1, "transfer")
    except IneligibleInstruction as exc:
        _info(_red(f"rejected: {exc}"))
    print()


if __name__ == "__main__":
    asyncio.run(run_demo())
