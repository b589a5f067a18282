"""Proposal documents: a JSON description of a whole proposal.

A document names the proposal, lists the governances it may use and the
instruction slots in order::

    {
      "title": "Pay the auditors",
      "description": "Q3 invoice",
      "vote_by_council": false,
      "governances": [
        {"pubkey": "Gov1...", "account_type": "token_governance_v2",
         "config": {"min_instruction_hold_up_time": 86400}}
      ],
      "slots": [
        {"type": "base64", "governance": "Gov1...",
         "result": {"serialized_instruction": "<base64>", "custom_hold_up_time": 2}}
      ]
    }

Slots are applied in order, each through the composer's public API, so the
same eligibility and reset rules hold as in an interactive session.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from proposalkit.composer import ProposalComposer
from proposalkit.offline import GovernanceBook
from proposalkit.types import Governance

__all__ = ["apply_plan", "build_governance_book", "load_plan"]


def load_plan(path: Path) -> dict[str, Any]:
    """Read a proposal document.

    Raises:
        ValueError: If the file is not a JSON object with a ``slots`` list
            of objects, or a slot's ``result`` is not an object.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("proposal document must be a JSON object")
    slots = data.get("slots", [])
    if not isinstance(slots, list):
        raise ValueError("'slots' must be a list")
    for index, entry in enumerate(slots):
        if not isinstance(entry, dict):
            raise ValueError(f"slot {index} must be an object, got {entry!r}")
        if not isinstance(entry.get("result", {}), (dict, type(None))):
            raise ValueError(f"slot {index}: 'result' must be an object")
    governances = data.get("governances", [])
    if not isinstance(governances, list) or not all(isinstance(g, dict) for g in governances):
        raise ValueError("'governances' must be a list of objects")
    return data


def build_governance_book(plan: dict[str, Any]) -> GovernanceBook:
    return GovernanceBook(Governance.from_dict(g) for g in plan.get("governances", []))


def apply_plan(composer: ProposalComposer, plan: dict[str, Any], book: GovernanceBook) -> None:
    """Fill a fresh composer from a proposal document."""
    for name in ("title", "description", "vote_by_council"):
        if name in plan:
            composer.set_form_field(name, plan[name])

    for index, entry in enumerate(plan.get("slots", [])):
        if index > 0:
            composer.add_instruction()
        governance = _governance_for(entry.get("governance"), book)
        if governance is not None:
            composer.set_governed_account(index, governance)
        composer.set_instruction_type(index, entry.get("type"))
        result = entry.get("result")
        if result:
            composer.update_instruction(index, **result)


def _governance_for(ref: Any, book: GovernanceBook) -> Governance | None:
    if ref is None:
        return None
    if isinstance(ref, dict):
        known = book.get(str(ref.get("pubkey", "")))
        return known if known is not None else book.add(Governance.from_dict(ref))
    governance = book.get(str(ref))
    if governance is None:
        raise ValueError(f"slot references unknown governance {ref!r}")
    return governance
