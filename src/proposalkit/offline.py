"""Offline collaborators: an in-memory governance book and a dry-run creator.

These stand in for the RPC client and the on-chain proposal creation when
a proposal is assembled without a network, as the CLI's ``plan`` command
does.  The dry-run creator derives a deterministic address from the
request so repeated runs of the same plan agree.
"""

from __future__ import annotations

import hashlib
from dataclasses import replace
from typing import Iterable

from proposalkit.types import Governance, ProposalRequest

__all__ = ["GovernanceBook", "OfflineProposalCreator", "derive_proposal_address"]


def derive_proposal_address(request: ProposalRequest) -> str:
    """Deterministic address for a proposal request."""
    digest = hashlib.sha256()
    digest.update(
        f"{request.governance.pubkey}|{request.governance.proposal_count}|"
        f"{request.title}|{int(request.is_draft)}|{int(request.vote_by_council)}".encode()
    )
    for instruction in request.instructions:
        digest.update(b"|")
        digest.update(instruction.data.program_id)
        digest.update(instruction.data.data)
        digest.update(str(instruction.hold_up_time).encode())
    return digest.hexdigest()[:32]


class GovernanceBook:
    """Governances by pubkey, answering refresh requests."""

    def __init__(self, governances: Iterable[Governance] = ()) -> None:
        self._governances: dict[str, Governance] = {}
        for governance in governances:
            self.add(governance)

    def add(self, governance: Governance) -> Governance:
        self._governances[governance.pubkey] = governance
        return governance

    def get(self, pubkey: str) -> Governance | None:
        return self._governances.get(pubkey)

    def __len__(self) -> int:
        return len(self._governances)

    async def fetch(self, pubkey: str) -> Governance:
        """Return a snapshot of the governance.

        Raises:
            LookupError: If the governance is not in the book.
        """
        governance = self._governances.get(pubkey)
        if governance is None:
            raise LookupError(f"Governance {pubkey} not found")
        return replace(governance)


class OfflineProposalCreator:
    """Records proposal requests instead of sending them.

    Each created proposal bumps the governance's ``proposal_count`` in the
    book, as creating a proposal on chain would.
    """

    def __init__(self, book: GovernanceBook | None = None) -> None:
        self.book = book
        self.requests: list[ProposalRequest] = []

    async def create(self, request: ProposalRequest) -> str:
        address = derive_proposal_address(request)
        self.requests.append(request)
        if self.book is not None:
            stored = self.book.get(request.governance.pubkey)
            if stored is not None:
                stored.proposal_count += 1
        return address
