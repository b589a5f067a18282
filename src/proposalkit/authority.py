"""Authority resolution — which governance a proposal executes under.

A proposal has at most one governance.  It is taken from the first slot,
in list order, whose instruction has selected a governed account.

Because the eligibility and meaning of every later slot depend on that
governance, a change of the *first* slot's governed account restarts the
proposal: every slot after index 0 is discarded.

The resolver holds no state of its own beyond what it needs to detect that
change.  The slot store calls :meth:`AuthorityResolver.recompute` at the
end of every mutation; the resolver never edits slots itself and performs
the reset through the store's public API.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from proposalkit.types import Governance, InstructionSlot

if TYPE_CHECKING:
    from proposalkit.slots import SlotStore

__all__ = ["AuthorityResolver", "RESET_MODES", "resolve_authority"]

logger = logging.getLogger(__name__)

RESET_MODES = ("identity", "address")


def resolve_authority(slots: Iterable[InstructionSlot]) -> Governance | None:
    """Return the governed account of the first slot that has one."""
    for slot in slots:
        if slot.governed_account is not None:
            return slot.governed_account
    return None


class AuthorityResolver:
    """Derives the proposal governance and enforces the reset rule."""

    def __init__(self, reset_mode: str = "identity") -> None:
        """
        Args:
            reset_mode: How a change of the first slot's governed account is
                        detected.  ``"identity"`` treats any new object as a
                        change; ``"address"`` only a different ``pubkey``.
        """
        if reset_mode not in RESET_MODES:
            raise ValueError(f"reset_mode must be one of {RESET_MODES}, got {reset_mode!r}")
        self.reset_mode = reset_mode
        self._first: Governance | None = None
        self._governance: Governance | None = None

    @property
    def governance(self) -> Governance | None:
        return self._governance

    def recompute(self, store: SlotStore) -> Governance | None:
        """Re-derive the governance after a store mutation.

        Resets the store to its first slot when that slot's governed account
        changed since the last call.
        """
        slots = store.slots
        first = slots[0].governed_account if slots else None
        if not self._same(self._first, first):
            previous = self._first
            self._first = first
            if len(slots) > 1:
                logger.info(
                    "Governance of the first instruction changed (%s -> %s); "
                    "discarding %d dependent instruction(s)",
                    _label(previous), _label(first), len(slots) - 1,
                )
                # Re-enters recompute with the same first account.
                store.reset_to_first_slot()
                return self._governance
        self._governance = resolve_authority(slots)
        return self._governance

    def _same(self, a: Governance | None, b: Governance | None) -> bool:
        if self.reset_mode == "identity":
            return a is b
        return (a.pubkey if a is not None else None) == (b.pubkey if b is not None else None)


def _label(governance: Governance | None) -> str:
    return governance.pubkey if governance is not None else "none"
