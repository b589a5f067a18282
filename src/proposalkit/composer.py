"""Proposal composer — the single entry point for building a proposal.

The composer owns the proposal form (title, description, voting body), the
slot store with its instruction editors, and the submission busy flags.

Submitting a proposal:

1. Refuse if a submission is already running
2. Validate the form fields
3. Await every mounted editor's instruction, slot by slot
4. Stop unless the form and every instruction are valid
5. Require a resolved governance
6. Flatten the instructions into the canonical list with hold-up times
7. Refresh the governance (its proposal count may have moved)
8. Hand everything to the proposal-creation collaborator
9. Return the new proposal's address

Nothing is committed before step 8, so every failure leaves the form as
it was and the proposer can simply try again.

Usage::

    composer = ProposalComposer(
        fetch_governance=rpc.fetch_governance,
        create_proposal=governance_client.create_proposal,
    )
    composer.set_form_field("title", "Fund the grants programme")
    composer.set_instruction_type(0, Instructions.BASE64)
    composer.set_governed_account(0, treasury)
    composer.update_instruction(0, serialized_instruction=blob)

    address = await composer.submit(is_draft=False)
    redirect(composer.proposal_url(address))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from proposalkit.assembly import Decoder, assemble_instructions
from proposalkit.authority import AuthorityResolver
from proposalkit.config import ComposerConfig
from proposalkit.editors import EditorContext
from proposalkit.eligibility import allowed_types, ineligible_slots, is_type_allowed
from proposalkit.encoding import decode_instruction
from proposalkit.errors import (
    DownstreamSubmissionFailed,
    IneligibleInstruction,
    InstructionResolutionError,
    NoAuthoritySelected,
    ProposalKitError,
    ValidationFailed,
)
from proposalkit.instructions import InstructionType, InstructionTypeRegistry
from proposalkit.slots import SlotStore
from proposalkit.submission import SubmissionController
from proposalkit.types import (
    CanonicalInstruction,
    Governance,
    InstructionResult,
    InstructionSlot,
    ProposalRequest,
)
from proposalkit.validation import FormSchema, ProposalForm, proposal_schema

__all__ = [
    "GovernanceFetcher",
    "Notification",
    "Notifier",
    "ProposalComposer",
    "ProposalCreator",
]

logger = logging.getLogger(__name__)

GovernanceFetcher = Callable[[str], Awaitable[Governance]]
ProposalCreator = Callable[[ProposalRequest], Awaitable[str]]


@dataclass(frozen=True)
class Notification:
    """A message for the proposer (a toast, in a UI)."""

    type: str  # "error" or "success"
    message: str


Notifier = Callable[[Notification], None]


class ProposalComposer:
    """Composes a proposal out of instruction slots and submits it."""

    def __init__(
        self,
        *,
        fetch_governance: GovernanceFetcher,
        create_proposal: ProposalCreator,
        registry: InstructionTypeRegistry | None = None,
        config: ComposerConfig | None = None,
        notify: Notifier | None = None,
        decoder: Decoder = decode_instruction,
        schema: FormSchema | None = None,
    ) -> None:
        """
        Args:
            fetch_governance: Returns the current state of a governance by pubkey.
            create_proposal: Creates the proposal and returns its address.
            registry: Instruction types and editors.  Defaults to the built-ins,
                      narrowed by ``config.program_governance_allow_list``.
            config: Composer configuration.
            notify: Receives error and success notifications.
            decoder: Turns a serialized instruction into ``InstructionData``.
            schema: Form validation schema.  Defaults to a required title
                    (unless ``config.require_title`` is off).
        """
        self.config = config or ComposerConfig()
        self.registry = registry or InstructionTypeRegistry.with_defaults(
            available_after_program_governance=self.config.program_governance_allow_list,
        )
        self.store = SlotStore(AuthorityResolver(self.config.authority_reset_mode))
        self.form = ProposalForm()
        self.form_errors: dict[str, str] = {}
        self.schema = schema or proposal_schema(require_title=self.config.require_title)
        self.submission = SubmissionController()
        self._fetch_governance = fetch_governance
        self._create_proposal = create_proposal
        self._notify = notify
        self._decoder = decoder

        self.store.add_slot()

    # ── State ───────────────────────────────────────────────────────

    @property
    def slots(self) -> tuple[InstructionSlot, ...]:
        return self.store.slots

    @property
    def governance(self) -> Governance | None:
        return self.store.governance

    @property
    def is_loading(self) -> bool:
        return self.submission.is_loading

    # ── Form ────────────────────────────────────────────────────────

    def set_form_field(self, name: str, value: Any) -> None:
        """Edit a form field; any pending field errors are cleared.

        ``None`` clears a text field.

        Raises:
            ValueError: If the field is unknown or ``vote_by_council`` is
                not a boolean.
        """
        self.form_errors = {}
        if name == "title":
            self.form.title = "" if value is None else str(value)
        elif name == "description":
            self.form.description = "" if value is None else str(value)
        elif name == "vote_by_council":
            if not isinstance(value, bool):
                raise ValueError(f"vote_by_council must be true or false, got {value!r}")
            self.form.vote_by_council = value and self.config.can_choose_who_vote
        else:
            raise ValueError(f"unknown form field {name!r}")

    # ── Slots ───────────────────────────────────────────────────────

    def add_instruction(self) -> int:
        """Append an empty slot and return its index."""
        self.store.add_slot()
        return len(self.store) - 1

    def remove_instruction(self, index: int) -> None:
        self.store.remove_slot(index)

    def set_instruction_type(self, index: int, type_id: str | InstructionType | None) -> None:
        """Select a type for a slot and mount a fresh editor for it.

        Raises:
            InvalidIndex: If there is no slot at *index*.
            ValueError: If the type is not registered.
            IneligibleInstruction: If the type is not allowed at *index*
                under the current governance.
        """
        slot = self.store[index]
        if type_id is None:
            self.store.set_slot_type(index, None)
            return
        type_ = self.registry.resolve(type_id)
        if index > 0 and not is_type_allowed(type_, self.governance):
            raise IneligibleInstruction(index, type_.id)
        self.store.set_slot_type(index, type_)
        editor = self.registry.create_editor(type_, EditorContext(self.store, slot))
        self.store.attach_editor(index, editor)

    def update_instruction(self, index: int, **fields: Any) -> InstructionResult:
        """Report (part of) a slot's instruction result."""
        return self.store.update_slot_result(index, fields)

    def set_governed_account(self, index: int, governance: Governance | None) -> None:
        self.store.set_governed_account(index, governance)

    def allowed_types(self, index: int) -> list[InstructionType]:
        return allowed_types(index, self.registry, self.governance)

    def ineligible_slots(self) -> list[int]:
        """Slots whose selected type must be re-selected under the current governance."""
        return ineligible_slots(self.store.slots, self.governance)

    # ── Submission ──────────────────────────────────────────────────

    async def get_instructions(self) -> list[tuple[int, InstructionResult]]:
        """Await every mounted editor in slot order.

        Slots without an editor are skipped.

        Raises:
            InstructionResolutionError: If an editor raises.
        """
        results: list[tuple[int, InstructionResult]] = []
        for index, slot in enumerate(self.store.slots):
            if slot.editor is None:
                continue
            try:
                result = await slot.editor.get_instruction()
            except ProposalKitError:
                raise
            except Exception as exc:
                raise InstructionResolutionError(index, str(exc)) from exc
            results.append((index, result))
        return results

    async def submit(self, is_draft: bool = False) -> str:
        """Validate, assemble and create the proposal.

        Returns:
            The new proposal's address.

        Raises:
            AlreadyInProgress: If another submission is running.
            ValidationFailed: If the form or an instruction is invalid;
                ``form_errors`` holds the field errors.
            InstructionResolutionError: If an editor raised.
            InstructionDecodeError: If a payload cannot be decoded.
            NoAuthoritySelected: If no slot resolved a governance.
            DownstreamSubmissionFailed: If refreshing the governance or
                creating the proposal failed.
        """
        self.form_errors = {}
        with self.submission.begin(is_draft):
            return await self._submit(is_draft)

    async def _submit(self, is_draft: bool) -> str:
        kind = "draft" if is_draft else "proposal"
        validation = self.schema.validate(self.form)
        results = await self.get_instructions()
        invalid_slots = [index for index, result in results if not result.is_valid]

        if not validation.is_valid or invalid_slots:
            self.form_errors = dict(validation.validation_errors)
            logger.info(
                "Not submitting %s: %d form error(s), invalid slot(s) %s",
                kind, len(self.form_errors), invalid_slots,
            )
            raise ValidationFailed(self.form_errors, invalid_slots)

        governance = self.governance
        if governance is None:
            self._send(Notification(type="error", message="No governance selected"))
            raise NoAuthoritySelected()

        instructions = self.assemble([result for _, result in results], governance)

        logger.info(
            "Submitting %s under governance %s with %d instruction(s)",
            kind, governance.pubkey, len(instructions),
        )
        try:
            refreshed = await self._fetch_governance(governance.pubkey)
            address = await self._create_proposal(ProposalRequest(
                title=self.form.title,
                description=self.form.description,
                governance=refreshed,
                instructions=instructions,
                vote_by_council=self.form.vote_by_council,
                is_draft=is_draft,
            ))
        except Exception as exc:
            logger.warning("Submitting %s failed: %s", kind, exc)
            self._send(Notification(type="error", message=str(exc)))
            raise DownstreamSubmissionFailed(str(exc)) from exc

        logger.info("Created %s %s", kind, address)
        self._send(Notification(type="success", message=f"Created {kind} {address}"))
        return address

    def assemble(
        self,
        results: list[InstructionResult],
        governance: Governance,
    ) -> list[CanonicalInstruction]:
        return assemble_instructions(results, governance, self._decoder)

    def proposal_url(self, address: str) -> str:
        """Where to navigate after a successful submission."""
        url = f"/dao/{self.config.symbol}/proposal/{address}"
        if self.config.cluster:
            url += f"?cluster={self.config.cluster}"
        return url

    def _send(self, notification: Notification) -> None:
        if self._notify is not None:
            self._notify(notification)
