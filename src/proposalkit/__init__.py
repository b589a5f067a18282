"""proposalkit: compose governance proposals from ordered instruction slots."""

__version__ = "0.1.0"

from proposalkit.types import (
    AccountMeta,
    CanonicalInstruction,
    Governance,
    GovernanceAccountType,
    GovernanceConfig,
    InstructionData,
    InstructionResult,
    InstructionSlot,
    ProposalRequest,
)
from proposalkit.errors import (
    AlreadyInProgress,
    DownstreamError,
    DownstreamSubmissionFailed,
    IneligibleInstruction,
    InstructionDecodeError,
    InstructionResolutionError,
    InvalidIndex,
    NoAuthoritySelected,
    ProposalKitError,
    StateError,
    UserInputError,
    ValidationFailed,
)
from proposalkit.units import get_timestamp_from_days
from proposalkit.encoding import decode_instruction, encode_instruction
from proposalkit.instructions import (
    AVAILABLE_AFTER_PROGRAM_GOVERNANCE,
    Instructions,
    InstructionType,
    InstructionTypeRegistry,
)
from proposalkit.editors import (
    Base64Editor,
    EditorContext,
    EmptyEditor,
    InstructionEditor,
    ReportedResultEditor,
)
from proposalkit.authority import AuthorityResolver, resolve_authority
from proposalkit.slots import SlotStore
from proposalkit.eligibility import allowed_types, ineligible_slots
from proposalkit.validation import FormValidation, ProposalForm, proposal_schema, validate_form
from proposalkit.assembly import assemble_instructions, resolve_hold_up_time
from proposalkit.submission import SubmissionController
from proposalkit.config import ComposerConfig, load_config
from proposalkit.composer import Notification, ProposalComposer
from proposalkit.offline import GovernanceBook, OfflineProposalCreator

__all__ = [
    "AVAILABLE_AFTER_PROGRAM_GOVERNANCE",
    "AccountMeta",
    "AlreadyInProgress",
    "AuthorityResolver",
    "Base64Editor",
    "CanonicalInstruction",
    "ComposerConfig",
    "DownstreamError",
    "DownstreamSubmissionFailed",
    "EditorContext",
    "EmptyEditor",
    "FormValidation",
    "Governance",
    "GovernanceAccountType",
    "GovernanceBook",
    "GovernanceConfig",
    "IneligibleInstruction",
    "InstructionData",
    "InstructionDecodeError",
    "InstructionEditor",
    "InstructionResolutionError",
    "InstructionResult",
    "InstructionSlot",
    "InstructionType",
    "InstructionTypeRegistry",
    "Instructions",
    "InvalidIndex",
    "NoAuthoritySelected",
    "Notification",
    "OfflineProposalCreator",
    "ProposalComposer",
    "ProposalForm",
    "ProposalKitError",
    "ProposalRequest",
    "ReportedResultEditor",
    "SlotStore",
    "StateError",
    "SubmissionController",
    "UserInputError",
    "ValidationFailed",
    "allowed_types",
    "assemble_instructions",
    "decode_instruction",
    "encode_instruction",
    "get_timestamp_from_days",
    "ineligible_slots",
    "load_config",
    "proposal_schema",
    "resolve_authority",
    "resolve_hold_up_time",
    "validate_form",
]
