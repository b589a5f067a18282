"""Core types for proposal composition.

Every component speaks this vocabulary. Governances are the authorities a
proposal executes under. Instruction results are what editors report for a
slot. Canonical instructions are the flattened, order-resolved units handed
to proposal creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from proposalkit.editors import InstructionEditor
    from proposalkit.instructions import InstructionType

__all__ = [
    "AccountMeta",
    "CanonicalInstruction",
    "Governance",
    "GovernanceAccountType",
    "GovernanceConfig",
    "InstructionData",
    "InstructionResult",
    "InstructionSlot",
    "ProposalRequest",
    "PROGRAM_GOVERNANCE_TYPES",
]


class GovernanceAccountType(Enum):
    """Kind of governance account a proposal executes under."""

    ACCOUNT_GOVERNANCE = auto()
    PROGRAM_GOVERNANCE_V1 = auto()
    PROGRAM_GOVERNANCE_V2 = auto()
    MINT_GOVERNANCE_V1 = auto()
    MINT_GOVERNANCE_V2 = auto()
    TOKEN_GOVERNANCE_V1 = auto()
    TOKEN_GOVERNANCE_V2 = auto()

    @classmethod
    def parse(cls, value: str | GovernanceAccountType) -> GovernanceAccountType:
        """Accept an enum member or a case-insensitive name (``program-governance-v2``)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"unknown governance account type {value!r} (valid: {valid})") from None


# Governances that control an upgradeable program's upgrade authority.
PROGRAM_GOVERNANCE_TYPES = frozenset({
    GovernanceAccountType.PROGRAM_GOVERNANCE_V1,
    GovernanceAccountType.PROGRAM_GOVERNANCE_V2,
})


@dataclass(frozen=True)
class GovernanceConfig:
    """Voting and execution parameters of a governance."""

    min_instruction_hold_up_time: int = 0  # seconds
    max_voting_time: int = 3 * 24 * 60 * 60  # seconds
    vote_threshold_percentage: int = 60
    min_community_tokens_to_create_proposal: int = 1
    min_council_tokens_to_create_proposal: int = 1


@dataclass
class Governance:
    """The governing authority of a proposal.

    ``proposal_count`` changes every time a proposal is created under this
    governance, which is why the composer refreshes it right before
    submission.
    """

    pubkey: str
    account_type: GovernanceAccountType = GovernanceAccountType.ACCOUNT_GOVERNANCE
    config: GovernanceConfig = field(default_factory=GovernanceConfig)
    governed_account: str = ""
    realm: str = ""
    proposal_count: int = 0

    @property
    def is_program_governance(self) -> bool:
        return self.account_type in PROGRAM_GOVERNANCE_TYPES

    def to_dict(self) -> dict[str, Any]:
        return {
            "pubkey": self.pubkey,
            "account_type": self.account_type.name.lower(),
            "config": {
                "min_instruction_hold_up_time": self.config.min_instruction_hold_up_time,
                "max_voting_time": self.config.max_voting_time,
                "vote_threshold_percentage": self.config.vote_threshold_percentage,
                "min_community_tokens_to_create_proposal": self.config.min_community_tokens_to_create_proposal,
                "min_council_tokens_to_create_proposal": self.config.min_council_tokens_to_create_proposal,
            },
            "governed_account": self.governed_account,
            "realm": self.realm,
            "proposal_count": self.proposal_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Governance:
        if "pubkey" not in data:
            raise ValueError("governance requires a 'pubkey'")
        config_data = data.get("config") or {}
        config = GovernanceConfig(**{
            k: int(v) for k, v in config_data.items()
            if k in GovernanceConfig.__dataclass_fields__
        })
        return cls(
            pubkey=str(data["pubkey"]),
            account_type=GovernanceAccountType.parse(
                data.get("account_type", GovernanceAccountType.ACCOUNT_GOVERNANCE)
            ),
            config=config,
            governed_account=str(data.get("governed_account", "")),
            realm=str(data.get("realm", "")),
            proposal_count=int(data.get("proposal_count", 0)),
        )


@dataclass(frozen=True)
class AccountMeta:
    """An account referenced by an instruction."""

    pubkey: bytes
    is_signer: bool = False
    is_writable: bool = False


@dataclass(frozen=True)
class InstructionData:
    """A decoded instruction: the program to call, its accounts and raw data."""

    program_id: bytes
    accounts: tuple[AccountMeta, ...] = ()
    data: bytes = b""

    def to_dict(self) -> dict[str, Any]:
        return {
            "program_id": self.program_id.hex(),
            "accounts": [
                {
                    "pubkey": a.pubkey.hex(),
                    "is_signer": a.is_signer,
                    "is_writable": a.is_writable,
                }
                for a in self.accounts
            ],
            "data": self.data.hex(),
        }


@dataclass
class InstructionResult:
    """What an instruction editor reports for its slot.

    Payloads are opaque base64 strings until assembly decodes them.
    ``custom_hold_up_time`` is expressed in days.
    """

    is_valid: bool = False
    serialized_instruction: str | None = None
    additional_serialized_instructions: list[str] = field(default_factory=list)
    custom_hold_up_time: float | None = None
    chunk_split_by_default: bool | None = None
    should_split_into_separate_txs: bool | None = None
    signers: list[str] | None = None
    prerequisite_instructions: list[Any] | None = None

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(cls.__dataclass_fields__)


@dataclass
class CanonicalInstruction:
    """One entry of the order-resolved instruction list of a proposal."""

    data: InstructionData
    hold_up_time: int  # seconds
    prerequisite_instructions: list[Any] = field(default_factory=list)
    chunk_split_by_default: bool = False
    signers: list[str] | None = None
    should_split_into_separate_txs: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data.to_dict(),
            "hold_up_time": self.hold_up_time,
            "prerequisite_instructions": list(self.prerequisite_instructions),
            "chunk_split_by_default": self.chunk_split_by_default,
            "signers": list(self.signers) if self.signers is not None else None,
            "should_split_into_separate_txs": self.should_split_into_separate_txs,
        }


@dataclass(eq=False)
class InstructionSlot:
    """One row of the composer.

    Identity matters: the store mutates slots in place and editors hold on
    to the slot object rather than its index, which shifts on removal.
    """

    type: InstructionType | None = None
    governed_account: Governance | None = None
    result: InstructionResult | None = None
    editor: InstructionEditor | None = None

    @property
    def is_unset(self) -> bool:
        return self.type is None


@dataclass
class ProposalRequest:
    """Everything the proposal-creation collaborator needs."""

    title: str
    description: str
    governance: Governance
    instructions: list[CanonicalInstruction]
    vote_by_council: bool = False
    is_draft: bool = False
