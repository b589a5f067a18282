"""Tests for instruction type eligibility."""

from proposalkit.eligibility import allowed_types, ineligible_slots, is_type_allowed
from proposalkit.instructions import InstructionTypeRegistry, Instructions
from proposalkit.types import Governance, GovernanceAccountType, InstructionSlot


def _gov(kind: GovernanceAccountType) -> Governance:
    return Governance(pubkey="gov", account_type=kind)


class TestAllowedTypes:
    def test_first_slot_unrestricted_under_program_governance(self):
        registry = InstructionTypeRegistry.with_defaults()
        gov = _gov(GovernanceAccountType.PROGRAM_GOVERNANCE_V2)
        assert allowed_types(0, registry, gov) == registry.list()

    def test_later_slots_narrowed_under_program_governance(self):
        registry = InstructionTypeRegistry.with_defaults()
        for kind in (
            GovernanceAccountType.PROGRAM_GOVERNANCE_V1,
            GovernanceAccountType.PROGRAM_GOVERNANCE_V2,
        ):
            ids = [t.id for t in allowed_types(1, registry, _gov(kind))]
            assert ids == [Instructions.BASE64.value]

    def test_narrowed_set_is_strict_subset(self):
        registry = InstructionTypeRegistry.with_defaults()
        gov = _gov(GovernanceAccountType.PROGRAM_GOVERNANCE_V1)
        narrowed = {t.id for t in allowed_types(1, registry, gov)}
        full = {t.id for t in allowed_types(0, registry, gov)}
        assert narrowed < full
        assert Instructions.TRANSFER.value not in narrowed

    def test_other_governance_kinds_unrestricted(self):
        registry = InstructionTypeRegistry.with_defaults()
        for kind in (
            GovernanceAccountType.ACCOUNT_GOVERNANCE,
            GovernanceAccountType.MINT_GOVERNANCE_V2,
            GovernanceAccountType.TOKEN_GOVERNANCE_V1,
        ):
            assert allowed_types(3, registry, _gov(kind)) == registry.list()

    def test_no_governance_unrestricted(self):
        registry = InstructionTypeRegistry.with_defaults()
        assert allowed_types(2, registry, None) == registry.list()

    def test_custom_allow_list(self):
        registry = InstructionTypeRegistry.with_defaults(
            available_after_program_governance=["base64", "program-upgrade"],
        )
        gov = _gov(GovernanceAccountType.PROGRAM_GOVERNANCE_V2)
        ids = [t.id for t in allowed_types(1, registry, gov)]
        assert ids == ["program-upgrade", "base64"]


class TestIneligibleSlots:
    def test_reports_slots_outside_allowed_set(self):
        registry = InstructionTypeRegistry.with_defaults()
        gov = _gov(GovernanceAccountType.PROGRAM_GOVERNANCE_V2)
        slots = [
            InstructionSlot(type=registry.resolve("program-upgrade")),
            InstructionSlot(type=registry.resolve("base64")),
            InstructionSlot(type=registry.resolve("transfer")),
            InstructionSlot(),
        ]
        assert ineligible_slots(slots, gov) == [2]

    def test_is_type_allowed(self):
        registry = InstructionTypeRegistry.with_defaults()
        gov = _gov(GovernanceAccountType.PROGRAM_GOVERNANCE_V1)
        assert is_type_allowed(registry.resolve("base64"), gov)
        assert not is_type_allowed(registry.resolve("mint"), gov)
        assert is_type_allowed(registry.resolve("mint"), None)
