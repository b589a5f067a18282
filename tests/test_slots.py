"""Tests for the slot store."""

import pytest

from proposalkit.authority import AuthorityResolver
from proposalkit.errors import InvalidIndex
from proposalkit.instructions import InstructionTypeRegistry, Instructions
from proposalkit.slots import SlotStore
from proposalkit.types import Governance, InstructionResult


def _store(n: int = 1, **kwargs) -> SlotStore:
    store = SlotStore(**kwargs)
    for _ in range(n):
        store.add_slot()
    return store


class TestAddRemove:
    def test_add_appends_unset_slot(self):
        store = _store(0)
        slot = store.add_slot()
        assert len(store) == 1
        assert store[0] is slot
        assert slot.type is None
        assert slot.result is None
        assert slot.is_unset

    def test_remove_shifts_later_slots(self):
        store = _store(3)
        first, _second, third = store.slots
        store.remove_slot(1)
        assert store.slots == (first, third)
        assert store.index_of(third) == 1

    def test_remove_out_of_range_is_noop(self):
        store = _store(2)
        before = store.slots
        store.remove_slot(5)
        store.remove_slot(-1)
        assert store.slots == before

    def test_remove_first_slot_allowed(self):
        store = _store(2)
        second = store[1]
        store.remove_slot(0)
        assert store.slots == (second,)

    def test_index_of_detached_slot_raises(self):
        store = _store(2)
        slot = store[1]
        store.remove_slot(1)
        with pytest.raises(ValueError):
            store.index_of(slot)


class TestSetSlotType:
    def test_replaces_type_and_clears_result(self):
        registry = InstructionTypeRegistry.with_defaults()
        store = _store(1)
        store.update_slot_result(0, {"is_valid": True, "serialized_instruction": "abc"})
        store.set_slot_type(0, registry.resolve(Instructions.MINT))
        assert store[0].type.id == "mint"
        assert store[0].result is None

    def test_keeps_slot_identity(self):
        registry = InstructionTypeRegistry.with_defaults()
        store = _store(1)
        slot = store[0]
        store.set_slot_type(0, registry.resolve("transfer"))
        assert store[0] is slot

    def test_keeps_governed_account(self):
        registry = InstructionTypeRegistry.with_defaults()
        gov = Governance(pubkey="gov-a")
        store = _store(1)
        store.set_governed_account(0, gov)
        store.set_slot_type(0, registry.resolve("transfer"))
        assert store[0].governed_account is gov

    def test_invalid_index(self):
        store = _store(1)
        with pytest.raises(InvalidIndex):
            store.set_slot_type(3, None)


class TestUpdateSlotResult:
    def test_partial_updates_merge(self):
        store = _store(1)
        store.update_slot_result(0, {"serialized_instruction": "abc"})
        store.update_slot_result(0, {"is_valid": True})
        result = store[0].result
        assert result.serialized_instruction == "abc"
        assert result.is_valid is True

    def test_later_update_overwrites_only_its_fields(self):
        store = _store(1)
        store.update_slot_result(0, {"serialized_instruction": "abc", "custom_hold_up_time": 3})
        store.update_slot_result(0, {"custom_hold_up_time": 5})
        assert store[0].result.serialized_instruction == "abc"
        assert store[0].result.custom_hold_up_time == 5

    def test_full_result_replaces(self):
        store = _store(1)
        store.update_slot_result(0, {"serialized_instruction": "abc"})
        store.update_slot_result(0, InstructionResult(is_valid=True))
        assert store[0].result.serialized_instruction is None
        assert store[0].result.is_valid is True

    def test_unknown_field_rejected(self):
        store = _store(1)
        with pytest.raises(ValueError, match="unknown"):
            store.update_slot_result(0, {"bogus": 1})

    def test_invalid_index(self):
        store = _store(1)
        with pytest.raises(InvalidIndex) as exc_info:
            store.update_slot_result(1, {"is_valid": True})
        assert exc_info.value.index == 1
        assert exc_info.value.size == 1


class TestAuthorityIntegration:
    def test_governance_from_first_slot_with_one(self):
        gov = Governance(pubkey="gov-b")
        store = _store(3)
        store.set_governed_account(2, gov)
        assert store.governance is gov

    def test_first_slot_change_discards_others(self):
        a, b = Governance(pubkey="gov-a"), Governance(pubkey="gov-b")
        store = _store(1)
        store.set_governed_account(0, a)
        store.add_slot()
        store.add_slot()
        assert len(store) == 3
        store.set_governed_account(0, b)
        assert len(store) == 1
        assert store.governance is b

    def test_later_slot_change_keeps_slots(self):
        a, b = Governance(pubkey="gov-a"), Governance(pubkey="gov-b")
        store = _store(1)
        store.set_governed_account(0, a)
        store.add_slot()
        store.set_governed_account(1, b)
        assert len(store) == 2
        assert store.governance is a

    def test_same_account_again_keeps_slots(self):
        a = Governance(pubkey="gov-a")
        store = _store(1)
        store.set_governed_account(0, a)
        store.add_slot()
        store.set_governed_account(0, a)
        assert len(store) == 2

    def test_equal_but_distinct_object_resets_in_identity_mode(self):
        store = _store(1)
        store.set_governed_account(0, Governance(pubkey="gov-a"))
        store.add_slot()
        store.set_governed_account(0, Governance(pubkey="gov-a"))
        assert len(store) == 1

    def test_address_mode_ignores_same_pubkey(self):
        store = _store(1, resolver=AuthorityResolver(reset_mode="address"))
        store.set_governed_account(0, Governance(pubkey="gov-a"))
        store.add_slot()
        store.set_governed_account(0, Governance(pubkey="gov-a"))
        assert len(store) == 2
        store.set_governed_account(0, Governance(pubkey="gov-b"))
        assert len(store) == 1

    def test_removing_first_slot_promotes_new_authority(self):
        a, b = Governance(pubkey="gov-a"), Governance(pubkey="gov-b")
        store = _store(1)
        store.set_governed_account(0, a)
        store.add_slot()
        store.set_governed_account(1, b)
        store.add_slot()
        store.remove_slot(0)
        # The new first slot carries a different account, which restarts the proposal.
        assert len(store) == 1
        assert store.governance is b

    def test_removing_first_slot_with_shared_account_keeps_slots(self):
        a = Governance(pubkey="gov-a")
        store = _store(1)
        store.set_governed_account(0, a)
        store.add_slot()
        store.set_governed_account(1, a)
        store.add_slot()
        store.remove_slot(0)
        assert len(store) == 2
        assert store.governance is a

    def test_empty_store_has_no_governance(self):
        store = _store(1)
        store.set_governed_account(0, Governance(pubkey="gov-a"))
        store.remove_slot(0)
        assert len(store) == 0
        assert store.governance is None
