"""Tests for the generic instruction editors."""

import asyncio

from proposalkit.editors import (
    Base64Editor,
    EditorContext,
    EmptyEditor,
    InstructionEditor,
    ReportedResultEditor,
)
from proposalkit.encoding import encode_instruction
from proposalkit.slots import SlotStore
from proposalkit.types import Governance, GovernanceConfig, InstructionData


def _blob(n: int = 1) -> str:
    return encode_instruction(InstructionData(program_id=bytes([n]) * 32, data=bytes([n])))


def _context(governance: Governance | None = None) -> EditorContext:
    store = SlotStore()
    slot = store.add_slot()
    if governance is not None:
        store.set_governed_account(0, governance)
    return EditorContext(store, slot)


def _gov(min_days: int = 0) -> Governance:
    return Governance(
        pubkey="gov",
        config=GovernanceConfig(min_instruction_hold_up_time=min_days * 86400),
    )


class TestEditorContext:
    def test_report_merges_into_slot(self):
        ctx = _context()
        ctx.report(serialized_instruction="abc")
        ctx.report(is_valid=True)
        assert ctx.result.serialized_instruction == "abc"
        assert ctx.result.is_valid

    def test_index_follows_slot(self):
        store = SlotStore()
        store.add_slot()
        slot = store.add_slot()
        ctx = EditorContext(store, slot)
        assert ctx.index == 1
        store.remove_slot(0)
        assert ctx.index == 0

    def test_governance_is_live(self):
        store = SlotStore()
        first = store.add_slot()
        second = store.add_slot()
        ctx = EditorContext(store, second)
        assert ctx.governance is None
        gov = _gov()
        store.set_governed_account(1, gov)
        assert ctx.governance is gov
        assert ctx.governed_account is gov
        assert EditorContext(store, first).governed_account is None

    def test_set_governed_account(self):
        ctx = _context()
        gov = _gov()
        ctx.set_governed_account(gov)
        assert ctx.slot.governed_account is gov


class TestReportedResultEditor:
    def test_nothing_reported_is_invalid(self):
        editor = ReportedResultEditor(_context())
        result = asyncio.run(editor.get_instruction())
        assert result.is_valid is False

    def test_returns_copy_of_reported(self):
        ctx = _context()
        ctx.report(is_valid=True, serialized_instruction="abc")
        result = asyncio.run(ReportedResultEditor(ctx).get_instruction())
        assert result == ctx.result
        assert result is not ctx.result

    def test_satisfies_protocol(self):
        assert isinstance(ReportedResultEditor(_context()), InstructionEditor)


class TestEmptyEditor:
    def test_valid_with_governance(self):
        result = asyncio.run(EmptyEditor(_context(_gov())).get_instruction())
        assert result.is_valid
        assert not result.serialized_instruction

    def test_invalid_without_governance(self):
        result = asyncio.run(EmptyEditor(_context()).get_instruction())
        assert not result.is_valid


class TestBase64Editor:
    def test_valid_payload(self):
        ctx = _context(_gov())
        ctx.report(serialized_instruction=_blob())
        editor = Base64Editor(ctx)
        result = asyncio.run(editor.get_instruction())
        assert result.is_valid
        assert result.serialized_instruction == _blob()
        assert editor.validate() == {}

    def test_missing_payload(self):
        editor = Base64Editor(_context(_gov()))
        result = asyncio.run(editor.get_instruction())
        assert not result.is_valid
        assert editor.validate()["base64"] == "Instruction is required"

    def test_undecodable_payload(self):
        ctx = _context(_gov())
        ctx.report(serialized_instruction="AAAA")
        editor = Base64Editor(ctx)
        assert not asyncio.run(editor.get_instruction()).is_valid
        assert "Invalid serialized instruction" in editor.validate()["base64"]

    def test_requires_governance(self):
        ctx = _context()
        ctx.report(serialized_instruction=_blob())
        editor = Base64Editor(ctx)
        assert not asyncio.run(editor.get_instruction()).is_valid
        assert "governed_account" in editor.validate()

    def test_hold_up_below_minimum(self):
        ctx = _context(_gov(min_days=3))
        ctx.report(serialized_instruction=_blob(), custom_hold_up_time=1)
        editor = Base64Editor(ctx)
        assert not asyncio.run(editor.get_instruction()).is_valid
        assert editor.validate()["hold_up_time"] == "Hold up time must be at least 3 days"

    def test_hold_up_at_minimum(self):
        ctx = _context(_gov(min_days=3))
        ctx.report(serialized_instruction=_blob(), custom_hold_up_time=3)
        assert asyncio.run(Base64Editor(ctx).get_instruction()).is_valid
