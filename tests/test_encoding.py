"""Tests for serialized instruction decoding."""

import base64
import struct

import pytest

from proposalkit.encoding import PUBKEY_LENGTH, decode_instruction, encode_instruction
from proposalkit.errors import InstructionDecodeError
from proposalkit.types import AccountMeta, InstructionData


def _key(n: int) -> bytes:
    return bytes([n]) * PUBKEY_LENGTH


class TestDecodeInstruction:
    def test_decodes_layout(self):
        raw = (
            _key(1)
            + struct.pack("<I", 2)
            + _key(2) + b"\x01\x00"
            + _key(3) + b"\x00\x01"
            + struct.pack("<I", 3) + b"abc"
        )
        ix = decode_instruction(base64.b64encode(raw).decode())
        assert ix.program_id == _key(1)
        assert ix.accounts == (
            AccountMeta(pubkey=_key(2), is_signer=True, is_writable=False),
            AccountMeta(pubkey=_key(3), is_signer=False, is_writable=True),
        )
        assert ix.data == b"abc"

    def test_encode_matches_decoder(self):
        ix = InstructionData(
            program_id=_key(9),
            accounts=(AccountMeta(pubkey=_key(4), is_writable=True),),
            data=b"\x00\x01\x02",
        )
        assert decode_instruction(encode_instruction(ix)) == ix

    def test_no_accounts_no_data(self):
        raw = _key(5) + struct.pack("<I", 0) + struct.pack("<I", 0)
        ix = decode_instruction(base64.b64encode(raw).decode())
        assert ix.accounts == ()
        assert ix.data == b""

    def test_rejects_non_base64(self):
        with pytest.raises(InstructionDecodeError, match="base64"):
            decode_instruction("not base64!!")

    def test_rejects_truncated_payload(self):
        raw = _key(1) + struct.pack("<I", 1) + _key(2)[:10]
        with pytest.raises(InstructionDecodeError, match="truncated"):
            decode_instruction(base64.b64encode(raw).decode())

    def test_rejects_trailing_bytes(self):
        raw = _key(1) + struct.pack("<I", 0) + struct.pack("<I", 1) + b"x" + b"extra"
        with pytest.raises(InstructionDecodeError, match="trailing"):
            decode_instruction(base64.b64encode(raw).decode())

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_instruction("")


class TestEncodeInstruction:
    def test_rejects_short_program_id(self):
        with pytest.raises(ValueError, match="program id"):
            encode_instruction(InstructionData(program_id=b"short"))

    def test_rejects_short_account_key(self):
        ix = InstructionData(program_id=_key(1), accounts=(AccountMeta(pubkey=b"x"),))
        with pytest.raises(ValueError, match="pubkey"):
            encode_instruction(ix)
