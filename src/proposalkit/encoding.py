"""Decode and encode serialized governance instructions.

Editors hand the composer base64 strings.  Each string is the borsh
serialization of a governance ``InstructionData``::

    program_id      32 bytes
    accounts        u32 count, then per account:
                        pubkey       32 bytes
                        is_signer    u8
                        is_writable  u8
    data            u32 length, then raw bytes

All integers are little-endian.
"""

from __future__ import annotations

import base64
import binascii
import struct

from proposalkit.errors import InstructionDecodeError
from proposalkit.types import AccountMeta, InstructionData

__all__ = ["PUBKEY_LENGTH", "decode_instruction", "encode_instruction"]

PUBKEY_LENGTH = 32

_U32 = struct.Struct("<I")
_ACCOUNT_FLAGS = struct.Struct("<??")


class _Reader:
    def __init__(self, buf: bytes) -> None:
        self._buf = buf
        self._pos = 0

    def take(self, n: int, what: str) -> bytes:
        end = self._pos + n
        if end > len(self._buf):
            raise InstructionDecodeError(
                f"truncated instruction: need {n} bytes for {what} at offset {self._pos}, "
                f"have {len(self._buf) - self._pos}"
            )
        chunk = self._buf[self._pos:end]
        self._pos = end
        return chunk

    def u32(self, what: str) -> int:
        return _U32.unpack(self.take(_U32.size, what))[0]

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos


def decode_instruction(encoded: str) -> InstructionData:
    """Decode a base64 serialized instruction.

    Raises:
        InstructionDecodeError: if the string is not base64 or the bytes do
            not follow the instruction layout exactly.
    """
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InstructionDecodeError(f"instruction is not valid base64: {exc}") from exc

    reader = _Reader(raw)
    program_id = reader.take(PUBKEY_LENGTH, "program id")

    accounts: list[AccountMeta] = []
    for i in range(reader.u32("account count")):
        pubkey = reader.take(PUBKEY_LENGTH, f"account {i} pubkey")
        is_signer, is_writable = _ACCOUNT_FLAGS.unpack(
            reader.take(_ACCOUNT_FLAGS.size, f"account {i} flags")
        )
        accounts.append(AccountMeta(pubkey=pubkey, is_signer=is_signer, is_writable=is_writable))

    data = reader.take(reader.u32("data length"), "data")
    if reader.remaining:
        raise InstructionDecodeError(f"{reader.remaining} trailing bytes after instruction data")

    return InstructionData(program_id=program_id, accounts=tuple(accounts), data=data)


def encode_instruction(instruction: InstructionData) -> str:
    """Serialize an instruction to the base64 form editors report."""
    if len(instruction.program_id) != PUBKEY_LENGTH:
        raise ValueError(f"program id must be {PUBKEY_LENGTH} bytes")
    parts = [instruction.program_id, _U32.pack(len(instruction.accounts))]
    for account in instruction.accounts:
        if len(account.pubkey) != PUBKEY_LENGTH:
            raise ValueError(f"account pubkey must be {PUBKEY_LENGTH} bytes")
        parts.append(account.pubkey)
        parts.append(_ACCOUNT_FLAGS.pack(account.is_signer, account.is_writable))
    parts.append(_U32.pack(len(instruction.data)))
    parts.append(instruction.data)
    return base64.b64encode(b"".join(parts)).decode("ascii")
