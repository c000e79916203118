# spincheck/core/codec.py
# Instruction codec for AArch64 words as printed by PrintAssembly without a
# disassembler: "1f20 03d5" is the little-endian memory image of 0xd503201f.

import struct
from typing import Union

from .domain import MAX_COUNTER_DELAY, SpinKind
from .exceptions import InvalidDelayError, MalformedHexError

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# add x8, x8, #0
ADD_X8_IMMEDIATE_BASE: int = 0x91000108
_ADD_IMM12_SHIFT: int = 10
_ADD_IMM12_MASK: int = 0xFFF << _ADD_IMM12_SHIFT
_ADD_LSL12_FLAG: int = 1 << 22

_SPIN_HEX = {
    SpinKind.NOP:   "1f20 03d5",
    SpinKind.ISB:   "df3f 03d5",
    SpinKind.YIELD: "3f20 03d5",
}

# Fixed members of the counter-delay idiom, hex and mnemonic forms.
MRS_X8_CNTVCT: str = "48e0 3bd5"
MRS_X9_CNTVCT: str = "49e0 3bd5"
CMP_X9_X8:     str = "3f01 08eb"
B_LT_BACK_12:  str = "abff ff54"   # b.lt {pc}-0xc

MRS_X8_CNTVCT_MNEMONIC: str = "mrs x8, cntvct_el0"
MRS_X9_CNTVCT_MNEMONIC: str = "mrs x9, cntvct_el0"
CMP_X9_X8_MNEMONIC:     str = "cmp x9, x8"
B_LT_MNEMONIC:          str = "b.lt"


def reverse_bytes(word: int) -> int:
    """Swap the byte order of a 32-bit word."""
    return struct.unpack("<I", struct.pack(">I", word & 0xFFFFFFFF))[0]


def decode_word(hex_token: str) -> int:
    """
    Convert "3d20 03d5" into the instruction word 0xd503203d.

    Raises MalformedHexError unless the token is exactly two groups of four
    hex digits separated by a single space.
    """
    if not isinstance(hex_token, str):
        raise MalformedHexError(repr(hex_token), "not a string")
    groups = hex_token.split(" ")
    if len(groups) != 2:
        raise MalformedHexError(hex_token, "expected two space-separated groups")
    for group in groups:
        if len(group) != 4:
            raise MalformedHexError(hex_token, "each group must have four digits")
        if not set(group) <= _HEX_DIGITS:
            raise MalformedHexError(hex_token, "non-hex character")
    return reverse_bytes(int("".join(groups), 16))


def encode_word(word: int) -> str:
    """Inverse of decode_word: 0xd503203d -> "3d20 03d5"."""
    image = "{:08x}".format(reverse_bytes(word))
    return image[:4] + " " + image[4:]


def encode_add_immediate(delay: int) -> int:
    """
    Build "add x8, x8, #delay".

    4096 does not fit imm12 and is encoded as #1, lsl #12.
    """
    if isinstance(delay, bool) or not isinstance(delay, int) or not (0 <= delay <= MAX_COUNTER_DELAY):
        raise InvalidDelayError(delay, MAX_COUNTER_DELAY)
    if delay > 0xFFF:
        return ADD_X8_IMMEDIATE_BASE | _ADD_LSL12_FLAG | ((delay >> 12) << _ADD_IMM12_SHIFT)
    return ADD_X8_IMMEDIATE_BASE | (delay << _ADD_IMM12_SHIFT)


def decode_add_immediate(word: int) -> int:
    """
    Return the immediate of an "add x8, x8, #imm" word.

    Raises MalformedHexError when the opcode bits are not the add-immediate
    base.
    """
    if word & ~(_ADD_IMM12_MASK | _ADD_LSL12_FLAG) & 0xFFFFFFFF != ADD_X8_IMMEDIATE_BASE:
        raise MalformedHexError(encode_word(word), "not an add x8, x8, #imm instruction")
    imm12 = (word & _ADD_IMM12_MASK) >> _ADD_IMM12_SHIFT
    if word & _ADD_LSL12_FLAG:
        return imm12 << 12
    return imm12


def mnemonic_for_spin(kind: Union[str, SpinKind]) -> str:
    """Hex token of the spin instruction `kind` (nop, isb or yield)."""
    return _SPIN_HEX[SpinKind.parse(kind)]


__all__ = [
    "ADD_X8_IMMEDIATE_BASE",
    "MRS_X8_CNTVCT",
    "MRS_X9_CNTVCT",
    "CMP_X9_X8",
    "B_LT_BACK_12",
    "MRS_X8_CNTVCT_MNEMONIC",
    "MRS_X9_CNTVCT_MNEMONIC",
    "CMP_X9_X8_MNEMONIC",
    "B_LT_MNEMONIC",
    "reverse_bytes",
    "decode_word",
    "encode_word",
    "encode_add_immediate",
    "decode_add_immediate",
    "mnemonic_for_spin",
]
