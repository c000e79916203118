# spincheck/core/tokenizer.py
# Instruction tokenizer for PrintAssembly lines.
#
# Two line styles are understood:
#
#   HEX       0x0000ffff9d557680: 1f20 03d5 | e953 40d1 | 3f01 00f9
#   MNEMONIC  0x0000ffffa409da84:   sub sp, sp, #0x20
#
# Both are normalised the same way before splitting, so downstream matching
# never branches on the format.

import re
from typing import Iterable, List

from .domain import LogFormat

_ADDRESS_PREFIX = re.compile(r"^0x[0-9a-f]+:(?: |$)")
_HEX_DELIMITER = "|"
_COMMENT = ";"
_ANNOTATION = "#"


def normalize_line(line: str) -> str:
    """Tabs to spaces, collapse runs of spaces, trim, lowercase."""
    return re.sub(" +", " ", line.replace("\t", " ")).strip().lower()


def strip_address(text: str) -> str:
    """Remove a leading "0x<hex>: " instruction address, if present."""
    match = _ADDRESS_PREFIX.match(text)
    if match:
        return text[match.end():]
    return text


def detect_format(lines: Iterable[str]) -> LogFormat:
    """HEX if any of the given lines carries a "|" delimiter, else MNEMONIC."""
    for line in lines:
        if _HEX_DELIMITER in line:
            return LogFormat.HEX
    return LogFormat.MNEMONIC


def is_instruction_line(line: str) -> bool:
    """An address-bearing line with no comment annotation."""
    return "0x" in line and _COMMENT not in line


def tokenize(line: str, fmt: LogFormat) -> List[str]:
    """
    Split one log line into instruction tokens, left to right.

    Comment-only, address-only and blank lines yield no tokens, as do "#"
    frame annotations. Anything after the first ";" is a comment and is
    dropped.
    """
    text = strip_address(normalize_line(line))
    text = text.split(_COMMENT, 1)[0].strip()
    if not text or text.startswith(_ANNOTATION):
        return []
    if fmt == LogFormat.HEX:
        return [piece.strip() for piece in text.split(_HEX_DELIMITER) if piece.strip()]
    return [text]


def tokenize_lines(lines: Iterable[str], fmt: LogFormat) -> List[str]:
    tokens: List[str] = []
    for line in lines:
        tokens.extend(tokenize(line, fmt))
    return tokens


__all__ = [
    "normalize_line",
    "strip_address",
    "detect_format",
    "is_instruction_line",
    "tokenize",
    "tokenize_lines",
]
