# =============================================================================
# SPINCHECK v1.0.0 -- VERIFICATION ENGINE
# File:   spincheck/core/domain.py
# =============================================================================
#
# SCOPE
# -----
# Frozen value types shared by the scanner, tokenizer and matcher:
#   LogFormat, SpinKind          -- enumerations
#   Repeated, FixedIdiom         -- the ExpectedPattern tagged variant
#   MethodMarkers                -- marker substrings for the method under test
#   CapturedOutput               -- the captured stdout lines plus exit status
#
# VALIDATION PHILOSOPHY
# ---------------------
# Patterns are validated in __post_init__, so an out-of-range delay or a
# negative count is a contract violation raised before any scanning begins.
# There is NO silent coercion: no clamping, no defaulting.
#
# DEPENDENCIES
# ------------
#   stdlib:    dataclasses, enum, typing
#   internal:  .exceptions
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .exceptions import (
    InvalidCountError,
    InvalidDelayError,
    UnknownInstructionError,
)


# Largest delay the add-immediate encoding accepts (imm12, or 1 << 12 via
# the lsl #12 flag).
MAX_COUNTER_DELAY: int = 1 << 12


# =============================================================================
# SECTION 1 -- ENUMERATIONS
# =============================================================================

class LogFormat(str, Enum):
    """
    Disassembly style of a captured log.

    HEX      -- no disassembler library; words printed as "xxxx xxxx | ...".
    MNEMONIC -- disassembler available; one instruction per line.
    """
    HEX      = "HEX"
    MNEMONIC = "MNEMONIC"


class SpinKind(str, Enum):
    """
    Spin-wait hint instruction selected with -XX:OnSpinWaitInst.

    Inherits from str so SpinKind.NOP == "nop" and the value doubles as the
    mnemonic printed by the disassembler.
    """
    NOP   = "nop"
    ISB   = "isb"
    YIELD = "yield"

    @classmethod
    def parse(cls, kind: Union[str, "SpinKind"]) -> "SpinKind":
        """Return the member for a kind name; UnknownInstructionError otherwise."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(kind)
        except ValueError:
            raise UnknownInstructionError(kind) from None


# =============================================================================
# SECTION 2 -- EXPECTED PATTERN
# =============================================================================

def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Repeated:
    """
    Exactly `count` copies of `instruction` immediately before the call site.

    Fields:
      instruction -- SpinKind (a kind name is accepted and converted).
      count       -- expected run length, >= 0.
    """
    instruction: SpinKind
    count:       int

    def __post_init__(self) -> None:
        object.__setattr__(self, "instruction", SpinKind.parse(self.instruction))
        if not _is_int(self.count) or self.count < 0:
            raise InvalidCountError(self.count)


@dataclass(frozen=True)
class FixedIdiom:
    """
    The six-instruction counter-delay idiom with `delay` in the add-immediate.

    Fields:
      delay -- expected immediate, in [0, 4096].
      spin  -- hint instruction inside the loop. The compiler emits yield.
    """
    delay: int
    spin:  SpinKind = SpinKind.YIELD

    def __post_init__(self) -> None:
        if not _is_int(self.delay) or not (0 <= self.delay <= MAX_COUNTER_DELAY):
            raise InvalidDelayError(self.delay, MAX_COUNTER_DELAY)
        object.__setattr__(self, "spin", SpinKind.parse(self.spin))


ExpectedPattern = Union[Repeated, FixedIdiom]


# =============================================================================
# SECTION 3 -- MARKERS
# =============================================================================

@dataclass(frozen=True)
class MethodMarkers:
    """
    Literal substrings that delimit the compiled method in PrintAssembly
    output.

    Fields:
      header          -- full signature, as printed on the "# {method}" line.
      qualified_name  -- holder class in internal (slash) form; coarser.
      call_site       -- comment attached to the spin-wait intrinsic.
      call_site_frame -- debug-info line that follows the call site.
      region_end      -- lines that terminate the method body.
    """
    header:          str
    qualified_name:  str
    call_site:       str
    call_site_frame: str
    region_end:      Tuple[str, ...] = ("[Exception Handler]", "[/Disassembly]")

    @classmethod
    def for_method(
        cls,
        holder:    str,
        name:      str = "test",
        signature: str = "()V",
        call_site: str = "*invokestatic onSpinWait",
    ) -> "MethodMarkers":
        """
        Derive all markers from a dotted holder class name, e.g.
        "compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher".
        """
        internal = holder.replace(".", "/")
        return cls(
            header=f"'{name}' '{signature}' in '{internal}'",
            qualified_name=internal,
            call_site=call_site,
            call_site_frame=f"- {holder}::{name}@0",
        )


DEFAULT_MARKERS: MethodMarkers = MethodMarkers.for_method(
    "compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher",
)


# =============================================================================
# SECTION 4 -- CAPTURED OUTPUT
# =============================================================================

@dataclass(frozen=True)
class CapturedOutput:
    """
    Full standard output of one compiler run, plus its exit status.

    Produced once per run by whatever launched the process; never mutated.
    The engine does not inspect exit_code.
    """
    lines:     Tuple[str, ...]
    exit_code: int = 0

    @classmethod
    def from_text(cls, text: str, exit_code: int = 0) -> "CapturedOutput":
        return cls(lines=tuple(text.splitlines()), exit_code=exit_code)


__all__ = [
    "MAX_COUNTER_DELAY",
    "LogFormat",
    "SpinKind",
    "Repeated",
    "FixedIdiom",
    "ExpectedPattern",
    "MethodMarkers",
    "DEFAULT_MARKERS",
    "CapturedOutput",
]
