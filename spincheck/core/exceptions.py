# =============================================================================
# SPINCHECK v1.0.0 -- VERIFICATION ENGINE
# File:   spincheck/core/exceptions.py
# =============================================================================
#
# SCOPE
# -----
# Defines the exception hierarchy for the spin-wait verification engine.
# All exceptions are pure value objects: no side effects, no logging,
# no I/O of any kind.
#
# EXCEPTION HIERARCHY
# -------------------
#   SpinCheckError(Exception)                       -- base; never raised directly
#     LogStructureError(SpinCheckError)             -- required log structure absent
#       MarkerNotFoundError(LogStructureError)      -- marker line missing
#       DuplicateMarkerError(LogStructureError)     -- marker line not unique
#     MalformedHexError(SpinCheckError)             -- hex token fails to parse
#     ContractViolationError(SpinCheckError)        -- caller supplied bad input
#       InvalidDelayError(ContractViolationError)
#       InvalidCountError(ContractViolationError)
#       UnknownInstructionError(ContractViolationError)
#     PatternMismatchError(SpinCheckError)          -- log parsed, pattern wrong
#       InstructionCountMismatchError(PatternMismatchError)
#       IdiomMismatchError(PatternMismatchError)
#
# MESSAGE CONTRACT
# ----------------
# Every exception message is:
#   - Deterministic: identical inputs -> identical message string.
#   - Explicit: marker name, instruction text or slot index always included.
#   - Non-empty.
#
# =============================================================================

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class SpinCheckError(Exception):
    """
    Base class for all verification engine exceptions.

    Never raised directly. Use a concrete subclass.

    Attributes:
        subject:  What the failure is about (marker name, token, field),
                  or empty string if not applicable.
        value:    The offending value, or None.
        message:  Human-readable description. Always non-empty.
    """

    def __init__(
        self,
        message: str,
        subject: str = "",
        value:   Any = None,
    ) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError(
                "SpinCheckError: message must be a non-empty string"
            )
        if not isinstance(subject, str):
            raise ValueError(
                "SpinCheckError: subject must be a string"
            )
        super().__init__(message)
        self.subject: str = subject
        self.value:   Any = value
        self.message: str = message

    def __repr__(self) -> str:
        return (
            self.__class__.__name__
            + "(subject=" + repr(self.subject)
            + ", value=" + repr(self.value)
            + ", message=" + repr(self.message)
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpinCheckError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.subject == other.subject
            and self.value == other.value
            and self.message == other.message
        )

    __hash__ = Exception.__hash__


# =============================================================================
# LOG STRUCTURE
# =============================================================================

class LogStructureError(SpinCheckError):
    """
    The captured log lacks a structural element the check depends on.

    Distinct from PatternMismatchError: a structure failure usually means the
    output was truncated, the method was never compiled, or the marker names
    the wrong method.
    """


class MarkerNotFoundError(LogStructureError):
    """
    Raised when a required marker line does not occur at or after the
    scan start position.

    Message format:
        "MarkerNotFoundError: <marker_name> marker '<marker_text>' not found
         at or after line <start_index>."
    """

    def __init__(
        self,
        marker_name: str,
        marker_text: str,
        start_index: int = 0,
    ) -> None:
        if not marker_name:
            raise ValueError(
                "MarkerNotFoundError: marker_name must be a non-empty string"
            )
        message = (
            "MarkerNotFoundError: "
            + marker_name
            + " marker "
            + repr(marker_text)
            + " not found at or after line "
            + str(start_index)
            + "."
        )
        super().__init__(message=message, subject=marker_name, value=marker_text)
        self.marker_name: str = marker_name
        self.marker_text: str = marker_text
        self.start_index: int = start_index


class DuplicateMarkerError(LogStructureError):
    """
    Raised when a marker that must occur exactly once occurs several times.
    """

    def __init__(
        self,
        marker_name: str,
        marker_text: str,
        occurrences: int,
    ) -> None:
        if not marker_name:
            raise ValueError(
                "DuplicateMarkerError: marker_name must be a non-empty string"
            )
        message = (
            "DuplicateMarkerError: "
            + marker_name
            + " marker "
            + repr(marker_text)
            + " must occur exactly once; found "
            + str(occurrences)
            + " occurrences."
        )
        super().__init__(message=message, subject=marker_name, value=occurrences)
        self.marker_name: str = marker_name
        self.marker_text: str = marker_text
        self.occurrences: int = occurrences


# =============================================================================
# TOKEN PARSING
# =============================================================================

class MalformedHexError(SpinCheckError):
    """
    Raised when a token that should be a "xxxx xxxx" hex instruction word
    cannot be decoded.
    """

    def __init__(self, token: str, reason: str) -> None:
        if not isinstance(reason, str) or not reason:
            raise ValueError(
                "MalformedHexError: reason must be a non-empty string"
            )
        message = (
            "MalformedHexError: token "
            + repr(token)
            + " is not a hex instruction word: "
            + reason
            + "."
        )
        super().__init__(message=message, subject="hex_token", value=token)
        self.token:  str = token
        self.reason: str = reason


# =============================================================================
# CALLER CONTRACT
# =============================================================================

class ContractViolationError(SpinCheckError):
    """
    The caller supplied configuration the engine cannot verify against.
    Raised before any scanning begins.
    """


class InvalidDelayError(ContractViolationError):
    """
    Raised when a counter delay does not fit the add-immediate field.

    Message format:
        "InvalidDelayError: delay must be in [0, 4096]: got <delay>."
    """

    def __init__(self, delay: Any, upper: int = 4096) -> None:
        message = (
            "InvalidDelayError: delay must be in [0, "
            + str(upper)
            + "]: got "
            + repr(delay)
            + "."
        )
        super().__init__(message=message, subject="delay", value=delay)
        self.delay: Any = delay


class InvalidCountError(ContractViolationError):
    """Raised when an expected instruction count is negative or not an int."""

    def __init__(self, count: Any) -> None:
        message = (
            "InvalidCountError: count must be a non-negative integer: got "
            + repr(count)
            + "."
        )
        super().__init__(message=message, subject="count", value=count)
        self.count: Any = count


class UnknownInstructionError(ContractViolationError):
    """Raised for a spin instruction kind other than nop, isb or yield."""

    def __init__(self, kind: Any) -> None:
        message = (
            "UnknownInstructionError: unknown spin wait instruction "
            + repr(kind)
            + "; expected one of 'nop', 'isb', 'yield'."
        )
        super().__init__(message=message, subject="instruction", value=kind)
        self.kind: Any = kind


# =============================================================================
# PATTERN MISMATCH
# =============================================================================

class PatternMismatchError(SpinCheckError):
    """
    The method region was located and tokenized, but the emitted
    instructions do not match the expected pattern.
    """


class InstructionCountMismatchError(PatternMismatchError):
    """
    Raised when the run of spin instructions before the call site has the
    wrong length.

    Message format:
        "InstructionCountMismatchError: wrong instruction '<instruction>'
         count <found>; expecting <expected>."
    """

    def __init__(self, instruction: str, found: int, expected: int) -> None:
        message = (
            "InstructionCountMismatchError: wrong instruction "
            + repr(instruction)
            + " count "
            + str(found)
            + "; expecting "
            + str(expected)
            + "."
        )
        super().__init__(message=message, subject=instruction, value=found)
        self.instruction: str = instruction
        self.found:       int = found
        self.expected:    int = expected


class IdiomMismatchError(PatternMismatchError):
    """
    Raised when one slot of the six-instruction counter idiom does not match.

    Slots:
        0  mrs x8, cntvct_el0
        1  add x8, x8, #delay
        2  spin instruction
        3  mrs x9, cntvct_el0
        4  cmp x9, x8
        5  b.lt
    """

    def __init__(self, slot_index: int, expected_kind: str, actual_text: str) -> None:
        if not isinstance(expected_kind, str) or not expected_kind:
            raise ValueError(
                "IdiomMismatchError: expected_kind must be a non-empty string"
            )
        message = (
            "IdiomMismatchError: slot "
            + str(slot_index)
            + " expected "
            + expected_kind
            + " but found "
            + repr(actual_text)
            + "."
        )
        super().__init__(message=message, subject=expected_kind, value=actual_text)
        self.slot_index:    int = slot_index
        self.expected_kind: str = expected_kind
        self.actual_text:   str = actual_text


__all__ = [
    "SpinCheckError",
    "LogStructureError",
    "MarkerNotFoundError",
    "DuplicateMarkerError",
    "MalformedHexError",
    "ContractViolationError",
    "InvalidDelayError",
    "InvalidCountError",
    "UnknownInstructionError",
    "PatternMismatchError",
    "InstructionCountMismatchError",
    "IdiomMismatchError",
]
