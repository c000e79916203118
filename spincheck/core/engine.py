# =============================================================================
# SPINCHECK v1.0.0 -- VERIFICATION ENGINE
# File:   spincheck/core/engine.py
# =============================================================================
#
# SCOPE
# -----
# Public entry points. verify() picks the matcher for the pattern type and
# wraps its verdict in a VerificationResult:
#
#   Repeated   -> matcher.match_repeated
#   FixedIdiom -> matcher.match_idiom
#
# Failures are raised as SpinCheckError subclasses, never returned. The
# exit status of the compiler run is checked by the harness, not here.
#
# DEPENDENCIES
# ------------
#   stdlib:    dataclasses, typing
#   internal:  .domain, .exceptions, .logging_layer, .matcher
# =============================================================================

from dataclasses import dataclass
from typing import Optional, Sequence

from .domain import (
    DEFAULT_MARKERS,
    CapturedOutput,
    ExpectedPattern,
    FixedIdiom,
    LogFormat,
    MethodMarkers,
    Repeated,
)
from .exceptions import ContractViolationError
from .logging_layer import VERDICT, EventLogger, emit
from .matcher import match_idiom, match_repeated


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of a successful verify() call. Failures are raised, never
    returned.
    """
    passed:     bool
    pattern:    ExpectedPattern
    log_format: LogFormat
    detail:     str


def verify(
    lines:   Sequence[str],
    pattern: ExpectedPattern,
    markers: MethodMarkers = DEFAULT_MARKERS,
    logger:  Optional[EventLogger] = None,
) -> VerificationResult:
    """
    Check one captured PrintAssembly log against an expected pattern.

    Dispatches on the pattern tag:
        Repeated   -> match_repeated
        FixedIdiom -> match_idiom

    Pure, stateless, non-mutating. Raises a SpinCheckError subclass on any
    failure.
    """
    if isinstance(pattern, Repeated):
        fmt = match_repeated(lines, pattern, markers, logger)
        detail = "found {} x {}".format(pattern.count, pattern.instruction.value)
    elif isinstance(pattern, FixedIdiom):
        fmt = match_idiom(lines, pattern, markers, logger)
        detail = "counter idiom with delay {}".format(pattern.delay)
    else:
        raise ContractViolationError(
            message="ContractViolationError: pattern must be Repeated or FixedIdiom: got "
            + repr(pattern) + ".",
            subject="pattern",
            value=pattern,
        )
    emit(logger, VERDICT, passed=True, format=fmt.value, detail=detail)
    return VerificationResult(passed=True, pattern=pattern, log_format=fmt, detail=detail)


def verify_output(
    captured: CapturedOutput,
    pattern:  ExpectedPattern,
    markers:  MethodMarkers = DEFAULT_MARKERS,
    logger:   Optional[EventLogger] = None,
) -> VerificationResult:
    """verify() over CapturedOutput.lines. The exit code is not re-checked."""
    return verify(captured.lines, pattern, markers, logger)


__all__ = ["VerificationResult", "verify", "verify_output"]
