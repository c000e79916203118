# =============================================================================
# SPINCHECK v1.0.0 -- VERIFICATION ENGINE
# File:   spincheck/core/matcher.py
# =============================================================================
#
# SCOPE
# -----
# Sequence matcher. Two modes over the same scanner and tokenizer:
#
#   match_repeated  -- Repeated(instruction, count): length of the run of
#                      spin instructions that ends nearest the call site.
#   match_idiom     -- FixedIdiom(delay): the six-instruction counter loop
#                      emitted for -XX:OnSpinWaitInst=counter.
#
# Format (HEX / MNEMONIC) is detected once per call from the method region;
# after that, matching works on normalised tokens only.
#
# Expected PrintAssembly output, hex form, three NOPs:
#
#   # {method} {0x0000ffff6ac00370} 'test' '()V' in 'compiler/onSpinWait/...$Launcher'
#   #           [sp+0x40]  (sp of caller)
#   0x0000ffff9d557680: 1f20 03d5 | e953 40d1 | 3f01 00f9 | ff03 01d1 | fd7b 03a9 | 1f20 03d5 | 1f20 03d5
#
#   0x0000ffff9d5576ac: ;*invokestatic onSpinWait {reexecute=0 rethrow=0 return_oop=0}
#                       ; - compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher::test@0 (line 161)
#   0x0000ffff9d5576ac: 1f20 03d5 | fd7b 43a9 | ff03 0191
#
# Mnemonic form: one instruction per line; the call-site comment is attached
# to the last spin instruction itself:
#
#   0x0000ffffa409daa0:   nop
#   0x0000ffffa409daa4:   nop     ;*invokestatic onSpinWait {reexecute=0 ...}
#                                 ; - compiler.onSpinWait...$Launcher::test@0 (line 187)
#
# Counter idiom, delay 14:
#
#   0x0000ffff78e31bf0:   mrs     x8, cntvct_el0
#   0x0000ffff78e31bf4:   add     x8, x8, #0xe
#   0x0000ffff78e31bf8:   yield
#   0x0000ffff78e31bfc:   mrs     x9, cntvct_el0
#   0x0000ffff78e31c00:   cmp     x9, x8
#   0x0000ffff78e31c04:   b.lt    0x0000ffff78e31bf8
#
# or, without a disassembler, the same six words spread over two lines:
#   48e0 3bd5 | 0839 0091 | 3f20 03d5 | 49e0 3bd5 | 3f01 08eb  /  abff ff54
# =============================================================================

from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, Tuple

from . import codec
from .domain import DEFAULT_MARKERS, FixedIdiom, LogFormat, MethodMarkers, Repeated
from .exceptions import (
    DuplicateMarkerError,
    IdiomMismatchError,
    InstructionCountMismatchError,
    MalformedHexError,
    MarkerNotFoundError,
)
from .logging_layer import (
    FORMAT_DETECTED,
    IDIOM_SLOT_MATCHED,
    MARKER_FOUND,
    RUN_COUNTED,
    TOKENS_COLLECTED,
    EventLogger,
    emit,
)
from .scanner import count_containing, require_marker, require_unique_marker
from .tokenizer import (
    detect_format,
    is_instruction_line,
    normalize_line,
    tokenize,
    tokenize_lines,
)

# Disassemblers print decimal immediates without leading zeros.
_MNEMONIC_ADD = re.compile(r"^add x8, x8, #(0x[0-9a-f]+|0|[1-9][0-9]*)(, lsl #12)?$")

_END_OF_REGION = "<end of method region>"


# =============================================================================
# SECTION 1 -- REPEATED-INSTRUCTION MODE
# =============================================================================

def count_trailing_run(tokens: Sequence[str], target: str) -> int:
    """
    Length of the run of `target` that ends at its last occurrence.

    Tokens after the last occurrence are skipped; the run stops at the first
    different token or the start of the list. Only that run belongs to the
    call site: earlier copies of the target are unrelated padding.
    """
    index = len(tokens) - 1
    while index >= 0 and tokens[index] != target:
        index -= 1
    count = 0
    while index >= 0 and tokens[index] == target:
        count += 1
        index -= 1
    return count


def match_repeated(
    lines:   Sequence[str],
    pattern: Repeated,
    markers: MethodMarkers = DEFAULT_MARKERS,
    logger:  Optional[EventLogger] = None,
) -> LogFormat:
    """
    Verify that exactly pattern.count spin instructions precede the call
    site. Returns the detected log format.

    Raises MarkerNotFoundError / DuplicateMarkerError when the header, the
    call site or the call-site frame is missing or not unique, and
    InstructionCountMismatchError when the run has the wrong length.
    """
    header = require_unique_marker(lines, markers.header, "method header")
    emit(logger, MARKER_FOUND, marker="method header", index=header.index)

    call = require_marker(lines, header.index + 1, markers.call_site, "call site")
    occurrences = count_containing(lines, markers.call_site)
    if occurrences > 1:
        raise DuplicateMarkerError("call site", markers.call_site, occurrences)
    emit(logger, MARKER_FOUND, marker="call site", index=call.index)

    # Format is decided by the body, the call site, its frame line and the
    # line after it; nothing outside the method counts.
    body = lines[header.index + 1:call.index]
    fmt = detect_format(lines[header.index + 1:call.index + 3])
    emit(logger, FORMAT_DETECTED, format=fmt.value, region_lines=len(body))

    tokens: List[str] = tokenize_lines(
        [line for line in body if is_instruction_line(line)], fmt
    )

    frame_index = call.index + 1
    if frame_index >= len(lines) or markers.call_site_frame not in lines[frame_index]:
        raise MarkerNotFoundError("call-site frame", markers.call_site_frame, frame_index)

    if fmt == LogFormat.HEX:
        after_index = frame_index + 1
        if after_index >= len(lines) or not is_instruction_line(lines[after_index]):
            raise MarkerNotFoundError("instructions after call site", "0x", after_index)
        tokens.extend(tokenize(lines[after_index], fmt))
        target = codec.mnemonic_for_spin(pattern.instruction)
    else:
        tokens.extend(tokenize(call.line, fmt))
        target = pattern.instruction.value
    emit(logger, TOKENS_COLLECTED, count=len(tokens), target=target)

    found = count_trailing_run(tokens, target)
    emit(logger, RUN_COUNTED, target=target, found=found, expected=pattern.count)
    if found != pattern.count:
        raise InstructionCountMismatchError(target, found, pattern.count)
    return fmt


# =============================================================================
# SECTION 2 -- FIXED-IDIOM MODE
# =============================================================================

def method_region(lines: Sequence[str], markers: MethodMarkers) -> Tuple[int, List[str]]:
    """
    Lines after the first qualified-name marker, up to the first region-end
    line (case-insensitive) or the end of the log.
    """
    start = require_marker(lines, 0, markers.qualified_name, "method")
    region_end = [marker.lower() for marker in markers.region_end]
    region: List[str] = []
    for line in lines[start.index + 1:]:
        normalized = normalize_line(line)
        if any(marker in normalized for marker in region_end):
            break
        region.append(line)
    return start.index, region


def _mnemonic_add_immediate(token: str) -> Optional[int]:
    match = _MNEMONIC_ADD.match(token)
    if match is None:
        return None
    text = match.group(1)
    value = int(text, 16) if text.startswith("0x") else int(text, 10)
    if match.group(2):
        value <<= 12
    return value


def _add_slot(fmt: LogFormat, delay: int) -> Callable[[str], bool]:
    if fmt == LogFormat.MNEMONIC:
        return lambda token: _mnemonic_add_immediate(token) == delay

    def check(token: str) -> bool:
        try:
            return codec.decode_add_immediate(codec.decode_word(token)) == delay
        except MalformedHexError as exc:
            raise IdiomMismatchError(1, "add x8, x8, #" + str(delay), token) from exc

    return check


def _idiom_slots(fmt: LogFormat, pattern: FixedIdiom) -> List[Tuple[str, Callable[[str], bool]]]:
    """(expected_kind, predicate) for slots 1 to 5."""
    if fmt == LogFormat.HEX:
        spin = codec.mnemonic_for_spin(pattern.spin)
        mrs_x9, cmp, b_lt = codec.MRS_X9_CNTVCT, codec.CMP_X9_X8, codec.B_LT_BACK_12
        branch = lambda token: token == b_lt  # noqa: E731
    else:
        spin = pattern.spin.value
        mrs_x9, cmp = codec.MRS_X9_CNTVCT_MNEMONIC, codec.CMP_X9_X8_MNEMONIC
        # Branch target varies per compilation in mnemonic form.
        branch = lambda token: token.startswith(codec.B_LT_MNEMONIC)  # noqa: E731
    return [
        ("add x8, x8, #" + str(pattern.delay), _add_slot(fmt, pattern.delay)),
        (pattern.spin.value,                   lambda token: token == spin),
        (codec.MRS_X9_CNTVCT_MNEMONIC,         lambda token: token == mrs_x9),
        (codec.CMP_X9_X8_MNEMONIC,             lambda token: token == cmp),
        (codec.B_LT_MNEMONIC,                  branch),
    ]


def match_idiom(
    lines:   Sequence[str],
    pattern: FixedIdiom,
    markers: MethodMarkers = DEFAULT_MARKERS,
    logger:  Optional[EventLogger] = None,
) -> LogFormat:
    """
    Verify the counter-delay idiom with pattern.delay in its add-immediate.
    Returns the detected log format.

    Raises MarkerNotFoundError when the method is absent and
    IdiomMismatchError naming the first slot that does not match.
    """
    start_index, region = method_region(lines, markers)
    emit(logger, MARKER_FOUND, marker="method", index=start_index)

    fmt = detect_format(region)
    emit(logger, FORMAT_DETECTED, format=fmt.value, region_lines=len(region))

    tokens = tokenize_lines(region, fmt)
    emit(logger, TOKENS_COLLECTED, count=len(tokens))

    anchor = codec.MRS_X8_CNTVCT if fmt == LogFormat.HEX else codec.MRS_X8_CNTVCT_MNEMONIC
    try:
        position = tokens.index(anchor)
    except ValueError:
        raise IdiomMismatchError(0, codec.MRS_X8_CNTVCT_MNEMONIC, _END_OF_REGION) from None
    emit(logger, IDIOM_SLOT_MATCHED, slot=0, token=anchor)

    for slot, (expected_kind, matches) in enumerate(_idiom_slots(fmt, pattern), start=1):
        index = position + slot
        if index >= len(tokens):
            raise IdiomMismatchError(slot, expected_kind, _END_OF_REGION)
        if not matches(tokens[index]):
            raise IdiomMismatchError(slot, expected_kind, tokens[index])
        emit(logger, IDIOM_SLOT_MATCHED, slot=slot, token=tokens[index])
    return fmt


__all__ = [
    "count_trailing_run",
    "match_repeated",
    "method_region",
    "match_idiom",
]
