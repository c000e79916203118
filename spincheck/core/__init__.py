# spincheck/core/__init__.py
# Verification engine for spin-wait intrinsic disassembly.
# Pure functions over captured log lines. No I/O.

from .exceptions import (
    SpinCheckError,
    LogStructureError,
    MarkerNotFoundError,
    DuplicateMarkerError,
    MalformedHexError,
    ContractViolationError,
    InvalidDelayError,
    InvalidCountError,
    UnknownInstructionError,
    PatternMismatchError,
    InstructionCountMismatchError,
    IdiomMismatchError,
)
from .domain import (
    CapturedOutput,
    DEFAULT_MARKERS,
    ExpectedPattern,
    FixedIdiom,
    LogFormat,
    MethodMarkers,
    Repeated,
    SpinKind,
)
from .codec import (
    decode_add_immediate,
    decode_word,
    encode_add_immediate,
    encode_word,
    mnemonic_for_spin,
    reverse_bytes,
)
from .scanner import (
    ScanHit,
    find_first_containing,
    find_first_containing_from,
)
from .tokenizer import detect_format, tokenize
from .matcher import count_trailing_run, match_idiom, match_repeated
from .engine import VerificationResult, verify, verify_output
from .logging_layer import Event, EventFilter, EventLogger, LoggingError

__all__ = [
    # Exceptions
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
    # Domain
    "CapturedOutput",
    "DEFAULT_MARKERS",
    "ExpectedPattern",
    "FixedIdiom",
    "LogFormat",
    "MethodMarkers",
    "Repeated",
    "SpinKind",
    # Codec
    "decode_add_immediate",
    "decode_word",
    "encode_add_immediate",
    "encode_word",
    "mnemonic_for_spin",
    "reverse_bytes",
    # Scanner / tokenizer
    "ScanHit",
    "find_first_containing",
    "find_first_containing_from",
    "detect_format",
    "tokenize",
    # Matching
    "count_trailing_run",
    "match_idiom",
    "match_repeated",
    "VerificationResult",
    "verify",
    "verify_output",
    # Logging
    "Event",
    "EventFilter",
    "EventLogger",
    "LoggingError",
]
