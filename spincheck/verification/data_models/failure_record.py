# spincheck/verification/data_models/failure_record.py
# FailureRecord data class and failure type registry.

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# FAILURE TYPE REGISTRY
# ---------------------------------------------------------------------------
# Exit code mapping:
#   Code 1 -- the expected instructions were not emitted
#   Code 2 -- the log lacks the structure the check depends on
#   Code 3 -- caller contract violation (bad arguments, wrong process exit)
#   Code 4 -- internal harness errors

FAILURE_TYPES = {
    # Exit Code 1
    "INSTRUCTION_COUNT_MISMATCH": 1,
    "IDIOM_MISMATCH":             1,
    # Exit Code 2
    "MARKER_NOT_FOUND":           2,
    "DUPLICATE_MARKER":           2,
    "MALFORMED_HEX":              2,
    # Exit Code 3
    "CONTRACT_VIOLATION":         3,
    "PROCESS_EXIT_MISMATCH":      3,
    # Exit Code 4
    "HARNESS_INTERNAL_ERROR":     4,
}


@dataclass(frozen=True)
class FailureRecord:
    """
    Summary of one failed check, printed by the FailureHandler.

    Fields:
      failure_type_id -- Key from FAILURE_TYPES registry.
      exit_code       -- Integer exit code (1-4).
      subject         -- Marker name, instruction or field involved. Empty
                         if not applicable.
      run_id          -- Identifier of this harness invocation.
      harness_version -- HARNESS_VERSION at time of failure.
      log_path        -- Captured log that was checked.
      detail          -- Human-readable failure description.
    """
    failure_type_id: str
    exit_code:       int
    subject:         str
    run_id:          str
    harness_version: str
    log_path:        str
    detail:          str
