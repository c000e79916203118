# spincheck/verification/failure_handler.py
# FailureHandler -- hard failure policy for the check harness.
#
# Exit with a non-zero exit code on any failure. No catch-and-continue, no
# retry, no fallback. Stdout carries only the pass/fail summary.

import sys

from spincheck.core.exceptions import (
    ContractViolationError,
    DuplicateMarkerError,
    IdiomMismatchError,
    InstructionCountMismatchError,
    MalformedHexError,
    MarkerNotFoundError,
    SpinCheckError,
)
from spincheck.verification.data_models.failure_record import FailureRecord, FAILURE_TYPES
from spincheck.verification.harness_version import HARNESS_VERSION

# First matching class wins.
_FAILURE_TYPE_BY_ERROR = (
    (InstructionCountMismatchError, "INSTRUCTION_COUNT_MISMATCH"),
    (IdiomMismatchError,            "IDIOM_MISMATCH"),
    (MarkerNotFoundError,           "MARKER_NOT_FOUND"),
    (DuplicateMarkerError,          "DUPLICATE_MARKER"),
    (MalformedHexError,             "MALFORMED_HEX"),
    (ContractViolationError,        "CONTRACT_VIOLATION"),
)


def failure_type_for(exc: SpinCheckError) -> str:
    for error_type, failure_type_id in _FAILURE_TYPE_BY_ERROR:
        if isinstance(exc, error_type):
            return failure_type_id
    return "HARNESS_INTERNAL_ERROR"


class FailureHandler:
    """
    On any failure:
      1. Construct FailureRecord.
      2. Print failure summary to stdout.
      3. Call sys.exit(exit_code) -- must be last operation.
    """

    def __init__(self, run_id: str, log_path: str):
        self._run_id   = run_id
        self._log_path = log_path

    def build_record(
        self,
        failure_type_id: str,
        detail:          str,
        subject:         str = "",
    ) -> FailureRecord:
        return FailureRecord(
            failure_type_id=failure_type_id,
            exit_code=FAILURE_TYPES.get(failure_type_id, 4),
            subject=subject,
            run_id=self._run_id,
            harness_version=HARNESS_VERSION,
            log_path=self._log_path,
            detail=detail,
        )

    def handle(
        self,
        failure_type_id: str,
        detail:          str,
        subject:         str = "",
    ) -> None:
        """Print the failure summary and exit. This method does not return."""
        record = self.build_record(failure_type_id, detail, subject)
        print(
            f"SPINCHECK RESULT: FAIL\n"
            f"Failure type:   {record.failure_type_id}\n"
            f"Exit code:      {record.exit_code}\n"
            f"Subject:        {record.subject or '(not applicable)'}\n"
            f"Log:            {record.log_path}\n"
            f"Run ID:         {record.run_id}\n"
            f"Detail:         {record.detail}"
        )
        sys.stdout.flush()
        sys.exit(record.exit_code)

    def handle_from_exception(self, exc: SpinCheckError) -> None:
        """Map an engine exception to its failure type and invoke handle()."""
        self.handle(
            failure_type_id=failure_type_for(exc),
            detail=exc.message,
            subject=exc.subject,
        )
