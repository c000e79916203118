# spincheck/verification/run_check.py
# Spin-wait check harness -- Entry Point.
#
# Standard invocation:
#   python -m spincheck.verification.run_check \
#       --log-path hotspot_stdout.txt \
#       --inst nop --value 7
#
# Counter idiom:
#   python -m spincheck.verification.run_check \
#       --log-path hotspot_stdout.txt --inst counter --value 14
#
# The log is the captured stdout of a JVM run with -XX:+PrintAssembly
# (use "-" for stdin). This harness reads the log; it does not launch the JVM.
#
# EXIT CODES:
#   0  -- Expected instructions found.
#   1  -- INSTRUCTION_COUNT_MISMATCH or IDIOM_MISMATCH.
#   2  -- MARKER_NOT_FOUND, DUPLICATE_MARKER or MALFORMED_HEX.
#   3  -- CONTRACT_VIOLATION or PROCESS_EXIT_MISMATCH.
#   4  -- Internal harness error.

import argparse
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from spincheck.core.domain import (
    CapturedOutput,
    ExpectedPattern,
    FixedIdiom,
    MethodMarkers,
    Repeated,
)
from spincheck.core.engine import verify_output
from spincheck.core.exceptions import (
    InvalidCountError,
    InvalidDelayError,
    SpinCheckError,
)
from spincheck.core.logging_layer import EventLogger
from spincheck.verification.failure_handler import FailureHandler
from spincheck.verification.harness_version import (
    EXPECTED_PROCESS_EXIT_CODE,
    HARNESS_VERSION,
)

COUNTER = "counter"
INSTRUCTION_CHOICES = ("nop", "isb", "yield", COUNTER)
DEFAULT_HOLDER = "compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher"


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"Thread.onSpinWait intrinsic check v{HARNESS_VERSION}",
        prog="python -m spincheck.verification.run_check",
    )
    parser.add_argument(
        "--log-path",
        required=True,
        help="Captured PrintAssembly stdout, or '-' for stdin.",
    )
    parser.add_argument(
        "--inst",
        required=True,
        choices=INSTRUCTION_CHOICES,
        help="Value passed to -XX:OnSpinWaitInst.",
    )
    parser.add_argument(
        "--value",
        default=None,
        help="Instruction count (default 1), or the delay for 'counter'.",
    )
    parser.add_argument(
        "--exit-code",
        type=int,
        default=EXPECTED_PROCESS_EXIT_CODE,
        help="Exit status of the run that produced the log.",
    )
    parser.add_argument(
        "--expected-exit-code",
        type=int,
        default=EXPECTED_PROCESS_EXIT_CODE,
        help="Exit status the run must have had.",
    )
    parser.add_argument("--holder", default=DEFAULT_HOLDER, help="Dotted class of the method.")
    parser.add_argument("--method", default="test", help="Name of the compiled method.")
    parser.add_argument("--signature", default="()V", help="Descriptor of the compiled method.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print the engine event trace.",
    )
    return parser.parse_args(argv)


def build_pattern(inst: str, value: Optional[str]) -> ExpectedPattern:
    """
    Translate --inst/--value into an ExpectedPattern.

    Raises a ContractViolationError subclass for a non-numeric or
    out-of-range value, or a missing counter delay.
    """
    if inst == COUNTER:
        if value is None:
            raise InvalidDelayError(value)
        try:
            delay = int(value)
        except ValueError:
            raise InvalidDelayError(value) from None
        return FixedIdiom(delay=delay)

    try:
        count = int(value) if value is not None else 1
    except ValueError:
        raise InvalidCountError(value) from None
    return Repeated(instruction=inst, count=count)


def _read_log(log_path: str) -> str:
    if log_path == "-":
        return sys.stdin.read()
    return Path(log_path).read_text(encoding="utf-8", errors="replace")


def _print_trace(logger: EventLogger) -> None:
    for event in logger.get_event_stream():
        fields = " ".join(f"{key}={value}" for key, value in event.data.items())
        print(f"{event.id}  {event.type:<18} {fields}")


def main(argv: Optional[List[str]] = None) -> None:
    """
    Check pipeline:
      build pattern -> read log -> check process exit -> verify

    On pass: prints summary and exits 0.
    On any failure: FailureHandler invokes sys.exit(non-zero).
    """
    args   = _parse_args(argv)
    run_id = "RUN-" + datetime.now(timezone.utc).strftime("%Y%m%d") + "-" + str(uuid.uuid4())[:8].upper()
    fh     = FailureHandler(run_id=run_id, log_path=args.log_path)

    # Contract violations surface before the log is touched.
    try:
        pattern = build_pattern(args.inst, args.value)
    except SpinCheckError as exc:
        fh.handle_from_exception(exc)

    try:
        captured = CapturedOutput.from_text(_read_log(args.log_path), exit_code=args.exit_code)
    except OSError as exc:
        fh.handle("HARNESS_INTERNAL_ERROR", f"Cannot read log {args.log_path}: {exc}")

    if captured.exit_code != args.expected_exit_code:
        fh.handle(
            failure_type_id="PROCESS_EXIT_MISMATCH",
            detail=(
                f"Process exited with {captured.exit_code}; expected "
                f"{args.expected_exit_code}. Output not inspected."
            ),
            subject="exit_code",
        )

    markers = MethodMarkers.for_method(args.holder, args.method, args.signature)
    logger  = EventLogger()
    try:
        result = verify_output(captured, pattern, markers, logger)
    except SpinCheckError as exc:
        if args.verbose:
            _print_trace(logger)
        fh.handle_from_exception(exc)

    if args.verbose:
        _print_trace(logger)

    print(
        f"SPINCHECK RESULT: PASS\n"
        f"Run ID:          {run_id}\n"
        f"Harness version: {HARNESS_VERSION}\n"
        f"Log:             {args.log_path} ({len(captured.lines)} lines)\n"
        f"Format:          {result.log_format.value}\n"
        f"Detail:          {result.detail}"
    )
    sys.exit(0)


if __name__ == "__main__":
    main()
