# spincheck/verification/__init__.py
# Command-line harness around the verification engine.
#
# ENTRY POINT:
#   python -m spincheck.verification.run_check --log-path [path]
#       --inst {nop,isb,yield,counter} [--value N]

from .harness_version import (
    HARNESS_VERSION,
    EXPECTED_PROCESS_EXIT_CODE,
)
from .failure_handler import FailureHandler, failure_type_for
from .run_check import build_pattern, main as run_check

__all__ = [
    # Version constants
    "HARNESS_VERSION",
    "EXPECTED_PROCESS_EXIT_CODE",
    # Components
    "FailureHandler",
    "failure_type_for",
    "build_pattern",
    # Entry point
    "run_check",
]
