# spincheck/verification/harness_version.py
# Harness version constant. Single authoritative definition.
# Referenced by run_check.py and failure_handler.py for version stamping.

HARNESS_VERSION: str = "1.0.0"

# Exit status the compiler run must have before its output is inspected.
EXPECTED_PROCESS_EXIT_CODE: int = 0
