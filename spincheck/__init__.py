# spincheck/__init__.py
# Checks that Thread.onSpinWait was intrinsified with the expected
# instructions, from captured -XX:+PrintAssembly output.
#
# Canonical imports:
#   from spincheck.core import verify, Repeated, FixedIdiom
#   python -m spincheck.verification.run_check --help

__version__ = "1.0.0"
