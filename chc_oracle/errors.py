"""
Contract violations raised by the CHC oracle.

These signal defects in the calling code or in the engine integration
(undeclared sorts, unknown relation symbols, malformed refutation proofs),
never recoverable runtime conditions. Engine failures during a query are
reported through ``CheckResult.ERROR`` instead.
"""

from __future__ import annotations


class ContractViolation(AssertionError):
    """A violated precondition or proof-shape invariant."""


def require(condition: bool, message: str) -> None:
    """Raise ``ContractViolation`` with ``message`` unless ``condition`` holds."""
    if not condition:
        raise ContractViolation(message)
