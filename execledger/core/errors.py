# execledger/core/errors.py
"""
Exception types for the execution ledger.

Structural errors are raised to the caller and indicate a logic error in the
workflow driver. Verification failures are normally returned as values; the
VerificationError family is only raised on explicit request.
"""
from typing import List, Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""


class SerializationError(LedgerError, ValueError):
    """Value cannot be canonicalized (non-finite number, cycle, unsupported type)."""


class ChainClosedError(LedgerError):
    """Append attempted on a resolved chain."""


class AlreadyResolvedError(LedgerError):
    """resolve() called on a chain that is already resolved."""


class ChainNotResolvedError(LedgerError):
    """Certificate requested for a chain that is still active."""


class VerificationError(LedgerError):
    """Base for verification failures raised via raise_for_failure()."""


class IntegrityViolation(VerificationError):
    """Hash chain linkage or event hashes do not match their recomputation."""

    def __init__(self, message: str, broken_sequences: Optional[List[int]] = None):
        super().__init__(message)
        self.broken_sequences = list(broken_sequences or [])


class SignatureInvalid(VerificationError):
    """Certificate signature does not validate against the public key."""
