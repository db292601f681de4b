# execledger/__init__.py
"""
Execution Ledger — tamper-evident, hash-linked event chains sealed by Ed25519 certificates.

Producers append events to an ExecutionChain; resolve() seals it; a
CertificateIssuer signs the aggregate hash; verify_artifacts() re-checks
everything from exported JSON alone.
"""

from execledger.core.errors import (
    AlreadyResolvedError,
    ChainClosedError,
    ChainNotResolvedError,
    IntegrityViolation,
    LedgerError,
    SerializationError,
    SignatureInvalid,
)
from execledger.core.types import Certificate, Event, GENESIS_HASH
from execledger.core.canon import canonical_json
from execledger.chain.chain import ExecutionChain
from execledger.chain.integrity import IntegrityReport, verify_chain_integrity
from execledger.certificate.issuer import CertificateIssuer
from execledger.verify.verifier import VerificationReport, verify_artifacts, verify_certificate

__version__ = "0.1.0.dev0"

__all__ = [
    "AlreadyResolvedError",
    "Certificate",
    "CertificateIssuer",
    "ChainClosedError",
    "ChainNotResolvedError",
    "Event",
    "ExecutionChain",
    "GENESIS_HASH",
    "IntegrityReport",
    "IntegrityViolation",
    "LedgerError",
    "SerializationError",
    "SignatureInvalid",
    "VerificationReport",
    "canonical_json",
    "verify_artifacts",
    "verify_certificate",
    "verify_chain_integrity",
]
