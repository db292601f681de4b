# execledger/verify/verifier.py
"""
Zero-trust verification of exported ledger artifacts.

Works from public material only (chain artifact, certificate, public key) and
depends on nothing but the canonical serializer, hashlib and cryptography.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from execledger.chain.integrity import IntegrityReport, verify_chain_integrity
from execledger.core.canon import canonical_json
from execledger.core.errors import IntegrityViolation, SerializationError, SignatureInvalid
from execledger.core.types import Certificate, utc_now
from execledger.crypto.hashing import chain_hash
from execledger.crypto.keys import IssuerKeyPair

UNSIGNED_FIELDS = ("signature", "public_key")

PublicKeyInput = Union[IssuerKeyPair, str, Dict[str, Any], None]


@dataclass
class CheckResult:
    name: str                 # key used in the verification-result artifact
    label: str                # human readable
    passed: bool
    detail: str = ""


@dataclass
class VerificationReport:
    checks: List[CheckResult]
    chain_hash: Optional[str] = None        # recomputed from the exported events
    integrity: Optional[IntegrityReport] = None
    checked_at: str = field(default_factory=utc_now)

    @property
    def verified(self) -> bool:
        return all(c.passed for c in self.checks)

    def __bool__(self):
        return self.verified

    def check(self, name: str) -> CheckResult:
        for c in self.checks:
            if c.name == name:
                return c
        raise KeyError(name)

    def to_result_artifact(self) -> Dict[str, Any]:
        return {
            "verified": self.verified,
            "chain_hash": self.chain_hash,
            "certificate_signature_valid": self.check("certificate_signature_valid").passed,
            "hash_chain_intact": self.check("hash_chain_intact").passed,
            "checked_at": self.checked_at,
        }

    def raise_for_failure(self) -> None:
        """Raise IntegrityViolation or SignatureInvalid if any check failed."""
        if self.verified:
            return
        failed = [c for c in self.checks if not c.passed]
        if self.check("certificate_signature_valid") in failed and len(failed) == 1:
            raise SignatureInvalid(failed[0].detail)
        broken = self.integrity.broken_sequences if self.integrity is not None else []
        raise IntegrityViolation("; ".join(f"{c.label}: {c.detail}" for c in failed), broken)

    def __str__(self):
        lines = [f"{'PASS' if c.passed else 'FAIL'}  {c.label}" + (f" ({c.detail})" if c.detail else "")
                 for c in self.checks]
        lines.append("ALL CHECKS PASSED" if self.verified else "VERIFICATION FAILED")
        return "\n".join(lines)


def _resolve_public_key(public_key: PublicKeyInput) -> Optional[IssuerKeyPair]:
    if public_key is None or isinstance(public_key, IssuerKeyPair):
        return public_key
    if isinstance(public_key, dict):
        public_key = public_key.get("public_key", "")
    return IssuerKeyPair.from_public_text(public_key)


def _check_signature(
    certificate: Union[Certificate, Dict[str, Any]],
    public_key: PublicKeyInput = None,
) -> Tuple[bool, str]:
    cert = certificate.to_dict() if isinstance(certificate, Certificate) else dict(certificate)
    payload = {k: v for k, v in cert.items() if k not in UNSIGNED_FIELDS}

    try:
        supplied = _resolve_public_key(public_key)
        embedded = IssuerKeyPair.from_public_text(cert["public_key"]) if cert.get("public_key") else None
    except ValueError as e:
        return False, f"Public key could not be loaded: {e}"

    key = supplied or embedded
    if key is None:
        return False, "No public key supplied or embedded in certificate"
    if supplied and embedded and supplied.public_key_der_hex() != embedded.public_key_der_hex():
        return False, "Supplied public key does not match the certificate's embedded key"

    sig = cert.get("signature")
    if not isinstance(sig, str):
        return False, "Certificate has no signature"
    try:
        signature = bytes.fromhex(sig)
        data = canonical_json(payload)
    except (ValueError, SerializationError) as e:
        return False, f"Malformed certificate: {e}"

    if not key.verify_bytes(signature, data):
        return False, "Invalid signature"
    return True, ""


def verify_certificate(
    certificate: Union[Certificate, Dict[str, Any]],
    public_key: PublicKeyInput = None,
) -> bool:
    """
    True iff the signature validates over the canonical certificate minus
    signature/public_key. Uses the embedded key unless one is supplied.
    """
    ok, _ = _check_signature(certificate, public_key)
    return ok


def verify_artifacts(
    chain_artifact: Dict[str, Any],
    certificate: Union[Certificate, Dict[str, Any]],
    public_key: PublicKeyInput = None,
) -> VerificationReport:
    """Run the three independent checks; each is reported on its own."""
    cert = certificate.to_dict() if isinstance(certificate, Certificate) else dict(certificate)
    events = chain_artifact.get("events", [])

    # 1. Hash chain integrity
    integrity = verify_chain_integrity(events)
    integrity_detail = ""
    if not integrity.valid:
        integrity_detail = "broken at sequence " + ", ".join(str(s) for s in integrity.broken_sequences)

    # 2. Aggregate hash, bound to chain id and event count
    hashes = [e.get("event_hash") for e in events]
    problems = [f"event_hash of event #{i} is not a string" for i, h in enumerate(hashes, start=1)
                if not isinstance(h, str)]
    recomputed = chain_hash(h if isinstance(h, str) else "" for h in hashes)
    if recomputed != cert.get("chain_hash"):
        problems.append("recomputed chain_hash differs from certificate")
    if cert.get("chain_id") != chain_artifact.get("chain_id"):
        problems.append("certificate chain_id differs from chain artifact")
    if cert.get("event_count") != len(events):
        problems.append(f"certificate event_count {cert.get('event_count')} != {len(events)} exported events")
    if chain_artifact.get("event_count", len(events)) != len(events):
        problems.append("chain artifact event_count does not match its events")

    # 3. Signature
    sig_ok, sig_detail = _check_signature(cert, public_key)

    return VerificationReport(
        checks=[
            CheckResult("hash_chain_intact", "Hash chain integrity", integrity.valid, integrity_detail),
            CheckResult("chain_hash_match", "Chain hash match", not problems, "; ".join(problems)),
            CheckResult("certificate_signature_valid", "Ed25519 signature", sig_ok, sig_detail),
        ],
        chain_hash=recomputed,
        integrity=integrity,
    )


def load_public_key_file(path: Union[str, Path]) -> Union[str, Dict[str, Any]]:
    """public-key.json artifact, PEM file, or a bare hex DER string."""
    text = Path(path).read_text(encoding="utf-8").strip()
    if text.startswith("{"):
        return json.loads(text)
    return text


def verify_files(
    chain_path: Union[str, Path],
    certificate_path: Union[str, Path],
    public_key_path: Union[str, Path],
) -> VerificationReport:
    """Read the three artifacts from disk and verify them. I/O and JSON errors propagate."""
    chain_artifact = json.loads(Path(chain_path).read_text(encoding="utf-8"))
    certificate = json.loads(Path(certificate_path).read_text(encoding="utf-8"))
    return verify_artifacts(chain_artifact, certificate, load_public_key_file(public_key_path))
