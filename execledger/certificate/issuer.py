# execledger/certificate/issuer.py
import logging
from typing import Any, Callable, Dict, Optional, Union

from execledger.chain.chain import ExecutionChain
from execledger.config import LedgerSettings
from execledger.core.canon import canonical_json
from execledger.core.errors import ChainNotResolvedError
from execledger.core.types import (
    CERTIFICATE_VERSION,
    Certificate,
    SIGNATURE_ALGORITHM,
    utc_now,
)
from execledger.crypto.keys import IssuerKeyPair
from execledger.verify.verifier import verify_certificate

logger = logging.getLogger(__name__)


class CertificateIssuer:
    """
    Signs resolved chains with a single Ed25519 key pair.

    The key pair is generated on construction and lives only as long as the
    issuer. Only the public half ever leaves this object.
    """

    def __init__(
        self,
        issuer: Optional[str] = None,
        version: str = CERTIFICATE_VERSION,
        clock: Callable[[], str] = utc_now,
    ):
        self.issuer = issuer or LedgerSettings.from_env().issuer
        self.version = version
        self.clock = clock
        self._keys = IssuerKeyPair.generate()

    @property
    def public_key_hex(self) -> str:
        return self._keys.public_key_der_hex()

    def public_key_artifact(self) -> Dict[str, str]:
        return {
            "algorithm": SIGNATURE_ALGORITHM,
            "public_key": self.public_key_hex,
            "format": "DER (SPKI)",
        }

    def issue(self, chain: ExecutionChain) -> Certificate:
        """Build certificate fields for a resolved chain and sign their canonical form."""
        if not chain.is_resolved:
            raise ChainNotResolvedError(f"Chain '{chain.chain_id}' must be resolved before issuing a certificate")

        unsigned = Certificate(
            version=self.version,
            chain_id=chain.chain_id,
            chain_hash=chain.chain_hash,
            event_count=chain.length,
            issued_at=self.clock(),
            issuer=self.issuer,
            algorithm=SIGNATURE_ALGORITHM,
        )
        signature = self._keys.sign_bytes(canonical_json(unsigned.signed_fields()))
        cert = Certificate(
            **unsigned.signed_fields(),
            signature=signature.hex(),
            public_key=self.public_key_hex,
        )
        logger.info("issued certificate for chain %s (%d events)", chain.chain_id, chain.length)
        return cert

    def verify(
        self,
        certificate: Union[Certificate, Dict[str, Any]],
        public_key: Optional[Union[IssuerKeyPair, str]] = None,
    ) -> bool:
        """Self-check against this issuer's key unless another key is supplied."""
        return verify_certificate(certificate, public_key or self._keys)
