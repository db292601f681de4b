# execledger/integration/auditor.py
import logging
from concurrent.futures import Executor
from typing import Any, Dict, Optional, Sequence

from execledger.certificate.issuer import CertificateIssuer
from execledger.chain.chain import ExecutionChain, Observer
from execledger.core.types import Certificate, Event
from execledger.storage import ArtifactStore
from execledger.verify.verifier import VerificationReport, verify_artifacts

logger = logging.getLogger(__name__)


class ChainAuditor:
    """
    Workflow driver glue: owns one chain and one issuer for the life of a workflow.

    Agents, humans and platform webhooks record activity through log(); human
    sign-offs go through authorize(); seal() resolves, certifies and
    self-verifies in one step.
    """

    def __init__(
        self,
        chain_id: str,
        organization: str,
        issuer: Optional[CertificateIssuer] = None,
        observers: Sequence[Observer] = (),
        executor: Optional[Executor] = None,
    ):
        self.organization = organization
        self.chain = ExecutionChain(chain_id, observers=observers, executor=executor)
        self.issuer = issuer or CertificateIssuer()
        self.certificate: Optional[Certificate] = None

    def log(
        self,
        event_type: str,
        agent_name: str,
        payload: Optional[Dict[str, Any]] = None,
        organization: Optional[str] = None,
    ) -> Event:
        return self.chain.append(event_type, agent_name, organization or self.organization, payload or {})

    def authorize(
        self,
        event_type: str,
        agent_name: str,
        owner_id: str,
        payload: Optional[Dict[str, Any]] = None,
        organization: Optional[str] = None,
    ) -> Event:
        """Record an event the owner takes responsibility for."""
        return self.chain.append(
            event_type,
            agent_name,
            organization or self.organization,
            payload or {},
            authorization=True,
            owner_id=owner_id,
        )

    def seal(self) -> Certificate:
        self.chain.resolve()
        self.certificate = self.issuer.issue(self.chain)
        if not self.issuer.verify(self.certificate):
            # a freshly issued certificate must self-verify
            raise RuntimeError(f"Certificate for chain '{self.chain.chain_id}' failed self-verification")
        return self.certificate

    def verify(self) -> VerificationReport:
        """Re-check the exported artifacts the way an outside auditor would."""
        if self.certificate is None:
            raise RuntimeError("seal() must be called before verify()")
        return verify_artifacts(self.chain.to_artifact(), self.certificate, self.issuer.public_key_artifact())

    def export(self, store: ArtifactStore) -> VerificationReport:
        """Write chain, certificate, public key and verification result."""
        report = self.verify()
        store.save_chain(self.chain.to_artifact())
        store.save_certificate(self.certificate.to_dict())
        store.save_public_key(self.issuer.public_key_artifact())
        store.save_verification_result(report.to_result_artifact())
        logger.info("exported chain %s to %r", self.chain.chain_id, store)
        return report
