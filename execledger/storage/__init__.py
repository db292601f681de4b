# execledger/storage/__init__.py
"""
Artifact stores for exported chains, certificates, public keys and verification results.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

CHAIN_ARTIFACT = "execution-chain.json"
CERTIFICATE_ARTIFACT = "certificate.json"
PUBLIC_KEY_ARTIFACT = "public-key.json"
VERIFICATION_ARTIFACT = "verification-result.json"


class ArtifactStore(ABC):
    """Abstract base for places exported artifacts are written to and read from."""

    @abstractmethod
    def write(self, name: str, data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def read(self, name: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        pass

    def save_chain(self, artifact: Dict[str, Any]) -> None:
        self.write(CHAIN_ARTIFACT, artifact)

    def save_certificate(self, certificate: Dict[str, Any]) -> None:
        self.write(CERTIFICATE_ARTIFACT, certificate)

    def save_public_key(self, public_key: Dict[str, Any]) -> None:
        self.write(PUBLIC_KEY_ARTIFACT, public_key)

    def save_verification_result(self, result: Dict[str, Any]) -> None:
        self.write(VERIFICATION_ARTIFACT, result)

    def load_chain(self) -> Dict[str, Any]:
        return self.read(CHAIN_ARTIFACT)

    def load_certificate(self) -> Dict[str, Any]:
        return self.read(CERTIFICATE_ARTIFACT)

    def load_public_key(self) -> Dict[str, Any]:
        return self.read(PUBLIC_KEY_ARTIFACT)


def create_storage(uri: str) -> ArtifactStore:
    """dir://<path> or a plain filesystem path → DirectoryStore"""
    from .directory import DirectoryStore

    stripped = uri.strip()
    if not stripped:
        raise ValueError("Empty storage URI")
    if stripped.startswith("dir://"):
        return DirectoryStore(Path(stripped[len("dir://"):]))
    if "://" in stripped:
        raise ValueError(f"Unsupported storage URI: {uri}")
    return DirectoryStore(Path(stripped))


from .directory import DirectoryStore

__all__ = [
    "ArtifactStore",
    "DirectoryStore",
    "create_storage",
    "CHAIN_ARTIFACT",
    "CERTIFICATE_ARTIFACT",
    "PUBLIC_KEY_ARTIFACT",
    "VERIFICATION_ARTIFACT",
]
