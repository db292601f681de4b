# execledger/core/types.py
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

GENESIS_HASH = "0" * 64            # prev_hash of the first event in every chain
CERTIFICATE_VERSION = "1.0"
SIGNATURE_ALGORITHM = "Ed25519"

ChainStatus = Literal["active", "resolved"]


def utc_now() -> str:
    """ISO 8601 UTC with millis and a Z suffix, e.g. 2026-01-31T14:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Event:
    """Single hash-linked entry in an execution chain."""
    sequence: int                   # 1-based
    event_type: str                 # e.g. "pr_opened", "instruction_received"
    agent_name: str                 # actor identity
    organization: str
    timestamp: str
    payload: Any = field(default_factory=dict)
    prev_hash: str = GENESIS_HASH
    event_hash: str = ""            # empty until sealed into the chain
    authorization_event: bool = False
    owner_user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Exported form. Authorization fields only appear on authorization events."""
        d = asdict(self)
        if not self.authorization_event:
            d.pop("authorization_event")
            d.pop("owner_user_id")
        return d

    def hashable_fields(self) -> Dict[str, Any]:
        """Everything that goes into event_hash."""
        d = self.to_dict()
        d.pop("event_hash")
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            sequence=data["sequence"],
            event_type=data["event_type"],
            agent_name=data["agent_name"],
            organization=data.get("organization", ""),
            timestamp=data["timestamp"],
            payload=data.get("payload", {}),
            prev_hash=data["prev_hash"],
            event_hash=data.get("event_hash", ""),
            authorization_event=bool(data.get("authorization_event", False)),
            owner_user_id=data.get("owner_user_id"),
        )


@dataclass(frozen=True)
class Certificate:
    """Signed summary of a resolved chain."""
    chain_id: str
    chain_hash: str
    event_count: int
    issued_at: str
    issuer: str
    version: str = CERTIFICATE_VERSION
    algorithm: str = SIGNATURE_ALGORITHM
    signature: str = ""             # hex Ed25519 signature
    public_key: str = ""            # hex DER (SPKI)

    def signed_fields(self) -> Dict[str, Any]:
        """The exact mapping that is canonicalized and signed."""
        return {
            "version": self.version,
            "chain_id": self.chain_id,
            "chain_hash": self.chain_hash,
            "event_count": self.event_count,
            "issued_at": self.issued_at,
            "issuer": self.issuer,
            "algorithm": self.algorithm,
        }

    def to_dict(self) -> Dict[str, Any]:
        d = self.signed_fields()
        d["signature"] = self.signature
        d["public_key"] = self.public_key
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Certificate":
        return cls(
            chain_id=data["chain_id"],
            chain_hash=data["chain_hash"],
            event_count=data["event_count"],
            issued_at=data["issued_at"],
            issuer=data["issuer"],
            version=data.get("version", CERTIFICATE_VERSION),
            algorithm=data.get("algorithm", SIGNATURE_ALGORITHM),
            signature=data.get("signature", ""),
            public_key=data.get("public_key", ""),
        )
