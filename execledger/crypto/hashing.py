# execledger/crypto/hashing.py
import hashlib
from typing import Any, Dict, Iterable, Union

from execledger.core.canon import canonical_json
from execledger.core.types import Event


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def event_hash(event: Union[Event, Dict[str, Any]]) -> str:
    """
    SHA-256 over the canonical record minus its own event_hash.
    Accepts an Event or an exported event dict.
    """
    if isinstance(event, Event):
        fields = event.hashable_fields()
    else:
        fields = {k: v for k, v in event.items() if k != "event_hash"}
    return sha256_hex(canonical_json(fields))


def chain_hash(event_hashes: Iterable[str]) -> str:
    """Aggregate hash: SHA-256 of the event hashes joined with ':'."""
    return sha256_hex(":".join(event_hashes).encode("utf-8"))
