# execledger/chain/integrity.py
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union

from execledger.core.errors import SerializationError
from execledger.core.types import Event, GENESIS_HASH
from execledger.crypto.hashing import event_hash


@dataclass
class IntegrityFailure:
    sequence: int
    message: str
    category: str = "event_hash"  # "event_hash", "prev_hash", "sequence", "serialization"


@dataclass
class IntegrityReport:
    valid: bool
    failures: List[IntegrityFailure] = field(default_factory=list)

    @property
    def broken_sequences(self) -> List[int]:
        """Sorted, de-duplicated sequence numbers with at least one failure."""
        return sorted({f.sequence for f in self.failures})

    def __bool__(self):
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "broken_sequences": self.broken_sequences}

    def __str__(self):
        if self.valid:
            return "Hash chain intact"
        lines = [f"Hash chain BROKEN ({len(self.failures)} issues):"]
        for f in self.failures:
            lines.append(f"  • [#{f.sequence}] {f.category}: {f.message}")
        return "\n".join(lines)


def verify_chain_integrity(events: Iterable[Union[Event, Dict[str, Any]]]) -> IntegrityReport:
    """
    Recompute every event_hash and every prev_hash link.
    Collects all mismatches instead of stopping at the first one.
    """
    report = IntegrityReport(True)
    expected_prev = GENESIS_HASH

    for position, event in enumerate(events, start=1):
        record = event.to_dict() if isinstance(event, Event) else dict(event)
        seq = record.get("sequence", position)
        if not isinstance(seq, int) or isinstance(seq, bool):
            seq = position

        if record.get("sequence") != position:
            report.failures.append(IntegrityFailure(
                seq, f"Sequence mismatch: expected {position}, got {record.get('sequence')!r}", "sequence"))

        if record.get("prev_hash") != expected_prev:
            report.failures.append(IntegrityFailure(
                seq, "prev_hash does not match previous event_hash", "prev_hash"))

        stored = record.get("event_hash")
        try:
            recomputed = event_hash(record)
        except SerializationError as e:
            report.failures.append(IntegrityFailure(seq, f"Cannot canonicalize event: {e}", "serialization"))
        else:
            if recomputed != stored:
                report.failures.append(IntegrityFailure(
                    seq, "event_hash does not match recomputed hash", "event_hash"))

        # later links are checked against what was stored, so one edit flags one event
        expected_prev = stored

    report.valid = not report.failures
    return report
