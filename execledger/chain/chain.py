# execledger/chain/chain.py
import copy
import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from execledger.core.canon import canonical_json
from execledger.core.errors import AlreadyResolvedError, ChainClosedError
from execledger.core.types import ChainStatus, Event, GENESIS_HASH, utc_now
from execledger.crypto import hashing

logger = logging.getLogger(__name__)

Observer = Callable[[Event], None]


@dataclass
class ExecutionChain:
    """
    Append-only, hash-linked event log for a single workflow.

    One writer per chain: sequence numbers and prev_hash linkage assume appends
    are serialized by the caller. Observers are owned by the instance and are
    notified after each event is committed; with an executor they run there
    instead of on the writer's thread.
    """
    chain_id: str
    events: List[Event] = field(default_factory=list)
    observers: Sequence[Observer] = ()
    executor: Optional[Executor] = None
    clock: Callable[[], str] = utc_now
    status: ChainStatus = "active"
    chain_hash: Optional[str] = None

    def __post_init__(self):
        self.observers = tuple(self.observers)

    @property
    def length(self) -> int:
        return len(self.events)

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"

    def append(
        self,
        event_type: str,
        agent_name: str,
        organization: str,
        payload: Any = None,
        *,
        authorization: bool = False,
        owner_id: Optional[str] = None,
    ) -> Event:
        """
        Append a new event: link to previous hash → hash canonical record → commit → notify.
        Returns the sealed event.
        """
        if self.is_resolved:
            raise ChainClosedError(f"Chain '{self.chain_id}' is resolved; no further appends")
        if authorization and not owner_id:
            raise ValueError("Authorization events require an owner_id")

        if payload is None:
            payload = {}
        # reject unsupported values as SerializationError before copying them
        canonical_json(payload)

        unsealed = Event(
            sequence=self.length + 1,
            event_type=event_type,
            agent_name=agent_name,
            organization=organization,
            timestamp=self.clock(),
            payload=copy.deepcopy(payload),
            prev_hash=self.get_last_hash() or GENESIS_HASH,
            authorization_event=authorization,
            owner_user_id=owner_id if authorization else None,
        )
        sealed = replace(unsealed, event_hash=hashing.event_hash(unsealed))
        self.events.append(sealed)
        logger.debug("chain %s: appended #%d %s %s", self.chain_id, sealed.sequence, sealed.event_type, sealed.event_hash)

        self._notify(sealed)
        return self._detached(sealed)

    @staticmethod
    def _detached(event: Event) -> Event:
        """Copy handed out to callers and observers; the committed payload stays private."""
        return replace(event, payload=copy.deepcopy(event.payload))

    def _notify(self, event: Event) -> None:
        for observer in self.observers:
            if self.executor is not None:
                try:
                    future = self.executor.submit(observer, self._detached(event))
                except RuntimeError as e:
                    # executor already shut down; the event itself is committed
                    logger.warning("chain %s: observer %r not scheduled for event #%d: %s",
                                   self.chain_id, observer, event.sequence, e)
                    continue
                future.add_done_callback(self._log_observer_failure)
                continue
            try:
                observer(self._detached(event))
            except Exception:
                logger.exception("chain %s: observer %r failed on event #%d", self.chain_id, observer, event.sequence)

    def _log_observer_failure(self, future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("chain %s: observer failed: %s", self.chain_id, exc, exc_info=exc)

    def resolve(self) -> str:
        """Seal the chain: compute the aggregate hash once and close it for appends."""
        if self.is_resolved:
            raise AlreadyResolvedError(f"Chain '{self.chain_id}' was already resolved")
        self.chain_hash = hashing.chain_hash(e.event_hash for e in self.events)
        self.status = "resolved"
        logger.info("chain %s resolved: %d events, chain_hash=%s", self.chain_id, self.length, self.chain_hash)
        return self.chain_hash

    def get_chain(self) -> List[Event]:
        """Returns copy of the event list"""
        return self.events.copy()

    def get_last_hash(self) -> Optional[str]:
        if not self.events:
            return None
        return self.events[-1].event_hash

    def to_artifact(self) -> Dict[str, Any]:
        """Exported chain artifact (JSON-ready)."""
        return {
            "chain_id": self.chain_id,
            "status": self.status,
            "chain_hash": self.chain_hash,
            "event_count": self.length,
            "events": [e.to_dict() for e in self.events],
        }

    @classmethod
    def from_artifact(cls, data: Dict[str, Any], **kwargs) -> "ExecutionChain":
        """
        Rehydrate an exported chain as stored. Hashes are not recomputed here;
        run verify_chain_integrity on the result to check them.
        """
        return cls(
            chain_id=data["chain_id"],
            events=[Event.from_dict(e) for e in data.get("events", [])],
            status=data.get("status", "active"),
            chain_hash=data.get("chain_hash"),
            **kwargs,
        )
