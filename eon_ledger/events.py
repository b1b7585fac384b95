"""
Transfer Notification Module

Every balance-affecting operation emits one immutable `transfer` record
(from, to, amount). A missing `from` marks a mint, a missing `to` marks a
burn. Records are delivered through a publish/subscribe dispatcher whose
subscriber failures never reach the ledger operation that emitted them.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import RLock
import itertools
import logging

from pydantic import BaseModel, ConfigDict, Field

from .amount import Amount
from .identity import Address

TRANSFER_EVENT_NAME = "transfer"

logger = logging.getLogger("eon.events")


class TransferKind(Enum):
    """How a transfer record should be read by indexers"""
    MINT = "mint"
    BURN = "burn"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class TransferEvent:
    """Immutable (from, to, amount) record of one balance change"""
    from_address: Optional[Address]
    to_address: Optional[Address]
    amount: Amount
    sequence: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if self.from_address is None and self.to_address is None:
            raise ValueError("Transfer event needs a from or a to address")

    @property
    def name(self) -> str:
        return TRANSFER_EVENT_NAME

    @property
    def kind(self) -> TransferKind:
        if self.from_address is None:
            return TransferKind.MINT
        if self.to_address is None:
            return TransferKind.BURN
        return TransferKind.TRANSFER

    def to_model(self) -> 'TransferEventModel':
        return TransferEventModel(
            from_=self.from_address.hex if self.from_address else None,
            to=self.to_address.hex if self.to_address else None,
            amount=str(self.amount),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form for indexers: fields in order from, to, amount"""
        return self.to_model().model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], sequence: int = 0) -> 'TransferEvent':
        model = TransferEventModel.model_validate(data)
        return cls(
            from_address=Address.from_hex(model.from_) if model.from_ else None,
            to_address=Address.from_hex(model.to) if model.to else None,
            amount=Amount.of(model.amount),
            sequence=sequence,
        )


class TransferEventModel(BaseModel):
    """Serialized `transfer` event schema"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: Optional[str] = Field(None, alias="from", description="Sender address hex, null for mints")
    to: Optional[str] = Field(None, description="Recipient address hex, null for burns")
    amount: str = Field(..., description="Decimal amount as string, 8 fractional digits")


TransferHandler = Callable[[TransferEvent], None]


class EventDispatcher:
    """Publish/subscribe hub for transfer events"""

    def __init__(self):
        self._handlers: Dict[TransferKind, List[TransferHandler]] = {}
        self._global_handlers: List[TransferHandler] = []
        self._lock = RLock()
        self.logger = logger

    def subscribe(self, handler: TransferHandler, kind: Optional[TransferKind] = None) -> None:
        """Subscribe to one kind of transfer, or to all of them when kind is None"""
        with self._lock:
            if kind is None:
                self._global_handlers.append(handler)
            else:
                self._handlers.setdefault(kind, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {kind.value if kind else 'all'}")

    def unsubscribe(self, handler: TransferHandler, kind: Optional[TransferKind] = None) -> None:
        with self._lock:
            handlers = self._global_handlers if kind is None else self._handlers.get(kind, [])
            try:
                handlers.remove(handler)
                self.logger.debug(f"Unsubscribed handler {_handler_name(handler)}")
            except ValueError:
                self.logger.warning(f"Handler {_handler_name(handler)} was not subscribed")

    def publish(self, event: TransferEvent) -> None:
        """Deliver event to subscribers; handler errors are logged, never raised"""
        with self._lock:
            self.logger.debug(f"Publishing {event.kind.value} #{event.sequence}")
            handlers = self._handlers.get(event.kind, []) + self._global_handlers
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    self.logger.error(
                        f"Error in transfer handler {_handler_name(handler)} "
                        f"for event #{event.sequence}: {e}"
                    )

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()
            self.logger.info("All event handlers cleared")

    def get_handler_count(self, kind: Optional[TransferKind] = None) -> int:
        with self._lock:
            if kind:
                return len(self._handlers.get(kind, []))
            return sum(len(handlers) for handlers in self._handlers.values()) + len(self._global_handlers)


class TransferNotifier:
    """
    Sink the ledger calls after each committed balance change.
    Stamps events with a per-notifier sequence number so consumers can
    check they see them in emission order.
    """

    def __init__(self, dispatcher: Optional[EventDispatcher] = None):
        self.dispatcher = dispatcher or EventDispatcher()
        self._sequence = itertools.count(1)
        self._lock = RLock()

    def notify(self, from_address: Optional[Address], to_address: Optional[Address],
               amount: Amount) -> Optional[TransferEvent]:
        with self._lock:
            try:
                event = TransferEvent(from_address, to_address, amount, sequence=next(self._sequence))
                self.dispatcher.publish(event)
            except Exception as e:
                # Delivery is fire-and-forget; the ledger change already happened
                logger.error(f"Failed to emit transfer notification: {e}")
                return None
            return event


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))
