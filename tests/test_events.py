"""
Tests for transfer notifications and the event dispatcher
"""

import pytest
from unittest.mock import Mock

from eon_ledger.amount import Amount
from eon_ledger.events import (
    EventDispatcher, TransferEvent, TransferEventModel, TransferKind, TransferNotifier,
)
from eon_ledger.identity import Address

ALICE = Address.from_label("alice")
BOB = Address.from_label("bob")


class TestTransferEvent:
    """Test event records and their wire schema"""

    def test_kind_classification(self):
        assert TransferEvent(None, ALICE, Amount.of("1")).kind == TransferKind.MINT
        assert TransferEvent(ALICE, None, Amount.of("1")).kind == TransferKind.BURN
        assert TransferEvent(ALICE, BOB, Amount.of("1")).kind == TransferKind.TRANSFER

    def test_event_needs_an_endpoint(self):
        with pytest.raises(ValueError):
            TransferEvent(None, None, Amount.of("1"))

    def test_events_are_immutable(self):
        event = TransferEvent(ALICE, BOB, Amount.of("1"))
        with pytest.raises(AttributeError):
            event.amount = Amount.of("2")

    def test_wire_form_field_order(self):
        event = TransferEvent(None, BOB, Amount.of("30"))
        data = event.to_dict()
        assert event.name == "transfer"
        assert list(data) == ["from", "to", "amount"]
        assert data == {"from": None, "to": BOB.hex, "amount": "30.00000000"}

    def test_from_dict(self):
        restored = TransferEvent.from_dict({"from": ALICE.hex, "to": None, "amount": "5.5"}, sequence=4)
        assert restored.from_address == ALICE
        assert restored.to_address is None
        assert restored.amount == Amount.of("5.5")
        assert restored.sequence == 4

    def test_model_accepts_field_name(self):
        model = TransferEventModel(from_=ALICE.hex, to=BOB.hex, amount="1.00000000")
        assert model.model_dump(by_alias=True)["from"] == ALICE.hex


class TestEventDispatcher:
    """Test subscription and delivery"""

    def test_kind_and_global_subscribers(self):
        dispatcher = EventDispatcher()
        mint_handler = Mock()
        any_handler = Mock()
        dispatcher.subscribe(mint_handler, TransferKind.MINT)
        dispatcher.subscribe(any_handler)

        mint = TransferEvent(None, ALICE, Amount.of("1"))
        move = TransferEvent(ALICE, BOB, Amount.of("1"))
        dispatcher.publish(mint)
        dispatcher.publish(move)

        mint_handler.assert_called_once_with(mint)
        assert any_handler.call_count == 2
        assert dispatcher.get_handler_count() == 2
        assert dispatcher.get_handler_count(TransferKind.MINT) == 1

    def test_failing_handler_does_not_stop_delivery(self):
        dispatcher = EventDispatcher()
        broken = Mock(side_effect=RuntimeError("indexer down"))
        healthy = Mock()
        dispatcher.subscribe(broken)
        dispatcher.subscribe(healthy)

        dispatcher.publish(TransferEvent(ALICE, BOB, Amount.of("1")))
        healthy.assert_called_once()

    def test_unsubscribe_and_clear(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(handler, TransferKind.BURN)
        dispatcher.unsubscribe(handler, TransferKind.BURN)
        dispatcher.unsubscribe(handler, TransferKind.BURN)  # warns, does not raise
        dispatcher.publish(TransferEvent(ALICE, None, Amount.of("1")))
        handler.assert_not_called()

        dispatcher.subscribe(handler)
        dispatcher.clear()
        assert dispatcher.get_handler_count() == 0


class TestTransferNotifier:
    """Test sequencing and fire-and-forget delivery"""

    def test_sequence_numbers_follow_emission_order(self):
        received = []
        dispatcher = EventDispatcher()
        dispatcher.subscribe(received.append)
        notifier = TransferNotifier(dispatcher)

        notifier.notify(None, ALICE, Amount.of("100"))
        notifier.notify(ALICE, BOB, Amount.of("30"))
        notifier.notify(BOB, None, Amount.of("30"))

        assert [e.sequence for e in received] == [1, 2, 3]
        assert [e.kind for e in received] == [TransferKind.MINT, TransferKind.TRANSFER, TransferKind.BURN]

    def test_notify_never_raises(self):
        dispatcher = Mock()
        dispatcher.publish.side_effect = RuntimeError("queue full")
        notifier = TransferNotifier(dispatcher)
        assert notifier.notify(ALICE, BOB, Amount.of("1")) is None
