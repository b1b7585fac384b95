"""Shared fixtures for the ledger test suite"""

import sqlite3

import pytest

from eon_ledger.config import LedgerConfig
from eon_ledger.events import EventDispatcher, TransferNotifier
from eon_ledger.identity import Address, Invocation
from eon_ledger.storage import InMemoryStorage
from eon_ledger.token import Token

OWNER = Address.from_label("owner")
ALICE = Address.from_label("alice")
BOB = Address.from_label("bob")
MALLORY = Address.from_label("mallory")


class FailingCommitConnection:
    """sqlite3 connection stand-in whose commit fails"""

    def __init__(self, connection):
        self._connection = connection

    def commit(self):
        raise sqlite3.OperationalError("database is locked")

    def __getattr__(self, name):
        return getattr(self._connection, name)


@pytest.fixture
def config():
    return LedgerConfig(enable_testing_operations=True, _env_file=None)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def received():
    """Transfer events delivered to a catch-all subscriber, in order"""
    return []


@pytest.fixture
def notifier(received):
    dispatcher = EventDispatcher()
    dispatcher.subscribe(received.append)
    return TransferNotifier(dispatcher)


@pytest.fixture
def token(storage, notifier, config):
    return Token(Invocation(OWNER), storage=storage, notifier=notifier, config=config)
