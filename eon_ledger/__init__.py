"""
Eon Token Ledger

Accounting core of a fungible token: per-address balances, a global supply
total, and transfer/issue/burn operations that preserve conservation and
authorization invariants. Amounts use 8-digit fixed-point integers.
"""

__version__ = "1.0.0"

from .amount import Amount, DECIMALS
from .identity import Address, CallerContext, Invocation
from .errors import (
    LedgerError,
    AuthorizationError,
    InvalidAmountError,
    InsufficientBalanceError,
    TestingOperationDisabledError,
    ConservationError,
)
from .storage import StorageInterface, InMemoryStorage, SQLiteStorage, create_storage
from .balances import BalanceStore
from .events import TransferEvent, TransferKind, EventDispatcher, TransferNotifier
from .config import LedgerConfig, get_config
from .logging_config import configure_logging
from .token import Token, TokenQueries, TokenView

__all__ = [
    "Amount", "DECIMALS",
    "Address", "CallerContext", "Invocation",
    "LedgerError", "AuthorizationError", "InvalidAmountError",
    "InsufficientBalanceError", "TestingOperationDisabledError", "ConservationError",
    "StorageInterface", "InMemoryStorage", "SQLiteStorage", "create_storage",
    "BalanceStore",
    "TransferEvent", "TransferKind", "EventDispatcher", "TransferNotifier",
    "LedgerConfig", "get_config", "configure_logging",
    "Token", "TokenQueries", "TokenView",
]
