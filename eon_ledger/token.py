"""
Token Ledger Engine

Core accounting for the Eon token: balances, total supply, and the
transfer/issue/burn state transitions. Every mutating operation validates
first, then applies all of its writes inside one storage transaction, and
only after that transaction commits emits its transfer notification.

Invariants held after every operation:
    total_supply() == sum of balance_of(a) over all addresses a
    balance_of(a) >= 0 for every address a
"""

from abc import ABC, abstractmethod
from typing import Optional
import threading

from .amount import Amount, AmountLike, DECIMALS
from .balances import BalanceStore
from .config import LedgerConfig, get_config
from .errors import (
    AuthorizationError,
    ConservationError,
    InsufficientBalanceError,
    InvalidAmountError,
    TestingOperationDisabledError,
)
from .events import TransferNotifier
from .identity import Address, AddressLike, CallerContext, as_address
from .logging_config import get_logger, log_action
from .storage import StorageInterface, create_storage


class TokenQueries(ABC):
    """Read-only token operations: public, no authorization, no side effects"""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def symbol(self) -> str:
        pass

    @property
    def decimals(self) -> int:
        return DECIMALS

    @property
    @abstractmethod
    def owner(self) -> Address:
        pass

    @abstractmethod
    def total_supply(self) -> Amount:
        pass

    @abstractmethod
    def balance_of(self, address: AddressLike) -> Amount:
        pass


class TokenView(TokenQueries):
    """Read-only handle on a Token; exposes no mutating operations"""

    def __init__(self, token: 'Token'):
        self._token = token

    @property
    def name(self) -> str:
        return self._token.name

    @property
    def symbol(self) -> str:
        return self._token.symbol

    @property
    def owner(self) -> Address:
        return self._token.owner

    def total_supply(self) -> Amount:
        return self._token.total_supply()

    def balance_of(self, address: AddressLike) -> Amount:
        return self._token.balance_of(address)


class Token(TokenQueries):
    """
    Fungible token ledger instance.

    Each instance owns its storage, notifier and configuration; there is no
    process-wide ledger. Operations are serialized per instance.
    """

    def __init__(
        self,
        caller: CallerContext,
        owner: Optional[AddressLike] = None,
        storage: Optional[StorageInterface] = None,
        notifier: Optional[TransferNotifier] = None,
        config: Optional[LedgerConfig] = None,
    ):
        """
        Create a ledger owned by `owner` (defaults to the invoker).

        Raises:
            AuthorizationError: if the caller did not authorize the owner address
        """
        self.config = config or get_config()
        self.logger = get_logger("eon.token")
        owner_address = as_address(owner) if owner is not None else caller.invoker

        if not caller.is_authorized_by(owner_address):
            self._reject(caller, "deploy", owner_address, "Sender was not the owner")
            raise AuthorizationError(f"Sender was not the owner {owner_address}")

        self._owner = owner_address
        self.storage = storage or create_storage(self.config)
        self.balances = BalanceStore(self.storage)
        self.notifier = notifier or TransferNotifier()
        self._lock = threading.RLock()

        log_action(
            self.logger, "info", f"Token {self.symbol} created",
            caller=caller.invoker.hex, action="deploy", resource=owner_address.hex,
        )

    # Queries

    @property
    def name(self) -> str:
        return self.config.token_name

    @property
    def symbol(self) -> str:
        return self.config.token_symbol

    @property
    def owner(self) -> Address:
        return self._owner

    def total_supply(self) -> Amount:
        with self._lock:
            return self.balances.get_supply()

    def balance_of(self, address: AddressLike) -> Amount:
        with self._lock:
            return self.balances.get(as_address(address))

    def view(self) -> TokenView:
        return TokenView(self)

    # Mutations

    def transfer(self, caller: CallerContext, from_address: AddressLike,
                 to_address: AddressLike, amount: AmountLike) -> bool:
        """
        Move `amount` from `from_address` to `to_address`.

        Self-transfers are allowed: balances net out but the transfer is
        still validated and still notified.

        Raises:
            InvalidAmountError: amount is negative
            AuthorizationError: caller did not authorize from_address
            InsufficientBalanceError: from_address holds less than amount
        """
        sender, recipient = as_address(from_address), as_address(to_address)
        value = Amount.of(amount)

        with self._lock:
            self._require_non_negative(caller, "transfer", sender, value)
            self._require_authorized(caller, "transfer", sender,
                                     "The from Address did not approve the operation")

            with self.storage.atomic():
                from_balance = self.balances.get(sender)
                self._require_funds(caller, "transfer", sender, from_balance, value)
                self.balances.set(sender, from_balance - value)
                # Read after the debit so a self-transfer nets out
                to_balance = self.balances.get(recipient)
                self.balances.set(recipient, to_balance + value)

            log_action(
                self.logger, "info", f"Transferred {value} {self.symbol}",
                caller=caller.invoker.hex, action="transfer", resource=sender.hex,
                extra={"to": recipient.hex, "amount": str(value)},
            )
            self.notifier.notify(sender, recipient, value)
        return True

    def issue(self, caller: CallerContext, address: AddressLike, amount: AmountLike) -> None:
        """
        Create `amount` new tokens for `address`. Owner only.

        Raises:
            AuthorizationError: caller did not authorize the owner address
            InvalidAmountError: amount is negative and validate_issue_amount is on
        """
        recipient = as_address(address)
        value = Amount.of(amount)

        with self._lock:
            self._require_authorized(caller, "issue", self._owner, "Only the owner can issue tokens")
            if self.config.validate_issue_amount:
                self._require_non_negative(caller, "issue", recipient, value)
            self._mint(caller, "issue", recipient, value)

    def mint_for_testing(self, caller: CallerContext, address: AddressLike, amount: AmountLike) -> None:
        """Same effect as issue with no authorization check. Test fixtures only."""
        recipient = as_address(address)
        value = Amount.of(amount)

        with self._lock:
            self._require_testing_enabled(caller, "mint_for_testing")
            if self.config.validate_issue_amount:
                self._require_non_negative(caller, "mint_for_testing", recipient, value)
            self._mint(caller, "mint_for_testing", recipient, value)

    def burn_for_testing(self, caller: CallerContext, address: AddressLike, amount: AmountLike) -> bool:
        """
        Destroy `amount` tokens held by `address`, which must authorize it.
        Test fixtures only.

        Raises:
            TestingOperationDisabledError: testing operations are off
            InvalidAmountError: amount is negative
            AuthorizationError: caller did not authorize address
            InsufficientBalanceError: address holds less than amount
        """
        holder = as_address(address)
        value = Amount.of(amount)

        with self._lock:
            self._require_testing_enabled(caller, "burn_for_testing")
            self._require_non_negative(caller, "burn_for_testing", holder, value)
            self._require_authorized(caller, "burn_for_testing", holder,
                                     "The from Address did not approve the operation")

            with self.storage.atomic():
                balance = self.balances.get(holder)
                self._require_funds(caller, "burn_for_testing", holder, balance, value)
                self.balances.set(holder, balance - value)
                self.balances.set_supply(self.balances.get_supply() - value)

            log_action(
                self.logger, "info", f"Burned {value} {self.symbol}",
                caller=caller.invoker.hex, action="burn_for_testing", resource=holder.hex,
                extra={"amount": str(value)},
            )
            self.notifier.notify(holder, None, value)
        return True

    def verify_conservation(self) -> Amount:
        """
        Recompute the sum of all balances and compare it to the supply.

        Raises:
            ConservationError: if they differ
        """
        with self._lock:
            supply = self.balances.get_supply()
            total = self.balances.total()
        if supply != total:
            self.logger.error(f"Conservation check failed: supply={supply} balances={total}")
            raise ConservationError(supply, total)
        return supply

    # Internals

    def _mint(self, caller: CallerContext, action: str, recipient: Address, value: Amount) -> None:
        with self.storage.atomic():
            balance = self.balances.get(recipient)
            if value.is_negative():
                # Unchecked negative issue still may not overdraw the account
                self._require_funds(caller, action, recipient, balance, -value)
            self.balances.set(recipient, balance + value)
            self.balances.set_supply(self.balances.get_supply() + value)

        log_action(
            self.logger, "info", f"Minted {value} {self.symbol}",
            caller=caller.invoker.hex, action=action, resource=recipient.hex,
            extra={"amount": str(value)},
        )
        self.notifier.notify(None, recipient, value)

    def _require_non_negative(self, caller: CallerContext, action: str,
                              address: Address, value: Amount) -> None:
        if value.is_negative():
            self._reject(caller, action, address, f"Negative amount {value}")
            raise InvalidAmountError(f"Amount must be greater than 0: {value}")

    def _require_authorized(self, caller: CallerContext, action: str,
                            address: Address, message: str) -> None:
        if not caller.is_authorized_by(address):
            self._reject(caller, action, address, message)
            raise AuthorizationError(message)

    def _require_funds(self, caller: CallerContext, action: str, address: Address,
                       balance: Amount, value: Amount) -> None:
        if balance < value:
            self._reject(caller, action, address, "Insufficient balance")
            raise InsufficientBalanceError(address, balance, value)

    def _require_testing_enabled(self, caller: CallerContext, action: str) -> None:
        if not self.config.enable_testing_operations:
            self._reject(caller, action, None, "Testing operations are disabled")
            raise TestingOperationDisabledError(f"{action} is only available when testing operations are enabled")

    def _reject(self, caller: CallerContext, action: str,
                address: Optional[Address], reason: str) -> None:
        log_action(
            self.logger, "warning", f"Rejected {action}: {reason}",
            caller=caller.invoker.hex, action=action,
            resource=address.hex if address else None,
        )
