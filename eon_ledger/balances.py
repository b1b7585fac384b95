"""
Balance Store

Address -> Amount mapping over the storage substrate, plus the single
total-supply slot. Absent entries read as zero; nothing here validates
amounts, that is the token's job.
"""

from typing import Iterator, Tuple

from .amount import Amount
from .identity import Address
from .storage import StorageInterface

BALANCES_TABLE = "balances"
SUPPLY_TABLE = "supply"
SUPPLY_RECORD_ID = "total"


class BalanceStore:
    """Get-or-default accessor over persisted balances"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def get(self, address: Address) -> Amount:
        record = self.storage.load(BALANCES_TABLE, address.hex)
        if record is None:
            return Amount.zero()
        return Amount.from_units(int(record['units']))

    def set(self, address: Address, amount: Amount) -> None:
        # Zero is the default, so a zero balance is stored as no entry at all
        if amount.is_zero():
            self.storage.delete(BALANCES_TABLE, address.hex)
            return
        self.storage.save(BALANCES_TABLE, address.hex, {
            'address': address.hex,
            'units': str(amount.units),
        })

    def get_supply(self) -> Amount:
        record = self.storage.load(SUPPLY_TABLE, SUPPLY_RECORD_ID)
        if record is None:
            return Amount.zero()
        return Amount.from_units(int(record['units']))

    def set_supply(self, amount: Amount) -> None:
        self.storage.save(SUPPLY_TABLE, SUPPLY_RECORD_ID, {'units': str(amount.units)})

    def holders(self) -> Iterator[Tuple[Address, Amount]]:
        """Every (address, balance) pair with a non-zero balance"""
        for record in self.storage.load_all(BALANCES_TABLE):
            yield Address.from_hex(record['address']), Amount.from_units(int(record['units']))

    def total(self) -> Amount:
        """Sum of all stored balances"""
        return Amount.from_units(sum(amount.units for _, amount in self.holders()))
