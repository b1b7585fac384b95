"""
Ledger Errors

Every rejection raised by the ledger aborts the whole operation with no
state change. Callers decide whether to retry with corrected parameters.
"""


class LedgerError(Exception):
    """Base class for all ledger errors"""


class AuthorizationError(LedgerError, PermissionError):
    """Invocation was not authorized by the required address"""


class InvalidAmountError(LedgerError, ValueError):
    """Amount is negative where it must not be, or is not representable"""


class InsufficientBalanceError(LedgerError):
    """Debit exceeds the current balance"""

    def __init__(self, address, balance, requested):
        self.address = address
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient balance for {address}: "
            f"balance={balance}, requested={requested}"
        )


class TestingOperationDisabledError(LedgerError):
    """Test-only operation invoked while testing operations are disabled"""

    # Keep pytest from collecting this as a test class
    __test__ = False


class ConservationError(LedgerError):
    """Total supply no longer equals the sum of all balances"""

    def __init__(self, supply, balances_total):
        self.supply = supply
        self.balances_total = balances_total
        super().__init__(
            f"Conservation violated: supply={supply}, sum of balances={balances_total}"
        )
