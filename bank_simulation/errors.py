"""
Error taxonomy shared by the account entities and the service facade
"""

from enum import Enum


class ErrorKind(Enum):
    """Recoverable, caller-visible failure categories"""
    INVALID_AMOUNT = "invalid_amount"          # Non-finite or non-positive money
    INSUFFICIENT_FUNDS = "insufficient_funds"  # Withdrawal exceeds balance
    INVALID_TERM = "invalid_term"              # Bad month count
    ALREADY_CLOSED = "already_closed"          # Operation on a closed CDT
    INVALID_BALANCE = "invalid_balance"        # Non-numeric ledger balance
    CDT_STILL_ACTIVE = "cdt_still_active"      # New CDT while one is open
    INVALID_IDENTIFIER = "invalid_identifier"  # Empty account/CDT id


class AccountError(ValueError):
    """Raised by entity methods; carries the ErrorKind"""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message
