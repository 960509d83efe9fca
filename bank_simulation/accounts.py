"""
Account Module

Client identity, the ledger-mirror Account record and the two demand-deposit
products: savings (monthly compound interest) and checking (no interest).
Balances are Decimal and never go negative through these operations.
"""

from decimal import Decimal, InvalidOperation, Overflow
from dataclasses import dataclass, field
from typing import Any, List
from enum import Enum

from .amounts import parse_amount, parse_balance, parse_months, parse_rate, to_decimal
from .errors import AccountError, ErrorKind


class AccountKind(Enum):
    """Banking product discriminant"""
    SAVING = "saving"      # Savings account, monthly compounding
    CHECKING = "checking"  # Checking account, no interest
    CDT = "cdt"            # Term deposit, simple interest at maturity


@dataclass
class Account:
    """
    Ledger mirror of a product balance

    Holds its own copy of the balance; it is refreshed explicitly by the
    portfolio and never tracks the source account on its own.
    """
    client_id: str
    account_id: str
    balance: Decimal = Decimal('0')

    def __post_init__(self):
        self.set_balance(self.balance)

    def get_balance(self) -> Decimal:
        return self.balance

    def set_balance(self, new_balance: Any) -> None:
        """
        Replace the mirrored balance

        Raises:
            AccountError: INVALID_BALANCE if the value is not a finite number
        """
        if isinstance(new_balance, str):
            raise AccountError(ErrorKind.INVALID_BALANCE, "Balance must be a valid number")
        try:
            value = to_decimal(new_balance)
        except ValueError:
            raise AccountError(ErrorKind.INVALID_BALANCE, "Balance must be a valid number")
        if not value.is_finite():
            raise AccountError(ErrorKind.INVALID_BALANCE, "Balance must be a finite number")
        self.balance = value


@dataclass
class Client:
    """Bank client with the accounts registered under it"""
    name: str
    client_id: str
    accounts: List[Account] = field(default_factory=list)

    def create_account(self, account: Account) -> None:
        """Register a new account record for this client"""
        self.accounts.append(account)


class DepositAccount:
    """Shared deposit/withdraw behaviour for demand accounts"""

    kind: AccountKind

    def __init__(self, account_id: str, balance: Any = Decimal('0')):
        self.account_id = account_id
        self._balance = parse_balance(balance)

    @property
    def balance(self) -> Decimal:
        return self._balance

    def deposit(self, amount: Any) -> Decimal:
        """
        Credit a positive amount

        Returns:
            The new balance

        Raises:
            AccountError: INVALID_AMOUNT
        """
        value = parse_amount(amount)
        self._balance += value
        return self._balance

    def withdraw(self, amount: Any) -> Decimal:
        """
        Debit a positive amount not exceeding the balance

        Returns:
            The new balance

        Raises:
            AccountError: INVALID_AMOUNT or INSUFFICIENT_FUNDS
        """
        value = parse_amount(amount)
        if value > self._balance:
            raise AccountError(
                ErrorKind.INSUFFICIENT_FUNDS,
                f"Insufficient funds: requested {value}, available {self._balance}"
            )
        self._balance -= value
        return self._balance

    def __repr__(self) -> str:
        return f"{type(self).__name__}(account_id={self.account_id!r}, balance={self._balance})"


class SavingAccount(DepositAccount):
    """Savings account earning monthly compound interest"""

    kind = AccountKind.SAVING

    def __init__(self, account_id: str, balance: Any = Decimal('0'), monthly_rate: Any = Decimal('0')):
        super().__init__(account_id, balance)
        self.monthly_rate = parse_rate(monthly_rate)

    @property
    def rate(self) -> Decimal:
        return self.monthly_rate

    def calculate_interest(self, months: Any) -> Decimal:
        """
        Interest earned after `months` months of monthly compounding

        interest = balance * ((1 + rate) ** months - 1)

        The principal is not included. Does not modify the account.

        Raises:
            AccountError: INVALID_TERM if months is not a non-negative integer
                or the horizon is too long to compute
        """
        periods = parse_months(months)
        if self.monthly_rate == 0 or self._balance == 0 or periods == 0:
            return Decimal('0')
        try:
            return self._balance * ((1 + self.monthly_rate) ** periods - 1)
        except (Overflow, InvalidOperation):
            raise AccountError(ErrorKind.INVALID_TERM, f"Cannot compound over {periods} months")


class CheckingAccount(DepositAccount):
    """Checking account: deposits and withdrawals only"""

    kind = AccountKind.CHECKING

    @property
    def rate(self) -> Decimal:
        return Decimal('0')
