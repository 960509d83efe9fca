"""
Account Service Module

Stateless facade over the account entities. Every operation returns a result
record instead of raising, so presentation code never handles AccountError.
Preconditions are re-checked here before the entity is touched; a failed
operation leaves every balance unchanged.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Optional

from .accounts import CheckingAccount, DepositAccount, SavingAccount
from .amounts import parse_amount, parse_months, parse_rate
from .cdt import CDT, MaturityValue
from .errors import AccountError, ErrorKind
from .logging_config import get_logger, log_operation

logger = get_logger("bank_simulation.services")


@dataclass
class OperationResult:
    """Outcome of a deposit or withdrawal"""
    success: bool
    new_balance: Optional[Decimal] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass
class InterestResult:
    """Outcome of a savings interest calculation"""
    success: bool
    interest: Decimal = Decimal('0')
    total_with_interest: Optional[Decimal] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass
class CloseResult:
    """Outcome of closing a CDT"""
    success: bool
    final_balance: Optional[Decimal] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass
class OpenCDTResult:
    """Outcome of opening a CDT funded from checking"""
    success: bool
    cdt: Optional[CDT] = None
    checking_balance: Optional[Decimal] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass(frozen=True)
class CDTLimits:
    """Business rules applied when a CDT is opened"""
    min_term_months: int = 1
    max_term_months: int = 60
    max_annual_rate: Decimal = Decimal('0.20')

    @classmethod
    def from_config(cls, config) -> 'CDTLimits':
        return cls(
            min_term_months=config.cdt_min_term_months,
            max_term_months=config.cdt_max_term_months,
            max_annual_rate=Decimal(config.cdt_max_annual_rate)
        )


def _rejected(operation: str, account_id: str, error: AccountError) -> None:
    log_operation(
        logger, "warning", f"{operation} rejected: {error.message}",
        operation=operation, account_id=account_id,
        details={"error_kind": error.kind.value}
    )


def _deposit(account: DepositAccount, amount: Any, operation: str) -> OperationResult:
    try:
        value = parse_amount(amount)
        new_balance = account.deposit(value)
    except AccountError as e:
        _rejected(operation, account.account_id, e)
        return OperationResult(success=False, new_balance=account.balance, error=e.message, error_kind=e.kind)

    log_operation(
        logger, "info", f"Deposit of {value} into {account.account_id}",
        operation=operation, account_id=account.account_id,
        details={"amount": str(value), "new_balance": str(new_balance)}
    )
    return OperationResult(success=True, new_balance=new_balance)


def _withdraw(account: DepositAccount, amount: Any, operation: str) -> OperationResult:
    try:
        value = parse_amount(amount)
        if value > account.balance:
            raise AccountError(
                ErrorKind.INSUFFICIENT_FUNDS,
                f"Insufficient funds: requested {value}, available {account.balance}"
            )
        new_balance = account.withdraw(value)
    except AccountError as e:
        _rejected(operation, account.account_id, e)
        return OperationResult(success=False, new_balance=account.balance, error=e.message, error_kind=e.kind)

    log_operation(
        logger, "info", f"Withdrawal of {value} from {account.account_id}",
        operation=operation, account_id=account.account_id,
        details={"amount": str(value), "new_balance": str(new_balance)}
    )
    return OperationResult(success=True, new_balance=new_balance)


def deposit_to_saving_account(account: SavingAccount, amount: Any) -> OperationResult:
    """Deposit into a savings account"""
    return _deposit(account, amount, "saving_deposit")


def withdraw_from_saving_account(account: SavingAccount, amount: Any) -> OperationResult:
    """Withdraw from a savings account, checking funds first"""
    return _withdraw(account, amount, "saving_withdraw")


def deposit_to_checking_account(account: CheckingAccount, amount: Any) -> OperationResult:
    """Deposit into a checking account"""
    return _deposit(account, amount, "checking_deposit")


def withdraw_from_checking_account(account: CheckingAccount, amount: Any) -> OperationResult:
    """Withdraw from a checking account, checking funds first"""
    return _withdraw(account, amount, "checking_withdraw")


def calculate_saving_account_interest(
    account: SavingAccount,
    months: Any,
    max_months: Optional[int] = None
) -> InterestResult:
    """Interest accumulated on a savings account after `months` months"""
    try:
        periods = parse_months(months)
        if max_months is not None and periods > max_months:
            raise AccountError(ErrorKind.INVALID_TERM, f"Interest horizon cannot exceed {max_months} months")
        interest = account.calculate_interest(periods)
    except AccountError as e:
        _rejected("saving_interest", account.account_id, e)
        return InterestResult(
            success=False, total_with_interest=account.balance, error=e.message, error_kind=e.kind
        )
    return InterestResult(success=True, interest=interest, total_with_interest=account.balance + interest)


def calculate_cdt_maturity(cdt: CDT) -> MaturityValue:
    """Final balance of a CDT at the end of its term"""
    return cdt.maturity_value()


def close_cdt(cdt: CDT) -> CloseResult:
    """Close a CDT and report its matured balance"""
    try:
        if not cdt.active:
            raise AccountError(ErrorKind.ALREADY_CLOSED, f"CDT {cdt.id} is already closed")
        final_balance = cdt.close()
    except AccountError as e:
        _rejected("cdt_close", cdt.id, e)
        return CloseResult(success=False, final_balance=cdt.balance, error=e.message, error_kind=e.kind)

    log_operation(
        logger, "info", f"CDT {cdt.id} closed",
        operation="cdt_close", account_id=cdt.id,
        details={"final_balance": str(final_balance)}
    )
    return CloseResult(success=True, final_balance=final_balance)


def open_cdt(
    checking: CheckingAccount,
    current_cdt: Optional[CDT],
    cdt_id: Any,
    term_months: Any,
    principal: Any,
    annual_rate: Any,
    limits: Optional[CDTLimits] = None
) -> OpenCDTResult:
    """
    Open a new CDT funded by a withdrawal from the checking account

    The previous CDT must be closed first. Nothing is debited unless every
    check passes.
    """
    limits = limits or CDTLimits()
    try:
        if current_cdt is not None and current_cdt.active:
            raise AccountError(
                ErrorKind.CDT_STILL_ACTIVE,
                f"CDT {current_cdt.id} must be closed before opening a new one"
            )
        if cdt_id is None or not str(cdt_id).strip():
            raise AccountError(ErrorKind.INVALID_IDENTIFIER, "CDT id cannot be empty")

        value = parse_amount(principal)
        months = parse_months(term_months, allow_zero=False)
        if months < limits.min_term_months or months > limits.max_term_months:
            raise AccountError(
                ErrorKind.INVALID_TERM,
                f"Term must be between {limits.min_term_months} and {limits.max_term_months} months"
            )
        rate = parse_rate(annual_rate)
        if rate <= 0 or rate > limits.max_annual_rate:
            raise AccountError(
                ErrorKind.INVALID_AMOUNT,
                f"Annual rate must be greater than 0 and at most {limits.max_annual_rate}"
            )
        if value > checking.balance:
            raise AccountError(
                ErrorKind.INSUFFICIENT_FUNDS,
                f"Insufficient funds in {checking.account_id}: requested {value}, available {checking.balance}"
            )

        cdt = CDT(cdt_id, months, value, rate)
        checking_balance = checking.withdraw(value)
    except AccountError as e:
        _rejected("cdt_open", checking.account_id, e)
        return OpenCDTResult(success=False, checking_balance=checking.balance, error=e.message, error_kind=e.kind)

    log_operation(
        logger, "info", f"CDT {cdt.id} opened",
        operation="cdt_open", account_id=cdt.id,
        details={
            "principal": str(cdt.principal),
            "annual_rate": str(cdt.annual_rate),
            "term_months": cdt.term_months,
            "checking_balance": str(checking_balance)
        }
    )
    return OpenCDTResult(success=True, cdt=cdt, checking_balance=checking_balance)


def calculate_total_balance(saving: SavingAccount, checking: CheckingAccount, cdt: CDT) -> Decimal:
    """Sum of the three product balances"""
    return saving.balance + checking.balance + cdt.balance
