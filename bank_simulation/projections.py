"""
Projection Module

Month-by-month growth tables used for charting. Months run from 0 to the
requested horizon inclusive. Projections never modify the accounts.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from .accounts import AccountKind, CheckingAccount, SavingAccount
from .amounts import parse_months
from .cdt import CDT
from .errors import AccountError, ErrorKind

DEFAULT_MAX_MONTHS = 120


@dataclass(frozen=True)
class ProjectionPoint:
    """Projected balance of a single account"""
    month: int
    balance: Decimal
    interest: Decimal


@dataclass(frozen=True)
class PortfolioPoint:
    """Projected balances of the whole portfolio"""
    month: int
    saving_balance: Decimal
    checking_balance: Decimal
    cdt_balance: Decimal
    total_balance: Decimal
    total_interest: Decimal


def _horizon(months: Any, max_months: Optional[int]) -> int:
    horizon = parse_months(months)
    limit = DEFAULT_MAX_MONTHS if max_months is None else max_months
    if horizon > limit:
        raise AccountError(ErrorKind.INVALID_TERM, f"Projection horizon cannot exceed {limit} months")
    return horizon


def project_saving(account: SavingAccount, months: Any, max_months: Optional[int] = None) -> List[ProjectionPoint]:
    """Compound growth of a savings account"""
    horizon = _horizon(months, max_months)
    points = []
    for month in range(horizon + 1):
        interest = account.calculate_interest(month)
        points.append(ProjectionPoint(month=month, balance=account.balance + interest, interest=interest))
    return points


def project_checking(account: CheckingAccount, months: Any, max_months: Optional[int] = None) -> List[ProjectionPoint]:
    """Checking accounts do not grow"""
    horizon = _horizon(months, max_months)
    return [
        ProjectionPoint(month=month, balance=account.balance, interest=Decimal('0'))
        for month in range(horizon + 1)
    ]


def project_cdt(cdt: CDT, months: Any, max_months: Optional[int] = None) -> List[ProjectionPoint]:
    """
    Linear simple-interest growth of a CDT

    value(i) = principal + principal * (annual_rate / 12) * i while i is within
    the term; after the term the value stays at the matured balance.
    """
    horizon = _horizon(months, max_months)
    points = []
    for month in range(horizon + 1):
        interest = cdt.accrued_interest(month)
        points.append(ProjectionPoint(month=month, balance=cdt.principal + interest, interest=interest))
    return points


def project_account(
    account: Union[SavingAccount, CheckingAccount, CDT],
    months: Any,
    max_months: Optional[int] = None
) -> List[ProjectionPoint]:
    """Dispatch on the account kind"""
    if account.kind == AccountKind.SAVING:
        return project_saving(account, months, max_months)
    if account.kind == AccountKind.CHECKING:
        return project_checking(account, months, max_months)
    if account.kind == AccountKind.CDT:
        return project_cdt(account, months, max_months)
    raise ValueError(f"Unsupported account kind: {account.kind}")


def project_portfolio(
    saving: SavingAccount,
    checking: CheckingAccount,
    cdt: CDT,
    months: Any,
    max_months: Optional[int] = None
) -> List[PortfolioPoint]:
    """
    Combined projection of the three products

    A closed CDT no longer accrues and contributes its flat balance.
    """
    horizon = _horizon(months, max_months)
    initial_total = saving.balance + checking.balance + cdt.balance

    points = []
    for month in range(horizon + 1):
        saving_balance = saving.balance + saving.calculate_interest(month)
        checking_balance = checking.balance
        if cdt.active:
            cdt_balance = cdt.value_at(month)
        else:
            cdt_balance = cdt.balance

        total_balance = saving_balance + checking_balance + cdt_balance
        points.append(PortfolioPoint(
            month=month,
            saving_balance=saving_balance,
            checking_balance=checking_balance,
            cdt_balance=cdt_balance,
            total_balance=total_balance,
            total_interest=total_balance - initial_total
        ))
    return points
