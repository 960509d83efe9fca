"""
Term Deposit (CDT) Module

A CDT locks a principal for a fixed number of months at a fixed annual rate
and pays simple interest at maturity. Lifecycle is one way: ACTIVE -> CLOSED.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Any

from .accounts import AccountKind
from .amounts import parse_amount, parse_months, parse_rate
from .errors import AccountError, ErrorKind

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class MaturityValue:
    """Balance and accumulated interest at the end of the term"""
    final_balance: Decimal
    interest: Decimal


class CDT:
    """Certificado de Depósito a Término"""

    kind = AccountKind.CDT

    def __init__(self, cdt_id: str, term_months: Any, principal: Any, annual_rate: Any):
        if not cdt_id or not str(cdt_id).strip():
            raise AccountError(ErrorKind.INVALID_IDENTIFIER, "CDT id cannot be empty")
        self.id = str(cdt_id).strip()
        self.term_months = parse_months(term_months, allow_zero=False)
        self.principal = parse_amount(principal)
        self.annual_rate = parse_rate(annual_rate)
        self.active = True

    @property
    def balance(self) -> Decimal:
        return self.principal

    @property
    def rate(self) -> Decimal:
        return self.annual_rate

    def accrued_interest(self, month: int) -> Decimal:
        """Simple interest accrued after `month` months, capped at the term"""
        elapsed = min(month, self.term_months)
        return self.principal * self.annual_rate * elapsed / MONTHS_PER_YEAR

    def maturity_value(self) -> MaturityValue:
        """Principal plus simple interest prorated over the term in years"""
        interest = self.accrued_interest(self.term_months)
        return MaturityValue(final_balance=self.principal + interest, interest=interest)

    def value_at(self, month: Any) -> Decimal:
        """Projected value after `month` months; pinned once the term ends"""
        elapsed = parse_months(month)
        return self.principal + self.accrued_interest(elapsed)

    def close(self) -> Decimal:
        """
        Close the CDT and return the matured balance

        Full maturity is paid whether or not the term has elapsed.

        Raises:
            AccountError: ALREADY_CLOSED if the CDT was closed before
        """
        if not self.active:
            raise AccountError(ErrorKind.ALREADY_CLOSED, f"CDT {self.id} is already closed")
        final_balance = self.maturity_value().final_balance
        self.active = False
        return final_balance

    def __repr__(self) -> str:
        state = "active" if self.active else "closed"
        return (
            f"CDT(id={self.id!r}, principal={self.principal}, annual_rate={self.annual_rate}, "
            f"term_months={self.term_months}, {state})"
        )
