"""
Test suite for services module

Tests that the account service facade turns every validation failure into a
result record, never raises AccountError, and never leaves partial state.
"""

import logging
import pytest
from decimal import Decimal

from bank_simulation.accounts import CheckingAccount, SavingAccount
from bank_simulation.cdt import CDT
from bank_simulation.errors import ErrorKind
from bank_simulation.services import (
    CDTLimits, CloseResult, InterestResult, OpenCDTResult, OperationResult,
    calculate_cdt_maturity, calculate_saving_account_interest, calculate_total_balance,
    close_cdt, deposit_to_checking_account, deposit_to_saving_account, open_cdt,
    withdraw_from_checking_account, withdraw_from_saving_account
)


class TestDepositWithdraw:
    """Test deposit and withdrawal wrappers"""

    def setup_method(self):
        """Set up test fixtures"""
        self.saving = SavingAccount("SAVING789", Decimal('2000000'), Decimal('0.006'))
        self.checking = CheckingAccount("CHECKING321", Decimal('1500000'))

    def test_saving_deposit(self):
        """Test a successful savings deposit"""
        result = deposit_to_saving_account(self.saving, "500000")

        assert result == OperationResult(success=True, new_balance=Decimal('2500000'))
        assert self.saving.balance == Decimal('2500000')

    def test_saving_withdraw(self):
        """Test a successful savings withdrawal"""
        result = withdraw_from_saving_account(self.saving, Decimal('250000.50'))

        assert result.success
        assert result.new_balance == Decimal('1749999.50')
        assert result.error is None

    def test_checking_deposit_and_withdraw(self):
        """Test checking wrappers"""
        assert deposit_to_checking_account(self.checking, 100).new_balance == Decimal('1500100')
        assert withdraw_from_checking_account(self.checking, 1500100).new_balance == Decimal('0')

    @pytest.mark.parametrize("amount", [0, -5, "abc", "", None, float('nan'), float('inf'), "Infinity"])
    def test_invalid_amount(self, amount):
        """Test invalid amounts are reported, not raised"""
        for operation, account in (
            (deposit_to_saving_account, self.saving),
            (withdraw_from_saving_account, self.saving),
            (deposit_to_checking_account, self.checking),
            (withdraw_from_checking_account, self.checking),
        ):
            before = account.balance
            result = operation(account, amount)

            assert not result.success
            assert result.error_kind == ErrorKind.INVALID_AMOUNT
            assert result.error
            assert result.new_balance == before
            assert account.balance == before

    def test_mixed_text_amount_rejected(self):
        """Test that an amount with embedded letters does not move money"""
        result = deposit_to_checking_account(self.checking, "1a2b3")

        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_AMOUNT
        assert self.checking.balance == Decimal('1500000')

    def test_insufficient_funds(self):
        """Test overdrafts are reported with the unchanged balance"""
        result = withdraw_from_checking_account(self.checking, "1500000.01")

        assert not result.success
        assert result.error_kind == ErrorKind.INSUFFICIENT_FUNDS
        assert "Insufficient funds" in result.error
        assert result.new_balance == Decimal('1500000')

    def test_failure_is_repeatable(self):
        """Test that failing twice yields the same result"""
        first = withdraw_from_saving_account(self.saving, Decimal('9999999'))
        second = withdraw_from_saving_account(self.saving, Decimal('9999999'))

        assert first == second
        assert self.saving.balance == Decimal('2000000')

    def test_operations_are_logged(self, caplog):
        """Test info on success and warning on rejection"""
        caplog.set_level(logging.INFO, logger="bank_simulation")

        deposit_to_saving_account(self.saving, 10)
        withdraw_from_saving_account(self.saving, -1)

        levels = [(r.levelname, getattr(r, "operation", None)) for r in caplog.records]
        assert ("INFO", "saving_deposit") in levels
        assert ("WARNING", "saving_withdraw") in levels


class TestInterest:
    """Test interest calculation wrapper"""

    def test_interest_result(self):
        """Test interest and total are reported together"""
        account = SavingAccount("S", Decimal('1000'), Decimal('0.01'))
        result = calculate_saving_account_interest(account, 12)

        assert isinstance(result, InterestResult)
        assert result.success
        assert result.interest == account.calculate_interest(12)
        assert result.total_with_interest == Decimal('1000') + result.interest

    def test_zero_months(self):
        """Test zero months gives zero interest"""
        account = SavingAccount("S", Decimal('1000'), Decimal('0.01'))
        result = calculate_saving_account_interest(account, 0)

        assert result.success
        assert result.interest == Decimal('0')
        assert result.total_with_interest == Decimal('1000')

    @pytest.mark.parametrize("months", [-1, 2.5, "abc"])
    def test_invalid_months(self, months):
        """Test invalid terms are reported"""
        account = SavingAccount("S", Decimal('1000'), Decimal('0.01'))
        result = calculate_saving_account_interest(account, months)

        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_TERM
        assert result.interest == Decimal('0')
        assert result.total_with_interest == Decimal('1000')

    def test_overflowing_horizon(self):
        """Test that an astronomically long horizon is reported, not raised"""
        account = SavingAccount("S", Decimal('1000'), Decimal('0.01'))
        result = calculate_saving_account_interest(account, 10**12)

        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_TERM
        assert result.total_with_interest == Decimal('1000')
        assert account.balance == Decimal('1000')

    def test_horizon_cap(self):
        """Test the optional month cap"""
        account = SavingAccount("S", Decimal('1000'), Decimal('0.01'))

        assert calculate_saving_account_interest(account, 120, max_months=120).success
        result = calculate_saving_account_interest(account, 121, max_months=120)
        assert not result.success
        assert result.error_kind == ErrorKind.INVALID_TERM
        assert "120" in result.error


class TestCDTServices:
    """Test CDT maturity and close wrappers"""

    def setup_method(self):
        """Set up test fixtures"""
        self.cdt = CDT("CDT001", 12, Decimal('1000000'), Decimal('0.05'))

    def test_maturity(self):
        """Test maturity delegates to the CDT"""
        maturity = calculate_cdt_maturity(self.cdt)
        assert maturity.final_balance == Decimal('1050000')
        assert maturity.interest == Decimal('50000')

    def test_close(self):
        """Test closing reports the matured balance"""
        result = close_cdt(self.cdt)

        assert result == CloseResult(success=True, final_balance=Decimal('1050000'))
        assert not self.cdt.active

    def test_close_twice(self):
        """Test the second close is reported as already closed"""
        close_cdt(self.cdt)
        result = close_cdt(self.cdt)

        assert not result.success
        assert result.error_kind == ErrorKind.ALREADY_CLOSED
        assert result.final_balance == Decimal('1000000')
        assert not self.cdt.active


class TestOpenCDT:
    """Test opening a CDT funded from checking"""

    def setup_method(self):
        """Set up test fixtures"""
        self.checking = CheckingAccount("CHECKING321", Decimal('1500000'))
        self.closed_cdt = CDT("CDT001", 12, Decimal('1000000'), Decimal('0.05'))
        self.closed_cdt.close()

    def test_open_cdt(self):
        """Test a CDT is created and checking is debited"""
        result = open_cdt(self.checking, self.closed_cdt, "CDT002", 6, "500000", "0.07")

        assert isinstance(result, OpenCDTResult)
        assert result.success
        assert result.cdt.id == "CDT002"
        assert result.cdt.term_months == 6
        assert result.cdt.principal == Decimal('500000')
        assert result.cdt.annual_rate == Decimal('0.07')
        assert result.cdt.active
        assert result.checking_balance == Decimal('1000000')
        assert self.checking.balance == Decimal('1000000')

    def test_open_without_previous_cdt(self):
        """Test opening the first CDT"""
        result = open_cdt(self.checking, None, "CDT002", 12, 1000, "0.05")
        assert result.success

    def test_active_cdt_blocks_new_one(self):
        """Test the current CDT must be closed first"""
        active = CDT("CDT009", 12, Decimal('1000'), Decimal('0.05'))
        result = open_cdt(self.checking, active, "CDT002", 12, 1000, "0.05")

        assert not result.success
        assert result.error_kind == ErrorKind.CDT_STILL_ACTIVE
        assert self.checking.balance == Decimal('1500000')

    @pytest.mark.parametrize("kwargs, kind", [
        ({"cdt_id": ""}, ErrorKind.INVALID_IDENTIFIER),
        ({"cdt_id": "   "}, ErrorKind.INVALID_IDENTIFIER),
        ({"principal": "0"}, ErrorKind.INVALID_AMOUNT),
        ({"principal": "-100"}, ErrorKind.INVALID_AMOUNT),
        ({"term_months": 0}, ErrorKind.INVALID_TERM),
        ({"term_months": 61}, ErrorKind.INVALID_TERM),
        ({"term_months": 1.5}, ErrorKind.INVALID_TERM),
        ({"annual_rate": "0"}, ErrorKind.INVALID_AMOUNT),
        ({"annual_rate": "0.25"}, ErrorKind.INVALID_AMOUNT),
        ({"annual_rate": "-0.01"}, ErrorKind.INVALID_AMOUNT),
        ({"principal": "1500000.01"}, ErrorKind.INSUFFICIENT_FUNDS),
    ])
    def test_rejections_leave_checking_untouched(self, kwargs, kind):
        """Test every rejected request leaves the checking balance unchanged"""
        request = {"cdt_id": "CDT002", "term_months": 12, "principal": "100000", "annual_rate": "0.05"}
        request.update(kwargs)

        result = open_cdt(self.checking, self.closed_cdt, **request)

        assert not result.success
        assert result.error_kind == kind
        assert result.cdt is None
        assert result.checking_balance == Decimal('1500000')
        assert self.checking.balance == Decimal('1500000')

    def test_custom_limits(self):
        """Test configurable term and rate limits"""
        limits = CDTLimits(min_term_months=3, max_term_months=12, max_annual_rate=Decimal('0.10'))

        short = open_cdt(self.checking, self.closed_cdt, "A", 2, 1000, "0.05", limits=limits)
        assert short.error_kind == ErrorKind.INVALID_TERM

        high = open_cdt(self.checking, self.closed_cdt, "A", 6, 1000, "0.11", limits=limits)
        assert high.error_kind == ErrorKind.INVALID_AMOUNT

        ok = open_cdt(self.checking, self.closed_cdt, "A", 12, 1000, "0.10", limits=limits)
        assert ok.success

    def test_exact_balance_can_fund(self):
        """Test the whole checking balance can be locked"""
        result = open_cdt(self.checking, self.closed_cdt, "ALL", 12, "1500000", "0.05")
        assert result.success
        assert self.checking.balance == Decimal('0')


class TestTotalBalance:
    """Test total balance aggregation"""

    def test_total_after_mutations(self):
        """Test the total tracks every valid mutation exactly"""
        saving = SavingAccount("S", Decimal('2000000'), Decimal('0.006'))
        checking = CheckingAccount("C", Decimal('1500000'))
        cdt = CDT("CDT001", 12, Decimal('1000000'), Decimal('0.05'))

        assert calculate_total_balance(saving, checking, cdt) == Decimal('4500000')

        deposit_to_saving_account(saving, "0.10")
        withdraw_from_checking_account(checking, "0.20")
        deposit_to_checking_account(checking, 300)
        withdraw_from_saving_account(saving, "-1")  # rejected

        assert calculate_total_balance(saving, checking, cdt) == (
            saving.balance + checking.balance + cdt.balance
        )
        assert calculate_total_balance(saving, checking, cdt) == Decimal('4500299.90')
