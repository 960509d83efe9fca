"""
Portfolio Module

The portfolio is the single owner of the client, the three product instances
and the ledger mirror. Ledger entries are independent copies kept in a fixed
position per product; they only change when sync_ledger() is called.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Union

from .accounts import Account, AccountKind, CheckingAccount, Client, SavingAccount
from .cdt import CDT
from .config import SimulationConfig, get_config
from .logging_config import get_logger, log_operation
from .services import calculate_total_balance

LEDGER_ORDER = (AccountKind.CDT, AccountKind.SAVING, AccountKind.CHECKING)

logger = get_logger("bank_simulation.portfolio")


class Portfolio:
    """
    One client's products plus the mirrored ledger
    """

    def __init__(self, client: Client, saving: SavingAccount, checking: CheckingAccount, cdt: CDT):
        self.client = client
        self.saving = saving
        self.checking = checking
        self.cdt = cdt

        self.ledger: List[Account] = []
        for kind in LEDGER_ORDER:
            source = self.account(kind)
            entry = Account(client.client_id, self._account_id(source), source.balance)
            self.ledger.append(entry)
            client.create_account(entry)

    @staticmethod
    def _account_id(source: Union[SavingAccount, CheckingAccount, CDT]) -> str:
        if source.kind == AccountKind.CDT:
            return source.id
        return source.account_id

    def account(self, kind: AccountKind) -> Union[SavingAccount, CheckingAccount, CDT]:
        """Live product instance for a kind"""
        if kind == AccountKind.SAVING:
            return self.saving
        if kind == AccountKind.CHECKING:
            return self.checking
        if kind == AccountKind.CDT:
            return self.cdt
        raise ValueError(f"Unknown account kind: {kind}")

    def ledger_entry(self, kind: AccountKind) -> Account:
        """Ledger mirror for a kind"""
        return self.ledger[LEDGER_ORDER.index(kind)]

    def sync_ledger(self) -> None:
        """Copy the current balance of every product into its ledger entry"""
        for position, kind in enumerate(LEDGER_ORDER):
            self.ledger[position].set_balance(self.account(kind).balance)

        log_operation(
            logger, "debug", "Ledger synchronized",
            operation="sync_ledger", account_id=self.client.client_id,
            details={entry.account_id: str(entry.balance) for entry in self.ledger}
        )

    def install_cdt(self, cdt: CDT) -> None:
        """
        Replace the CDT instance with a newly opened one

        A fresh ledger mirror takes the CDT position; the previous mirror stays
        registered on the client.
        """
        self.cdt = cdt
        entry = Account(self.client.client_id, cdt.id, cdt.balance)
        self.ledger[LEDGER_ORDER.index(AccountKind.CDT)] = entry
        self.client.create_account(entry)

    def total_balance(self) -> Decimal:
        return calculate_total_balance(self.saving, self.checking, self.cdt)

    def balances(self) -> Dict[str, Decimal]:
        return {kind.value: self.account(kind).balance for kind in LEDGER_ORDER}


def create_default_portfolio(config: Optional[SimulationConfig] = None) -> Portfolio:
    """Build the demo portfolio from configuration"""
    config = config or get_config()

    client = Client(config.client_name, config.client_id)
    saving = SavingAccount(
        config.saving_account_id,
        Decimal(config.saving_balance),
        Decimal(config.saving_monthly_rate)
    )
    checking = CheckingAccount(config.checking_account_id, Decimal(config.checking_balance))
    cdt = CDT(
        config.cdt_id,
        config.cdt_term_months,
        Decimal(config.cdt_principal),
        Decimal(config.cdt_annual_rate)
    )
    return Portfolio(client, saving, checking, cdt)
