"""
FastAPI REST API Module

JSON endpoints a browser front end uses to drive the portfolio: deposits,
withdrawals, CDT lifecycle, interest and projection tables. Amounts travel
as decimal strings.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from . import __version__
from .accounts import AccountKind
from .amounts import round_for_display
from .config import SimulationConfig, get_config
from .errors import AccountError
from .logging_config import setup_logging
from .portfolio import Portfolio, create_default_portfolio
from .projections import ProjectionPoint, project_account, project_portfolio
from .services import (
    CDTLimits, calculate_cdt_maturity, calculate_saving_account_interest, close_cdt,
    deposit_to_checking_account, deposit_to_saving_account, open_cdt,
    withdraw_from_checking_account, withdraw_from_saving_account
)


# Pydantic models for API requests
class AmountRequest(BaseModel):
    amount: str = Field(..., description="Decimal amount as string")


class OpenCDTRequest(BaseModel):
    cdt_id: str = Field(..., description="Identifier of the new CDT")
    term_months: int = Field(..., description="Term in months")
    principal: str = Field(..., description="Decimal amount as string")
    annual_rate: str = Field(..., description="Annual rate as a fraction, e.g. 0.05")


def _money(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return str(round_for_display(value))


def _failure(result) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": result.error,
            "error_kind": result.error_kind.value if result.error_kind else None
        }
    )


def _account_view(account) -> Dict[str, Any]:
    view = {
        "kind": account.kind.value,
        "balance": _money(account.balance),
        "rate": str(account.rate)
    }
    if account.kind == AccountKind.CDT:
        view.update({
            "id": account.id,
            "term_months": account.term_months,
            "active": account.active
        })
    else:
        view["id"] = account.account_id
    return view


def _points(points: List[ProjectionPoint]) -> List[Dict[str, Any]]:
    return [
        {"month": p.month, "balance": _money(p.balance), "interest": _money(p.interest)}
        for p in points
    ]


def get_portfolio(request: Request) -> Portfolio:
    """Portfolio owned by the running application"""
    return request.app.state.portfolio


def get_settings(request: Request) -> SimulationConfig:
    return request.app.state.config


def create_app(portfolio: Optional[Portfolio] = None, config: Optional[SimulationConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    config = config or get_config()

    app = FastAPI(
        title="Bank Simulation API",
        description="Savings, checking and CDT portfolio simulation",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.config = config
    app.state.portfolio = portfolio or create_default_portfolio(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_simulation_api",
            "version": __version__
        }

    @app.get("/portfolio")
    async def get_portfolio_overview(portfolio: Portfolio = Depends(get_portfolio)):
        """Client, products, ledger and total balance"""
        client = portfolio.client
        return {
            "client": {
                "name": client.name,
                "client_id": client.client_id,
                "accounts": [
                    {"account_id": a.account_id, "balance": _money(a.balance)} for a in client.accounts
                ]
            },
            "accounts": {
                kind.value: _account_view(portfolio.account(kind)) for kind in AccountKind
            },
            "ledger": [
                {"client_id": e.client_id, "account_id": e.account_id, "balance": _money(e.balance)}
                for e in portfolio.ledger
            ],
            "total_balance": _money(portfolio.total_balance())
        }

    @app.post("/accounts/{kind}/deposit")
    async def deposit(
        kind: AccountKind,
        request: AmountRequest,
        portfolio: Portfolio = Depends(get_portfolio)
    ):
        """Deposit into the savings or checking account"""
        if kind == AccountKind.SAVING:
            result = deposit_to_saving_account(portfolio.saving, request.amount)
        elif kind == AccountKind.CHECKING:
            result = deposit_to_checking_account(portfolio.checking, request.amount)
        else:
            raise HTTPException(status_code=400, detail={"error": "Deposits are not supported for CDTs", "error_kind": None})

        if not result.success:
            raise _failure(result)
        portfolio.sync_ledger()
        return {"kind": kind.value, "new_balance": _money(result.new_balance)}

    @app.post("/accounts/{kind}/withdraw")
    async def withdraw(
        kind: AccountKind,
        request: AmountRequest,
        portfolio: Portfolio = Depends(get_portfolio)
    ):
        """Withdraw from the savings or checking account"""
        if kind == AccountKind.SAVING:
            result = withdraw_from_saving_account(portfolio.saving, request.amount)
        elif kind == AccountKind.CHECKING:
            result = withdraw_from_checking_account(portfolio.checking, request.amount)
        else:
            raise HTTPException(status_code=400, detail={"error": "Withdrawals are not supported for CDTs", "error_kind": None})

        if not result.success:
            raise _failure(result)
        portfolio.sync_ledger()
        return {"kind": kind.value, "new_balance": _money(result.new_balance)}

    @app.get("/accounts/saving/interest")
    async def saving_interest(
        months: int = 12,
        portfolio: Portfolio = Depends(get_portfolio),
        settings: SimulationConfig = Depends(get_settings)
    ):
        """Compound interest on the savings account after N months"""
        result = calculate_saving_account_interest(
            portfolio.saving, months, max_months=settings.max_projection_months
        )
        if not result.success:
            raise _failure(result)
        return {
            "months": months,
            "interest": _money(result.interest),
            "total_with_interest": _money(result.total_with_interest)
        }

    @app.get("/cdt/maturity")
    async def cdt_maturity(portfolio: Portfolio = Depends(get_portfolio)):
        """Balance of the CDT at the end of its term"""
        maturity = calculate_cdt_maturity(portfolio.cdt)
        return {
            "id": portfolio.cdt.id,
            "final_balance": _money(maturity.final_balance),
            "interest": _money(maturity.interest)
        }

    @app.post("/cdt", status_code=status.HTTP_201_CREATED)
    async def create_cdt(
        request: OpenCDTRequest,
        portfolio: Portfolio = Depends(get_portfolio),
        settings: SimulationConfig = Depends(get_settings)
    ):
        """Open a new CDT funded from the checking account"""
        result = open_cdt(
            portfolio.checking,
            portfolio.cdt,
            request.cdt_id,
            request.term_months,
            request.principal,
            request.annual_rate,
            limits=CDTLimits.from_config(settings)
        )
        if not result.success:
            raise _failure(result)

        portfolio.install_cdt(result.cdt)
        portfolio.sync_ledger()
        return {
            "cdt": _account_view(result.cdt),
            "checking_balance": _money(result.checking_balance),
            "message": "CDT created successfully"
        }

    @app.post("/cdt/close")
    async def close_current_cdt(portfolio: Portfolio = Depends(get_portfolio)):
        """Close the CDT and report its matured balance"""
        result = close_cdt(portfolio.cdt)
        if not result.success:
            raise _failure(result)
        portfolio.sync_ledger()
        return {"id": portfolio.cdt.id, "final_balance": _money(result.final_balance), "active": False}

    @app.get("/projections/portfolio")
    async def portfolio_projection(
        months: int = 12,
        portfolio: Portfolio = Depends(get_portfolio),
        settings: SimulationConfig = Depends(get_settings)
    ):
        """Month-by-month projection of the whole portfolio"""
        try:
            points = project_portfolio(
                portfolio.saving, portfolio.checking, portfolio.cdt, months,
                max_months=settings.max_projection_months
            )
        except AccountError as e:
            raise HTTPException(status_code=400, detail={"error": e.message, "error_kind": e.kind.value})

        return {
            "months": months,
            "points": [
                {
                    "month": p.month,
                    "saving_balance": _money(p.saving_balance),
                    "checking_balance": _money(p.checking_balance),
                    "cdt_balance": _money(p.cdt_balance),
                    "total_balance": _money(p.total_balance),
                    "total_interest": _money(p.total_interest)
                }
                for p in points
            ]
        }

    @app.get("/projections/{kind}")
    async def account_projection(
        kind: AccountKind,
        months: int = 12,
        portfolio: Portfolio = Depends(get_portfolio),
        settings: SimulationConfig = Depends(get_settings)
    ):
        """Month-by-month projection of a single product"""
        try:
            points = project_account(portfolio.account(kind), months, max_months=settings.max_projection_months)
        except AccountError as e:
            raise HTTPException(status_code=400, detail={"error": e.message, "error_kind": e.kind.value})
        return {"kind": kind.value, "months": months, "points": _points(points)}

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format)
    uvicorn.run(
        create_app(config=config),
        host=host or config.api_host,
        port=port or config.api_port,
        log_level="debug" if debug else "info"
    )
