# simple_finance/routers/__init__.py
"""
API routers for Simple Finance.

Each router handles a specific domain:
- holdings: Holding CRUD
- quotes: Live quote lookup
- exchange_rates: USD->EUR rates
- portfolio: Valuation summary and snapshot history
- cron: Scheduled snapshot trigger
"""

from simple_finance.routers.cron import router as cron_router
from simple_finance.routers.exchange_rates import router as exchange_rates_router
from simple_finance.routers.holdings import router as holdings_router
from simple_finance.routers.portfolio import router as portfolio_router
from simple_finance.routers.quotes import router as quotes_router

__all__ = [
    "holdings_router",
    "quotes_router",
    "exchange_rates_router",
    "portfolio_router",
    "cron_router",
]
