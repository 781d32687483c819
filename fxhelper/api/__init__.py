"""
API Router

Helper endpoints under /helpers, OANDA bridge under /oanda.
"""

from fastapi import APIRouter

from fxhelper.api.endpoints import indicators, trade, journal, broker

router = APIRouter()

# Include all endpoint routers
router.include_router(indicators.router, prefix="/helpers", tags=["Indicators"])
router.include_router(trade.router, prefix="/helpers", tags=["Trade Helpers"])
router.include_router(journal.router, prefix="/helpers/journal", tags=["Journal"])
router.include_router(broker.router, prefix="/oanda", tags=["OANDA Bridge"])
