"""
API 路由集中註冊
"""

from fastapi import APIRouter

from stockdesk.api.locale import router as locale_router
from stockdesk.api.portfolio import router as portfolio_router
from stockdesk.api.session import router as session_router
from stockdesk.api.stocks import router as stocks_router

api_router = APIRouter(prefix="/api")
api_router.include_router(session_router)
api_router.include_router(stocks_router)
api_router.include_router(portfolio_router)
api_router.include_router(locale_router)
