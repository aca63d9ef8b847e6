"""
投資組合 API 路由
"""

from fastapi import APIRouter, Depends

from stockdesk.api.deps import get_locale, get_session
from stockdesk.schemas.common import ApiResponse
from stockdesk.schemas.portfolio import PortfolioView
from stockdesk.services.locale import LocaleStore
from stockdesk.services.portfolio import build_portfolio_view
from stockdesk.services.session import SessionStore

router = APIRouter(prefix="/portfolio", tags=["投資組合"])


@router.get("", response_model=ApiResponse[PortfolioView])
async def get_portfolio(
    session: SessionStore = Depends(get_session),
    locale: LocaleStore = Depends(get_locale),
):
    """目前用戶的投資組合（同股票多筆紀錄已合併）"""
    return ApiResponse(data=build_portfolio_view(session, locale))
