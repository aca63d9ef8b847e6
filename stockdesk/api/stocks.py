"""
股票 API 路由

股票列表、單一股票查詢與購買。
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from stockdesk.api.deps import get_catalog, get_client, get_locale, get_session
from stockdesk.client.backend import BackendClient
from stockdesk.client.errors import NOT_AUTHENTICATED_MESSAGE, StockNotFoundError
from stockdesk.schemas.common import ApiResponse
from stockdesk.schemas.stock import BuyRequest, Stock, StockCard
from stockdesk.schemas.user import User
from stockdesk.services.catalog import StockCatalog, build_stock_cards
from stockdesk.services.locale import LocaleStore
from stockdesk.services.purchase import BuyStockDialog
from stockdesk.services.session import SessionStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stocks", tags=["股票"])


class BuyResult(BaseModel):
    """購買結果：更新後的用戶與重新整理後的股票列表"""
    user: User
    stocks: list[StockCard]


@router.get("", response_model=ApiResponse[list[StockCard]])
async def list_stocks(
    catalog: StockCatalog = Depends(get_catalog),
    session: SessionStore = Depends(get_session),
    locale: LocaleStore = Depends(get_locale),
):
    """取得股票列表"""
    await catalog.refresh()
    if catalog.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=catalog.error)
    return ApiResponse(data=build_stock_cards(catalog.stocks, session.is_logged_in, locale))


@router.get("/{stock_id}", response_model=ApiResponse[Stock])
async def get_stock(stock_id: str, client: BackendClient = Depends(get_client)):
    """取得單一股票"""
    try:
        stock = await client.get_stock(stock_id)
    except StockNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ApiResponse(data=stock)


@router.post("/{stock_id}/buy", response_model=ApiResponse[BuyResult])
async def buy_stock(
    stock_id: str,
    data: BuyRequest,
    client: BackendClient = Depends(get_client),
    session: SessionStore = Depends(get_session),
    catalog: StockCatalog = Depends(get_catalog),
    locale: LocaleStore = Depends(get_locale),
):
    """購買股票"""
    if not session.is_logged_in:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED_MESSAGE,
        )

    try:
        stock = await client.get_stock(stock_id)
    except StockNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    dialog = BuyStockDialog(
        client, session, stock, on_success=catalog.refresh, locale=locale
    )
    dialog.quantity = data.quantity
    if not await dialog.confirm():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=dialog.error)

    return ApiResponse(
        data=BuyResult(
            user=session.user,
            stocks=build_stock_cards(catalog.stocks, session.is_logged_in, locale),
        )
    )
